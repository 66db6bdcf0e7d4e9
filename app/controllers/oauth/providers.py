from dataclasses import dataclass, field
from typing import Any

from app.models import AccountProvider
from settings import settings


@dataclass(frozen=True)
class OAuthProvider:
    """Static description of a mailbox provider's OAuth endpoints."""

    provider: AccountProvider
    display_name: str
    authorize_url: str
    token_url: str
    userinfo_url: str
    scopes: tuple[str, ...]
    email_fields: tuple[str, ...] = ("email",)
    extra_params: dict[str, str] = field(default_factory=dict)

    @property
    def client_id(self) -> str | None:
        return self._credentials.client_id

    @property
    def client_secret(self) -> str | None:
        return self._credentials.client_secret

    @property
    def callback_url(self) -> str:
        return f"{settings.public_url.rstrip('/')}/v1/oauth/{self.provider.value}/callback"

    @property
    def _credentials(self) -> Any:
        if self.provider == AccountProvider.outlook:
            return settings.microsoft
        return settings.google

    def extract_email(self, userinfo: dict[str, Any]) -> str | None:
        for name in self.email_fields:
            value = userinfo.get(name)
            if value:
                return str(value)
        return None


PROVIDERS: dict[AccountProvider, OAuthProvider] = {
    AccountProvider.gmail: OAuthProvider(
        provider=AccountProvider.gmail,
        display_name="Google",
        authorize_url="https://accounts.google.com/o/oauth2/v2/auth",
        token_url="https://oauth2.googleapis.com/token",
        userinfo_url="https://www.googleapis.com/oauth2/v2/userinfo",
        scopes=(
            "https://www.googleapis.com/auth/gmail.readonly",
            "https://www.googleapis.com/auth/userinfo.email",
        ),
        extra_params={"access_type": "offline", "prompt": "consent"},
    ),
    AccountProvider.outlook: OAuthProvider(
        provider=AccountProvider.outlook,
        display_name="Microsoft",
        authorize_url="https://login.microsoftonline.com/common/oauth2/v2.0/authorize",
        token_url="https://login.microsoftonline.com/common/oauth2/v2.0/token",
        userinfo_url="https://graph.microsoft.com/v1.0/me",
        scopes=("offline_access", "https://graph.microsoft.com/Mail.Read", "https://graph.microsoft.com/User.Read"),
        email_fields=("mail", "userPrincipalName"),
        extra_params={"prompt": "consent"},
    ),
}


def get_provider(provider: AccountProvider) -> OAuthProvider:
    return PROVIDERS[provider]
