"""
OAuth controller for connecting Gmail / Outlook mailboxes.
"""

import logging
from datetime import UTC, datetime, timedelta
from urllib.parse import quote, urlencode, urlparse
from uuid import UUID

import aiohttp
from sqlalchemy.exc import SQLAlchemyError

from app.controllers.oauth.provider_client import OAuthProviderClient, TokenSet
from app.controllers.oauth.providers import OAuthProvider, get_provider
from app.controllers.oauth.state import OAuthState, decode_state, encode_state
from app.exceptions import InvalidDataError, InvalidOAuthStateError, OAuthConfigurationError, OAuthProviderError
from app.models import AccountProvider, ConnectedAccount
from app.repos.connected_account import ConnectedAccountRepo
from app.utils.tokens import TokenCipher
from settings import settings

logger = logging.getLogger(__name__)

CONNECTIONS_PATH = "/dashboard/connections"


def connections_url(origin: str, **params: str) -> str:
    """Build the app's connections page URL; spaces are encoded as %20."""
    return f"{origin.rstrip('/')}{CONNECTIONS_PATH}?{urlencode(params, quote_via=quote)}"


def error_redirect(message: str) -> str:
    return connections_url(settings.app_origin, error=message)


def app_origin(redirect_url: str | None) -> str:
    """Origin of the page that started the flow, or the default app origin."""
    if redirect_url:
        try:
            parsed = urlparse(redirect_url)
        except ValueError:
            parsed = None
        if parsed is not None and parsed.scheme in ("http", "https") and parsed.netloc:
            return f"{parsed.scheme}://{parsed.netloc}"
    return settings.app_origin


class AuthorizationController:
    """Controller for the provider OAuth authorization-code flow."""

    def __init__(self, connected_account_repo: ConnectedAccountRepo, provider_client: OAuthProviderClient) -> None:
        self._connected_account_repo = connected_account_repo
        self._provider_client = provider_client

    def build_authorization_url(
        self, provider: AccountProvider, user_id: str | None, redirect_url: str | None = None
    ) -> str:
        """Build the provider consent URL carrying the encoded state."""
        oauth_provider = get_provider(provider)
        if not oauth_provider.client_id:
            logger.error(f"OAuth client id not configured; provider: {provider.value}")
            raise OAuthConfigurationError(
                f"{oauth_provider.display_name} client id not configured", action=f"authorize_{provider.value}"
            )
        if not user_id:
            raise InvalidDataError("user_id is required", action=f"authorize_{provider.value}")

        state = encode_state(OAuthState(user_id=user_id, redirect_url=redirect_url))
        params = {
            "client_id": oauth_provider.client_id,
            "redirect_uri": oauth_provider.callback_url,
            "response_type": "code",
            "scope": " ".join(oauth_provider.scopes),
            **oauth_provider.extra_params,
            "state": state,
        }
        return f"{oauth_provider.authorize_url}?{urlencode(params)}"

    async def handle_callback(
        self, provider: AccountProvider, code: str | None, state: str | None, error: str | None
    ) -> str:
        """
        Complete the authorization-code flow and return the URL to redirect the browser to.

        Every failure is terminal and reported through the ``error`` query parameter;
        token contents and provider payloads are never part of the redirect.
        """
        oauth_provider = get_provider(provider)

        if error:
            logger.warning(f"{oauth_provider.display_name} OAuth error: {error}")
            return error_redirect(f"{oauth_provider.display_name} authorization was denied")

        if not code or not state:
            return error_redirect("Missing authorization code")

        try:
            oauth_state = decode_state(state)
            user_id = UUID(oauth_state.user_id)
        except (InvalidOAuthStateError, ValueError):
            logger.warning(f"Rejected OAuth callback with malformed state; provider: {provider.value}")
            return error_redirect("Invalid authorization state")

        if not oauth_provider.client_id or not oauth_provider.client_secret:
            logger.error(f"OAuth credentials not configured; provider: {provider.value}")
            return error_redirect(f"{oauth_provider.display_name} credentials not configured")

        try:
            tokens = await self._provider_client.exchange_code(oauth_provider, code)
        except (OAuthProviderError, aiohttp.ClientError):
            logger.exception(f"Failed to exchange authorization code; provider: {provider.value}")
            return error_redirect("Failed to exchange authorization code")

        try:
            email = await self._provider_client.fetch_account_email(oauth_provider, tokens.access_token)
        except (OAuthProviderError, aiohttp.ClientError):
            logger.exception(f"Failed to resolve connected mailbox; provider: {provider.value}")
            return error_redirect("Failed to fetch account details")

        if not await self._store_account(oauth_provider, user_id, email, tokens):
            return error_redirect("Failed to save account")

        logger.info(f"Connected mailbox; provider: {provider.value}, user_id: {user_id}")
        return connections_url(app_origin(oauth_state.redirect_url), success=provider.value)

    async def _store_account(
        self,
        oauth_provider: OAuthProvider,
        user_id: UUID,
        email: str,
        tokens: TokenSet,
    ) -> bool:
        """
        Replace the stored grant for (user, provider, email).

        The delete and the insert are committed separately: a failed insert leaves the
        user without a connection for that mailbox, never with duplicates.
        """
        await self._connected_account_repo.delete_by_user_provider_email(
            user_id, oauth_provider.provider, email, commit=True
        )

        expires_at = datetime.now(UTC) + timedelta(seconds=tokens.expires_in) if tokens.expires_in else None
        account = ConnectedAccount(
            user_id=user_id,
            provider=oauth_provider.provider,
            email=email,
            access_token=TokenCipher.encrypt(tokens.access_token),
            refresh_token=TokenCipher.encrypt_optional(tokens.refresh_token),
            expires_at=expires_at,
        )
        try:
            await self._connected_account_repo.add(account, commit=True)
        except SQLAlchemyError:
            logger.exception(f"Failed to save connected account; provider: {oauth_provider.provider.value}")
            await self._connected_account_repo.rollback()
            return False
        return True
