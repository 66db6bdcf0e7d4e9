import asyncio
import logging
from dataclasses import dataclass
from typing import Any

import aiohttp

from app.controllers.oauth.providers import OAuthProvider
from app.exceptions import OAuthProviderError
from settings import settings


@dataclass
class TokenSet:
    access_token: str
    refresh_token: str | None = None
    expires_in: int | None = None


class OAuthProviderClient:
    """HTTP client for provider token and identity endpoints."""

    def __init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        self._http_session: aiohttp.ClientSession | None = None
        self._session_lock = asyncio.Lock()

    async def init_session(self) -> aiohttp.ClientSession:
        """Initialize the shared HTTP session."""
        async with self._session_lock:
            if self._http_session is None or self._http_session.closed:
                timeout = aiohttp.ClientTimeout(total=settings.http.timeout)
                self._http_session = aiohttp.ClientSession(timeout=timeout)
            return self._http_session

    async def close_session(self) -> None:
        """Close HTTP session."""
        if self._http_session:
            await self._http_session.close()
            self._http_session = None

    async def exchange_code(self, provider: OAuthProvider, code: str) -> TokenSet:
        """Exchange an authorization code for tokens using the server-held client credentials."""
        session = await self.init_session()
        form = {
            "code": code,
            "client_id": provider.client_id or "",
            "client_secret": provider.client_secret or "",
            "redirect_uri": provider.callback_url,
            "grant_type": "authorization_code",
        }
        async with session.post(provider.token_url, data=form) as response:
            body = await self._read_json(response)
            if response.status < 200 or response.status >= 300:
                # The provider payload stays in the logs; callers only ever see a generic message.
                self._logger.error(
                    f"Token exchange failed; provider: {provider.provider.value}, status: {response.status}, "
                    f"error: {body.get('error')}, description: {body.get('error_description')}"
                )
                raise OAuthProviderError("Token exchange failed")

        access_token = body.get("access_token")
        if not access_token:
            self._logger.error(f"Token exchange returned no access token; provider: {provider.provider.value}")
            raise OAuthProviderError("Token exchange returned no access token")

        expires_in = body.get("expires_in")
        return TokenSet(
            access_token=str(access_token),
            refresh_token=body.get("refresh_token") or None,
            expires_in=int(expires_in) if expires_in else None,
        )

    async def fetch_account_email(self, provider: OAuthProvider, access_token: str) -> str:
        """Resolve the mailbox address behind a fresh access token."""
        session = await self.init_session()
        headers = {"Authorization": f"Bearer {access_token}"}
        async with session.get(provider.userinfo_url, headers=headers) as response:
            body = await self._read_json(response)
            if response.status < 200 or response.status >= 300:
                self._logger.error(
                    f"Identity lookup failed; provider: {provider.provider.value}, status: {response.status}"
                )
                raise OAuthProviderError("Identity lookup failed")

        email = provider.extract_email(body)
        if not email:
            raise OAuthProviderError("Identity response has no email address")
        return email

    async def _read_json(self, response: aiohttp.ClientResponse) -> dict[str, Any]:
        try:
            body = await response.json(content_type=None)
        except (aiohttp.ContentTypeError, ValueError):
            self._logger.warning(f"Non-JSON response from {response.url}; status: {response.status}")
            return {}
        return body if isinstance(body, dict) else {}
