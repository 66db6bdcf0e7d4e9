import asyncio
import logging

import aiohttp

from app.exceptions import MailerError
from settings import settings


class TransactionalMailer:
    """Posts rendered emails to the transactional email API."""

    def __init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        self._http_session: aiohttp.ClientSession | None = None
        self._session_lock = asyncio.Lock()

    @property
    def is_configured(self) -> bool:
        return bool(settings.mailer.api_key)

    async def init_session(self) -> aiohttp.ClientSession:
        """Initialize HTTP session for email delivery."""
        async with self._session_lock:
            if self._http_session is None or self._http_session.closed:
                timeout = aiohttp.ClientTimeout(total=settings.mailer.timeout)
                self._http_session = aiohttp.ClientSession(timeout=timeout)
            return self._http_session

    async def close_session(self) -> None:
        """Close HTTP session."""
        if self._http_session:
            await self._http_session.close()
            self._http_session = None

    async def send(self, to: str, subject: str, html: str) -> int:
        """
        Send a single email.

        Returns:
            The HTTP status of the email API.

        Raises:
            MailerError: The API is not configured or rejected the message.
        """
        if not self.is_configured:
            raise MailerError("Transactional email API key not configured")

        session = await self.init_session()
        body = {"from": settings.mailer.sender, "to": [to], "subject": subject, "html": html}
        headers = {"Authorization": f"Bearer {settings.mailer.api_key}"}
        async with session.post(settings.mailer.api_url, json=body, headers=headers) as response:
            response_body = await response.text()
            self._logger.info(f"Email API response; status: {response.status}, body: {response_body}")
            if response.status < 200 or response.status >= 300:
                raise MailerError(f"Email API rejected message with status {response.status}")
            return response.status
