"""
Auth email hook: renders and sends the passwordless login emails requested by
the managed auth provider.
"""

import logging
from dataclasses import dataclass
from urllib.parse import quote

import aiohttp

from app.controllers.auth_email.mailer import TransactionalMailer
from app.controllers.auth_email.renderer import render_auth_email
from app.exceptions import MailerError
from settings import settings


@dataclass
class AuthEmailRequest:
    email: str
    token: str | None
    token_hash: str
    redirect_to: str
    email_action_type: str
    site_url: str | None = None


def build_confirm_url(auth_url: str, token_hash: str, action_type: str, redirect_to: str) -> str:
    verify_type = "signup" if action_type == "signup" else "magiclink"
    return (
        f"{auth_url.rstrip('/')}/auth/v1/verify?token={quote(token_hash, safe='')}"
        f"&type={verify_type}&redirect_to={quote(redirect_to, safe='')}"
    )


class AuthEmailHookController:
    """Turns auth events into branded emails; never raises to the caller."""

    def __init__(self, mailer: TransactionalMailer) -> None:
        self._logger = logging.getLogger(__name__)
        self._mailer = mailer

    async def handle(self, request: AuthEmailRequest) -> bool:
        """
        Render and send the email for an auth event.

        Returns:
            True when the email API accepted the message. Failures are logged and
            reported as False so the hook endpoint can still answer 200.
        """
        if not self._mailer.is_configured:
            self._logger.warning("Transactional email API key not configured; leaving delivery to the platform")
            return False

        try:
            confirm_url = build_confirm_url(
                settings.auth.url, request.token_hash, request.email_action_type, request.redirect_to
            )
            rendered = render_auth_email(request.email_action_type, confirm_url, request.token)
            self._logger.info(f"Sending auth email; type: {request.email_action_type}")
            await self._mailer.send(request.email, rendered.subject, rendered.html)
        except (MailerError, aiohttp.ClientError, TimeoutError):
            self._logger.exception(f"Failed to send auth email; type: {request.email_action_type}")
            return False
        return True
