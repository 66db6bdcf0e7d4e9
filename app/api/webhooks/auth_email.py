"""
Auth email hook - called by the managed auth provider whenever it needs to send
one of its login emails.
"""

import logging
from typing import Any

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError

from app.api.payloads import AuthEmailHookPayload
from app.container import ApplicationContainer
from app.controllers.auth_email.hook_controller import AuthEmailHookController, AuthEmailRequest

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post(
    "/auth-email",
    summary="Auth email hook",
    description="Always answers 200 with an empty object so the platform never falls back to its default email",
)
@inject
async def auth_email_hook(
    request: Request,
    hook_controller: AuthEmailHookController = Depends(
        Provide[ApplicationContainer.controllers.auth_email_hook_controller]
    ),
) -> dict[str, Any]:
    try:
        payload = AuthEmailHookPayload.model_validate(await request.json())
    except (ValidationError, ValueError):
        logger.warning("Ignoring malformed auth email hook payload")
        return {}

    try:
        await hook_controller.handle(
            AuthEmailRequest(
                email=payload.user.email,
                token=payload.email_data.token,
                token_hash=payload.email_data.token_hash,
                redirect_to=payload.email_data.redirect_to,
                email_action_type=payload.email_data.email_action_type,
                site_url=payload.email_data.site_url,
            )
        )
    except Exception:
        logger.exception("Auth email hook failed")

    return {}
