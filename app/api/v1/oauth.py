"""
OAuth router - connects Gmail / Outlook mailboxes through the provider consent flow.
"""

import logging

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Query
from fastapi.responses import RedirectResponse

from app.api.middlewares.authentication import CurrentUser, get_current_user
from app.api.payloads import APIError, AuthorizeRequest, AuthorizeResponse
from app.container import ApplicationContainer
from app.controllers.oauth.authorization_controller import AuthorizationController, error_redirect
from app.models import AccountProvider

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post(
    "/{provider}/authorize",
    response_model=AuthorizeResponse,
    responses={400: {"model": APIError, "description": "Provider not configured or missing user"}},
    summary="Start a mailbox connection",
    description="Returns the provider consent URL. The browser is sent back to the callback endpoint afterwards.",
)
@inject
async def authorize(
    provider: AccountProvider,
    body: AuthorizeRequest | None = None,
    user: CurrentUser = Depends(get_current_user),
    authorization_controller: AuthorizationController = Depends(
        Provide[ApplicationContainer.controllers.authorization_controller]
    ),
) -> AuthorizeResponse:
    redirect_url = body.redirect_url if body else None
    url = authorization_controller.build_authorization_url(provider, str(user.id), redirect_url)
    return AuthorizeResponse(url=url)


@router.get(
    "/{provider}/callback",
    response_class=RedirectResponse,
    status_code=302,
    summary="Provider OAuth callback",
    description="Completes the consent flow and redirects the browser to the app's connections page",
)
@inject
async def callback(
    provider: AccountProvider,
    code: str | None = Query(None),
    state: str | None = Query(None),
    error: str | None = Query(None),
    authorization_controller: AuthorizationController = Depends(
        Provide[ApplicationContainer.controllers.authorization_controller]
    ),
) -> RedirectResponse:
    try:
        location = await authorization_controller.handle_callback(provider, code, state, error)
    except Exception:
        logger.exception(f"OAuth callback failed; provider: {provider.value}")
        location = error_redirect("An unexpected error occurred")

    return RedirectResponse(location, status_code=302)
