"""
Emails router - per-sender spreadsheet, CSV export and the realtime insert stream.
"""

import asyncio
import logging
import uuid
from typing import AsyncGenerator

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Path, Query, Request, status
from fastapi.responses import JSONResponse, Response, StreamingResponse
from fastapi_async_sqlalchemy import db
from sqlalchemy.exc import SQLAlchemyError

from app.api.middlewares.authentication import CurrentUser, get_current_user
from app.api.payloads import APIError, DashboardResponse, DashboardSummary, Email, EmailListResponse
from app.api.utils.errors import create_error_response
from app.container import ApplicationContainer
from app.controllers.emails.email_controller import EmailController
from app.controllers.emails.feed import EmailInsertFeed
from app.controllers.emails.table import SortOrder

logger = logging.getLogger(__name__)
router = APIRouter()

KEEP_ALIVE_SECONDS = 15


@router.get(
    "/senders/{sender_id}/emails",
    response_model=EmailListResponse,
    responses={
        404: {"model": APIError, "description": "Sender not found"},
        500: {"model": APIError, "description": "Internal server error"},
    },
    summary="List a sender's emails",
    description="Lists the emails captured from a tracked sender, filtered by subject or content",
)
@inject
async def list_emails(
    sender_id: uuid.UUID = Path(...),
    search: str | None = Query(None, description="Case-insensitive text to look for in subject or content"),
    order: SortOrder = Query(SortOrder.desc, description="Order by received time"),
    user: CurrentUser = Depends(get_current_user),
    email_controller: EmailController = Depends(Provide[ApplicationContainer.controllers.email_controller]),
) -> EmailListResponse | JSONResponse:
    try:
        emails = await email_controller.list_emails(user.id, sender_id, search, order)
    except SQLAlchemyError:
        logger.exception(f"Failed to load emails for sender {sender_id}")
        return create_error_response(
            error_type="internal_error",
            message="Failed to load emails",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return EmailListResponse(data=[Email.model_validate(email) for email in emails])


@router.get(
    "/senders/{sender_id}/emails/export",
    response_class=Response,
    responses={
        200: {"content": {"text/csv": {}}, "description": "CSV export of the sender's emails"},
        404: {"model": APIError, "description": "Sender not found or no emails to export"},
    },
    summary="Export a sender's emails to CSV",
)
@inject
async def export_emails(
    sender_id: uuid.UUID = Path(...),
    user: CurrentUser = Depends(get_current_user),
    email_controller: EmailController = Depends(Provide[ApplicationContainer.controllers.email_controller]),
) -> Response:
    export = await email_controller.export(user.id, sender_id)
    headers = {"Content-Disposition": f'attachment; filename="{export.filename}"'}
    return Response(content=export.content, media_type="text/csv", headers=headers)


@router.get(
    "/emails/stream",
    response_class=StreamingResponse,
    summary="Stream new emails",
    description="Server-Sent Events stream with one `insert` event per email captured for the user's senders",
)
@inject
async def stream_emails(
    request: Request,
    user: CurrentUser = Depends(get_current_user),
    feed: EmailInsertFeed = Depends(Provide[ApplicationContainer.controllers.email_insert_feed]),
    email_controller: EmailController = Depends(Provide[ApplicationContainer.controllers.email_controller]),
) -> StreamingResponse:
    async def events() -> AsyncGenerator[str, None]:
        async with feed.subscribe(user.id) as queue:
            while not await request.is_disconnected():
                try:
                    inserted = await asyncio.wait_for(queue.get(), timeout=KEEP_ALIVE_SECONDS)
                except asyncio.TimeoutError:
                    yield ": keep-alive\n\n"
                    continue
                if inserted is None:
                    break

                # The request session is closed once streaming starts
                async with db():
                    email = await email_controller.get_email(user.id, inserted.id)
                if email is None:
                    continue
                yield f"event: insert\ndata: {Email.model_validate(email).model_dump_json()}\n\n"

    headers = {"Cache-Control": "no-cache", "X-Accel-Buffering": "no"}
    return StreamingResponse(events(), media_type="text/event-stream", headers=headers)

@router.get(
    "/dashboard",
    response_model=DashboardResponse,
    summary="Dashboard summary",
    description="Counts of tracked senders, captured emails and connected accounts",
)
@inject
async def dashboard(
    user: CurrentUser = Depends(get_current_user),
    email_controller: EmailController = Depends(Provide[ApplicationContainer.controllers.email_controller]),
) -> DashboardResponse:
    summary = await email_controller.summary(user.id)
    return DashboardResponse(data=DashboardSummary.model_validate(summary))
