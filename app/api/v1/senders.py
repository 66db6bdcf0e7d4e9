"""
Senders router - tracked sender registry.
"""

import logging
import uuid

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Path, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.api.middlewares.authentication import CurrentUser, get_current_user
from app.api.payloads import APIError, DeleteResponse, Sender, SenderListResponse, SenderRequest, SenderResponse
from app.api.utils.errors import create_error_response
from app.container import ApplicationContainer
from app.controllers.senders.sender_controller import SenderController

logger = logging.getLogger(__name__)
router = APIRouter()


def _store_error(message: str) -> JSONResponse:
    logger.exception(message)
    return create_error_response(
        error_type="internal_error", message=message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
    )


@router.get(
    "",
    response_model=SenderListResponse,
    responses={500: {"model": APIError, "description": "Internal server error"}},
    summary="List tracked senders",
    description="Lists the signed-in user's tracked sender addresses, newest first",
)
@inject
async def list_senders(
    user: CurrentUser = Depends(get_current_user),
    sender_controller: SenderController = Depends(Provide[ApplicationContainer.controllers.sender_controller]),
) -> SenderListResponse | JSONResponse:
    try:
        senders = await sender_controller.list_senders(user.id)
    except SQLAlchemyError:
        return _store_error("Failed to load sender IDs")

    return SenderListResponse(data=[Sender.model_validate(sender) for sender in senders])


@router.post(
    "",
    response_model=SenderResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": APIError, "description": "Sender already tracked"},
        422: {"model": APIError, "description": "Invalid email address"},
        500: {"model": APIError, "description": "Internal server error"},
    },
    summary="Add a sender",
    description="Starts tracking a sender address. Only emails from tracked senders are captured.",
)
@inject
async def create_sender(
    body: SenderRequest,
    user: CurrentUser = Depends(get_current_user),
    sender_controller: SenderController = Depends(Provide[ApplicationContainer.controllers.sender_controller]),
) -> SenderResponse | JSONResponse:
    try:
        sender = await sender_controller.create_sender(user.id, str(body.email), body.label)
    except SQLAlchemyError:
        return _store_error("Failed to add sender")

    return SenderResponse(data=Sender.model_validate(sender))


@router.patch(
    "/{sender_id}",
    response_model=SenderResponse,
    responses={
        400: {"model": APIError, "description": "Sender already tracked"},
        404: {"model": APIError, "description": "Sender not found"},
        422: {"model": APIError, "description": "Invalid email address"},
        500: {"model": APIError, "description": "Internal server error"},
    },
    summary="Edit a sender",
)
@inject
async def update_sender(
    body: SenderRequest,
    sender_id: uuid.UUID = Path(..., examples=["5a1f7c52-7d7e-4b7e-9a43-2f0f8a5f3c11"]),
    user: CurrentUser = Depends(get_current_user),
    sender_controller: SenderController = Depends(Provide[ApplicationContainer.controllers.sender_controller]),
) -> SenderResponse | JSONResponse:
    try:
        sender = await sender_controller.update_sender(user.id, sender_id, str(body.email), body.label)
    except SQLAlchemyError:
        return _store_error("Failed to update sender")

    return SenderResponse(data=Sender.model_validate(sender))


@router.delete(
    "/{sender_id}",
    response_model=DeleteResponse,
    responses={
        400: {"model": APIError, "description": "Confirmation required"},
        404: {"model": APIError, "description": "Sender not found"},
        500: {"model": APIError, "description": "Internal server error"},
    },
    summary="Remove a sender",
    description="Stops tracking a sender and deletes all of its emails. Requires confirm=true.",
)
@inject
async def delete_sender(
    sender_id: uuid.UUID = Path(..., examples=["5a1f7c52-7d7e-4b7e-9a43-2f0f8a5f3c11"]),
    confirm: bool = Query(False, description="Must be true; the sender's emails are deleted as well"),
    user: CurrentUser = Depends(get_current_user),
    sender_controller: SenderController = Depends(Provide[ApplicationContainer.controllers.sender_controller]),
) -> DeleteResponse | JSONResponse:
    try:
        await sender_controller.delete_sender(user.id, sender_id, confirm)
    except SQLAlchemyError:
        return _store_error("Failed to delete sender")

    return DeleteResponse()
