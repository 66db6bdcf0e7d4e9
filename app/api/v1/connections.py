"""
Connections router - connected mailbox accounts.
"""

import logging
import uuid

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Path, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.api.middlewares.authentication import CurrentUser, get_current_user
from app.api.payloads import APIError, Connection, ConnectionListResponse, DeleteResponse
from app.api.utils.errors import create_error_response
from app.container import ApplicationContainer
from app.controllers.connections.connection_controller import ConnectionController

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get(
    "",
    response_model=ConnectionListResponse,
    responses={500: {"model": APIError, "description": "Internal server error"}},
    summary="List connected accounts",
    description="Lists connected mailboxes, newest first. Accounts past their token expiry are reported as expired.",
)
@inject
async def list_connections(
    user: CurrentUser = Depends(get_current_user),
    connection_controller: ConnectionController = Depends(
        Provide[ApplicationContainer.controllers.connection_controller]
    ),
) -> ConnectionListResponse | JSONResponse:
    try:
        accounts = await connection_controller.list_accounts(user.id)
    except SQLAlchemyError:
        logger.exception("Failed to load connected accounts")
        return create_error_response(
            error_type="internal_error",
            message="Failed to load connected accounts",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return ConnectionListResponse(data=[Connection.from_account(account) for account in accounts])


@router.delete(
    "/{connection_id}",
    response_model=DeleteResponse,
    responses={
        400: {"model": APIError, "description": "Confirmation required"},
        404: {"model": APIError, "description": "Connected account not found"},
        500: {"model": APIError, "description": "Internal server error"},
    },
    summary="Disconnect an account",
)
@inject
async def disconnect(
    connection_id: uuid.UUID = Path(..., examples=["0b7e3a9e-3f4d-4c55-8d0c-8b1b0c6f2d10"]),
    confirm: bool = Query(False, description="Must be true; syncing stops until the mailbox is reconnected"),
    user: CurrentUser = Depends(get_current_user),
    connection_controller: ConnectionController = Depends(
        Provide[ApplicationContainer.controllers.connection_controller]
    ),
) -> DeleteResponse | JSONResponse:
    try:
        await connection_controller.disconnect(user.id, connection_id, confirm)
    except SQLAlchemyError:
        logger.exception("Failed to disconnect account")
        return create_error_response(
            error_type="internal_error",
            message="Failed to disconnect account",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return DeleteResponse()
