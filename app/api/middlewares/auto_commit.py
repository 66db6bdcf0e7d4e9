"""
Commits the request's database session once the route has produced a response.
"""

import logging
from typing import Awaitable, Callable

from fastapi import Request, Response
from fastapi_async_sqlalchemy import db
from fastapi_async_sqlalchemy.exceptions import MissingSessionError
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class AutoCommitMiddleware(BaseHTTPMiddleware):
    """Flushes pending writes that a controller left uncommitted.

    Controllers commit the writes whose failure they report to the caller themselves;
    anything still pending is committed here, and rolled back when the route raised.
    """

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        try:
            response = await call_next(request)
        except Exception as e:
            await self._rollback(e)
            raise

        if response.status_code < 400:
            await self._commit(request)
        else:
            await self._rollback(None)
        return response

    async def _commit(self, request: Request) -> None:
        try:
            await db.session.commit()
        except MissingSessionError:
            logger.debug(f"No database session for {request.url.path} - skipping commit")
        except SQLAlchemyError as e:
            logger.warning(f"Failed to commit database transaction: {e}")

    async def _rollback(self, error: Exception | None) -> None:
        try:
            await db.session.rollback()
            if error is not None:
                logger.error(f"Database transaction rolled back due to error: {error}")
        except MissingSessionError:
            logger.debug("No database session found for rollback - skipping rollback")
        except SQLAlchemyError as e:
            logger.warning(f"Failed to rollback database transaction: {e}")
