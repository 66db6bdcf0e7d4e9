"""
FastAPI application entry point - MailFlow API
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from dependency_injector.wiring import Provide, inject
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse
from fastapi_async_sqlalchemy import SQLAlchemyMiddleware

from app.api.middlewares.auto_commit import AutoCommitMiddleware
from app.api.routes import api_router, hooks_router
from app.api.utils.errors import create_error_response, field_errors
from app.container import ApplicationContainer
from app.controllers.auth_email.mailer import TransactionalMailer
from app.controllers.emails.feed import EmailInsertFeed
from app.controllers.oauth.provider_client import OAuthProviderClient
from app.environment import EnvironmentName
from app.exceptions import BaseError, ErrorType
from settings import settings

logger = logging.getLogger(__name__)


def _setup_error_handlers(app: FastAPI) -> None:
    """Setup FastAPI exception handlers."""

    @app.exception_handler(HTTPException)
    async def handle_http_error(request: Request, exc: HTTPException) -> JSONResponse:
        """Handle FastAPI HTTPException errors."""
        return create_error_response(
            error_type="http_error", message=str(exc.detail), status_code=exc.status_code or 400
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Report invalid request fields next to the offending field name."""
        return create_error_response(
            error_type=ErrorType.INVALID_DATA.value,
            message="Invalid request",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            fields=field_errors(exc.errors()),
        )

    @app.exception_handler(BaseError)
    async def handle_app_error(request: Request, exc: BaseError) -> JSONResponse:
        """Handle custom BaseError exceptions."""
        if exc.status_code >= 400 and exc.status_code < 500:
            logger.warning(f"A user-related (HTTP 4xx) error occurred; {exc}", extra=exc.extra)
        else:
            logger.exception(f"An unhandled app exception occurred; {exc}", extra=exc.extra)

        return create_error_response(
            error_type=exc.error_type.value, message=exc.message, status_code=exc.status_code
        )

    @app.exception_handler(Exception)
    async def handle_generic_error(request: Request, exc: Exception) -> JSONResponse:
        """Handle any unhandled exceptions."""
        logger.exception(f"An unhandled exception occurred; error: {exc}")

        return create_error_response(
            error_type=ErrorType.UNHANDLED_EXCEPTION.value,
            message="An unexpected error occurred",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


@inject
async def _shutdown(
    provider_client: OAuthProviderClient = Provide[ApplicationContainer.controllers.oauth_provider_client],
    mailer: TransactionalMailer = Provide[ApplicationContainer.controllers.transactional_mailer],
    feed: EmailInsertFeed = Provide[ApplicationContainer.controllers.email_insert_feed],
) -> None:
    """Release the shared HTTP sessions and the realtime listener connection."""
    await provider_client.close_session()
    await mailer.close_session()
    await feed.close()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield
    await _shutdown()


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    app = FastAPI(
        title="MailFlow API",
        description="Tracked senders, connected mailboxes and synchronized emails",
        version="1.0.0",
        lifespan=lifespan,
    )

    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title=app.title,
            version=app.version,
            description=app.description,
            routes=app.routes,
        )

        openapi_schema["components"]["securitySchemes"] = {
            "BearerAuth": {
                "type": "http",
                "scheme": "bearer",
                "bearerFormat": "JWT",
                "description": "Session access token issued by the auth provider",
            }
        }

        # The health check, the OAuth callback and the hooks are called without a session
        public_prefixes = ("/health", "/hooks/")
        for path in openapi_schema["paths"]:
            if path.startswith(public_prefixes) or path.endswith("/callback"):
                continue
            for method in openapi_schema["paths"][path]:
                if method in ["get", "post", "put", "delete", "patch"]:
                    openapi_schema["paths"][path][method]["security"] = [{"BearerAuth": []}]

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    setattr(app, "openapi", custom_openapi)

    _setup_error_handlers(app)

    # Add auto-commit middleware FIRST (it will run LAST, after SQLAlchemy middleware creates the session)
    app.add_middleware(AutoCommitMiddleware)

    database_url = f"{settings.database.async_host}/{settings.database.name}"
    app.add_middleware(
        SQLAlchemyMiddleware,
        db_url=database_url,
        engine_args={
            "pool_size": settings.database.min_pool_size,
            "max_overflow": settings.database.max_pool_size - settings.database.min_pool_size,
            "pool_pre_ping": True,
            "pool_recycle": 300,
        },
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.app_origin] if settings.environment != EnvironmentName.DEVELOPMENT else ["*"],
        allow_methods=["*"],
        allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
    )

    app.include_router(api_router, prefix="/v1")
    app.include_router(hooks_router, prefix="/hooks")

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "ok"}

    return app
