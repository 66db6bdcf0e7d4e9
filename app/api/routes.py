from fastapi import APIRouter

from app.api.v1.connections import router as connections_router
from app.api.v1.emails import router as emails_router
from app.api.v1.oauth import router as oauth_router
from app.api.v1.senders import router as senders_router
from app.api.webhooks.auth_email import router as auth_email_router

api_router = APIRouter()

api_router.include_router(senders_router, prefix="/senders", tags=["senders"])
api_router.include_router(connections_router, prefix="/connections", tags=["connections"])
api_router.include_router(oauth_router, prefix="/oauth", tags=["oauth"])
api_router.include_router(emails_router, tags=["emails"])

hooks_router = APIRouter()

hooks_router.include_router(auth_email_router, tags=["hooks"])
