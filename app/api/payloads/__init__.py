from .common import DeleteResponse
from .connections import Connection, ConnectionListResponse
from .emails import DashboardResponse, DashboardSummary, Email, EmailListResponse
from .error import APIError, ErrorDetail
from .hooks import AuthEmailHookPayload
from .oauth import AuthorizeRequest, AuthorizeResponse
from .senders import Sender, SenderListResponse, SenderRequest, SenderResponse

__all__ = [
    "APIError",
    "AuthEmailHookPayload",
    "AuthorizeRequest",
    "AuthorizeResponse",
    "Connection",
    "ConnectionListResponse",
    "DashboardResponse",
    "DashboardSummary",
    "DeleteResponse",
    "Email",
    "EmailListResponse",
    "ErrorDetail",
    "Sender",
    "SenderListResponse",
    "SenderRequest",
    "SenderResponse",
]
