from .base import Base
from .connected_account import AccountProvider, ConnectedAccount, ConnectionStatus
from .tracked_email import TrackedEmail
from .tracked_sender import TrackedSender

__all__ = [
    "Base",
    "AccountProvider",
    "ConnectedAccount",
    "ConnectionStatus",
    "TrackedEmail",
    "TrackedSender",
]
