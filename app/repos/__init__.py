from .connected_account import ConnectedAccountRepo
from .tracked_email import TrackedEmailRepo
from .tracked_sender import TrackedSenderRepo

__all__ = [
    "ConnectedAccountRepo",
    "TrackedEmailRepo",
    "TrackedSenderRepo",
]
