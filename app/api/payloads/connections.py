import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from app.models import AccountProvider, ConnectedAccount, ConnectionStatus


class Connection(BaseModel):
    """A connected mailbox. Tokens are never part of the payload."""

    id: uuid.UUID
    provider: AccountProvider
    email: str
    expires_at: datetime | None
    created_at: datetime
    status: ConnectionStatus

    @classmethod
    def from_account(cls, account: ConnectedAccount) -> "Connection":
        return cls(
            id=account.id,
            provider=account.provider,
            email=account.email,
            expires_at=account.expires_at,
            created_at=account.created_at,
            status=account.status,
        )


class ConnectionListResponse(BaseModel):
    request_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    data: list[Connection]
