from datetime import UTC, datetime
from enum import Enum

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin, UserOwnedMixin
from .decorators.types import EnumStringType


class AccountProvider(Enum):
    gmail = "gmail"
    outlook = "outlook"


class ConnectionStatus(Enum):
    connected = "connected"
    expired = "expired"


class ConnectedAccount(Base, UserOwnedMixin, TimestampMixin):
    """Mailbox connected through a provider OAuth grant."""

    __tablename__ = "connected_accounts"

    provider: Mapped[AccountProvider] = mapped_column(EnumStringType(AccountProvider), nullable=False)
    email: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    access_token: Mapped[str] = mapped_column(sa.Text(), nullable=False, comment="Encrypted access token")
    refresh_token: Mapped[str | None] = mapped_column(sa.Text(), nullable=True, comment="Encrypted refresh token")
    expires_at: Mapped[datetime | None] = mapped_column(sa.DateTime(timezone=True), nullable=True)

    def is_expired(self, now: datetime | None = None) -> bool:
        """An account without an expiry never expires; a past expiry only changes how it is displayed."""
        if self.expires_at is None:
            return False
        return self.expires_at < (now or datetime.now(UTC))

    @property
    def status(self) -> ConnectionStatus:
        return ConnectionStatus.expired if self.is_expired() else ConnectionStatus.connected

    def __repr__(self) -> str:
        return f"<ConnectedAccount(email='{self.email}', provider='{self.provider.value}')>"
