import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.schema import UniqueConstraint

from .base import Base, TimestampMixin, UserOwnedMixin


class TrackedSender(Base, UserOwnedMixin, TimestampMixin):
    """Sender address a user wants to capture emails from."""

    __tablename__ = "sender_mail_ids"

    email: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    label: Mapped[str | None] = mapped_column(sa.String(255), nullable=True)

    __table_args__ = (UniqueConstraint("user_id", "email", name="uq_sender_mail_ids_user_id_email"),)

    def __repr__(self) -> str:
        return f"<TrackedSender(email='{self.email}', label='{self.label}')>"
