from datetime import datetime
from uuid import UUID

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class TrackedEmail(Base, TimestampMixin):
    """Email captured from a tracked sender.

    Rows are written by the external synchronization job; this service only reads them.
    Deleting the sender removes its emails through the foreign key cascade.
    """

    __tablename__ = "emails"

    sender_mail_id: Mapped[UUID] = mapped_column(
        sa.ForeignKey("sender_mail_ids.id", ondelete="CASCADE"), nullable=False
    )
    sender_email: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    subject: Mapped[str] = mapped_column(sa.Text(), nullable=False, server_default="")
    content: Mapped[str | None] = mapped_column(sa.Text(), nullable=True)
    received_at: Mapped[datetime] = mapped_column(sa.DateTime(timezone=True), nullable=False)

    __table_args__ = (sa.Index("ix_emails_sender_mail_id_received_at", "sender_mail_id", "received_at"),)
