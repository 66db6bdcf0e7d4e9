from uuid import UUID

from app.models import TrackedEmail, TrackedSender
from app.repos.base import BaseRepo


class TrackedEmailRepo(BaseRepo[TrackedEmail]):
    """Read access to the emails written by the synchronization job."""

    def __init__(self) -> None:
        super().__init__(TrackedEmail)

    async def list_by_sender(self, sender_id: UUID) -> list[TrackedEmail]:
        """List a sender's emails, most recently received first."""
        query = self.base_stmt.where(TrackedEmail.sender_mail_id == sender_id).order_by(
            TrackedEmail.received_at.desc()
        )
        result = await self.execute(query)
        return list(result.all())

    async def count_by_user(self, user_id: UUID) -> int:
        query = self.base_stmt.join(TrackedSender, TrackedSender.id == TrackedEmail.sender_mail_id).where(
            TrackedSender.user_id == user_id
        )
        return await self.count(query)

    async def get_by_user_and_id(self, user_id: UUID, email_id: UUID) -> TrackedEmail | None:
        """Get an email captured from one of the user's senders."""
        query = self.base_stmt.join(TrackedSender, TrackedSender.id == TrackedEmail.sender_mail_id).where(
            TrackedSender.user_id == user_id, TrackedEmail.id == email_id
        )
        result = await self.execute(query)
        return result.one_or_none()
