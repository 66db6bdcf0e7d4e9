from uuid import UUID

from app.models import TrackedSender
from app.repos.base import BaseRepo


class TrackedSenderRepo(BaseRepo[TrackedSender]):
    """Repository for tracked sender addresses."""

    def __init__(self) -> None:
        super().__init__(TrackedSender)

    async def list_by_user(self, user_id: UUID) -> list[TrackedSender]:
        """List a user's senders, newest first."""
        query = self.base_stmt.where(TrackedSender.user_id == user_id).order_by(TrackedSender.created_at.desc())
        result = await self.execute(query)
        return list(result.all())

    async def get_by_user_and_id(self, user_id: UUID, sender_id: UUID) -> TrackedSender | None:
        """Get a sender owned by the user."""
        query = self.base_stmt.where(TrackedSender.user_id == user_id, TrackedSender.id == sender_id)
        result = await self.execute(query)
        return result.one_or_none()

    async def get_by_user_and_email(self, user_id: UUID, email: str) -> TrackedSender | None:
        """Get a user's sender by address."""
        query = self.base_stmt.where(TrackedSender.user_id == user_id, TrackedSender.email == email)
        result = await self.execute(query)
        return result.one_or_none()

    async def count_by_user(self, user_id: UUID) -> int:
        return await self.count(self.base_stmt.where(TrackedSender.user_id == user_id))
