from uuid import UUID

from fastapi_async_sqlalchemy import db
from sqlalchemy import delete

from app.models import AccountProvider, ConnectedAccount
from app.repos.base import BaseRepo


class ConnectedAccountRepo(BaseRepo[ConnectedAccount]):
    """Repository for connected mailbox accounts."""

    def __init__(self) -> None:
        super().__init__(ConnectedAccount)

    async def list_by_user(self, user_id: UUID) -> list[ConnectedAccount]:
        """List a user's connected accounts, newest first."""
        query = self.base_stmt.where(ConnectedAccount.user_id == user_id).order_by(
            ConnectedAccount.created_at.desc()
        )
        result = await self.execute(query)
        return list(result.all())

    async def get_by_user_and_id(self, user_id: UUID, account_id: UUID) -> ConnectedAccount | None:
        """Get a connected account owned by the user."""
        query = self.base_stmt.where(ConnectedAccount.user_id == user_id, ConnectedAccount.id == account_id)
        result = await self.execute(query)
        return result.one_or_none()

    async def delete_by_user_provider_email(
        self, user_id: UUID, provider: AccountProvider, email: str, commit: bool = False
    ) -> int:
        """Delete every account matching the (user, provider, email) triple."""
        stmt = delete(ConnectedAccount).where(
            ConnectedAccount.user_id == user_id,
            ConnectedAccount.provider == provider,
            ConnectedAccount.email == email,
        )
        result = await db.session.execute(stmt)
        if commit:
            await self.commit()
        return int(result.rowcount or 0)

    async def count_by_user(self, user_id: UUID) -> int:
        return await self.count(self.base_stmt.where(ConnectedAccount.user_id == user_id))
