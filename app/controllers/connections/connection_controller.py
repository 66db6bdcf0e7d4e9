import logging
from uuid import UUID

from app.exceptions import ConfirmationRequiredError, EntityNotFoundError
from app.models import ConnectedAccount
from app.repos.connected_account import ConnectedAccountRepo

logger = logging.getLogger(__name__)


class ConnectionController:
    """Controller for the user's connected mailbox accounts."""

    def __init__(self, connected_account_repo: ConnectedAccountRepo) -> None:
        self._connected_account_repo = connected_account_repo

    async def list_accounts(self, user_id: UUID) -> list[ConnectedAccount]:
        return await self._connected_account_repo.list_by_user(user_id)

    async def disconnect(self, user_id: UUID, account_id: UUID, confirm: bool) -> ConnectedAccount:
        """
        Delete a connected account.

        Raises:
            EntityNotFoundError: The account does not exist or belongs to another user.
            ConfirmationRequiredError: ``confirm`` was not given; nothing is deleted.
        """
        account = await self._connected_account_repo.get_by_user_and_id(user_id, account_id)
        if account is None:
            raise EntityNotFoundError("Connected account not found", action="disconnect_account", user=user_id)
        if not confirm:
            raise ConfirmationRequiredError(
                f"Disconnect {account.email}? You'll need to reconnect to sync emails.",
                action="disconnect_account",
                user=user_id,
            )

        await self._connected_account_repo.delete(account)
        logger.info(f"Disconnected account; provider: {account.provider.value}, user_id: {user_id}")
        return account
