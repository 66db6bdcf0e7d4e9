import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from app.exceptions import ConfirmationRequiredError, EntityAlreadyExistError, EntityNotFoundError
from app.models import TrackedSender
from app.repos.tracked_sender import TrackedSenderRepo

logger = logging.getLogger(__name__)

DUPLICATE_SENDER_MESSAGE = "This email is already being tracked"


class SenderController:
    """Controller for the tracked sender registry."""

    def __init__(self, tracked_sender_repo: TrackedSenderRepo) -> None:
        self._tracked_sender_repo = tracked_sender_repo

    async def list_senders(self, user_id: UUID) -> list[TrackedSender]:
        return await self._tracked_sender_repo.list_by_user(user_id)

    async def get_sender(self, user_id: UUID, sender_id: UUID) -> TrackedSender:
        sender = await self._tracked_sender_repo.get_by_user_and_id(user_id, sender_id)
        if sender is None:
            raise EntityNotFoundError("Sender not found", user=user_id)
        return sender

    async def create_sender(self, user_id: UUID, email: str, label: str | None) -> TrackedSender:
        """Start tracking a sender address. The address must already be validated."""
        if await self._tracked_sender_repo.get_by_user_and_email(user_id, email) is not None:
            raise EntityAlreadyExistError(DUPLICATE_SENDER_MESSAGE, action="create_sender", user=user_id)

        sender = TrackedSender(user_id=user_id, email=email, label=label or None)
        try:
            await self._tracked_sender_repo.add(sender)
        except IntegrityError as e:
            # Lost a race with a concurrent insert of the same address.
            await self._tracked_sender_repo.rollback()
            raise EntityAlreadyExistError(DUPLICATE_SENDER_MESSAGE, action="create_sender", user=user_id) from e
        logger.info(f"Tracking new sender; user_id: {user_id}")
        return sender

    async def update_sender(self, user_id: UUID, sender_id: UUID, email: str, label: str | None) -> TrackedSender:
        sender = await self.get_sender(user_id, sender_id)
        if email != sender.email:
            existing = await self._tracked_sender_repo.get_by_user_and_email(user_id, email)
            if existing is not None and existing.id != sender.id:
                raise EntityAlreadyExistError(DUPLICATE_SENDER_MESSAGE, action="update_sender", user=user_id)

        try:
            return await self._tracked_sender_repo.update(sender, {"email": email, "label": label or None})
        except IntegrityError as e:
            await self._tracked_sender_repo.rollback()
            raise EntityAlreadyExistError(DUPLICATE_SENDER_MESSAGE, action="update_sender", user=user_id) from e

    async def delete_sender(self, user_id: UUID, sender_id: UUID, confirm: bool) -> TrackedSender:
        """Stop tracking a sender; its emails go with it through the database cascade."""
        sender = await self.get_sender(user_id, sender_id)
        if not confirm:
            raise ConfirmationRequiredError(
                f"Remove {sender.email} from tracked senders? This will also delete all associated emails.",
                action="delete_sender",
                user=user_id,
            )

        await self._tracked_sender_repo.delete(sender)
        logger.info(f"Removed sender; user_id: {user_id}")
        return sender
