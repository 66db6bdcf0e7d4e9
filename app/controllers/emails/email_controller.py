import logging
from dataclasses import dataclass
from datetime import date
from uuid import UUID

from app.controllers.emails.table import SortOrder, export_csv, export_filename, filter_emails, sort_emails
from app.exceptions import EntityNotFoundError
from app.models import TrackedEmail, TrackedSender
from app.repos.connected_account import ConnectedAccountRepo
from app.repos.tracked_email import TrackedEmailRepo
from app.repos.tracked_sender import TrackedSenderRepo


@dataclass
class CsvExport:
    filename: str
    content: str
    row_count: int


@dataclass
class DashboardSummary:
    sender_count: int
    email_count: int
    connected_account_count: int


class EmailController:
    """Controller for the per-sender email spreadsheet."""

    def __init__(
        self,
        tracked_sender_repo: TrackedSenderRepo,
        tracked_email_repo: TrackedEmailRepo,
        connected_account_repo: ConnectedAccountRepo,
    ) -> None:
        self._logger = logging.getLogger(__name__)
        self._tracked_sender_repo = tracked_sender_repo
        self._tracked_email_repo = tracked_email_repo
        self._connected_account_repo = connected_account_repo

    async def _get_sender(self, user_id: UUID, sender_id: UUID) -> TrackedSender:
        sender = await self._tracked_sender_repo.get_by_user_and_id(user_id, sender_id)
        if sender is None:
            raise EntityNotFoundError("Sender not found", user=user_id)
        return sender

    async def list_emails(
        self, user_id: UUID, sender_id: UUID, search: str | None = None, order: SortOrder = SortOrder.desc
    ) -> list[TrackedEmail]:
        """The sender's emails matching ``search``, ordered by received time."""
        sender = await self._get_sender(user_id, sender_id)
        emails = await self._tracked_email_repo.list_by_sender(sender.id)
        return sort_emails(filter_emails(emails, search), order)  # type: ignore[return-value]

    async def get_email(self, user_id: UUID, email_id: UUID) -> TrackedEmail | None:
        """A single email, or None when it is gone or belongs to another user."""
        return await self._tracked_email_repo.get_by_user_and_id(user_id, email_id)

    async def export(self, user_id: UUID, sender_id: UUID, today: date | None = None) -> CsvExport:
        """
        Export every email of the sender, newest first, regardless of the current search.

        Raises:
            EntityNotFoundError: Unknown sender, or the sender has no emails yet.
        """
        sender = await self._get_sender(user_id, sender_id)
        emails = await self._tracked_email_repo.list_by_sender(sender.id)
        if not emails:
            raise EntityNotFoundError("No emails to export", action="export_emails", user=user_id)

        self._logger.info(f"Exporting emails; sender_id: {sender.id}, rows: {len(emails)}")
        return CsvExport(
            filename=export_filename(sender.email, today), content=export_csv(emails), row_count=len(emails)
        )

    async def summary(self, user_id: UUID) -> DashboardSummary:
        return DashboardSummary(
            sender_count=await self._tracked_sender_repo.count_by_user(user_id),
            email_count=await self._tracked_email_repo.count_by_user(user_id),
            connected_account_count=await self._connected_account_repo.count_by_user(user_id),
        )
