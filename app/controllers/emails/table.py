"""
Spreadsheet helpers for a sender's emails: search, ordering and CSV export.
"""

from datetime import date, datetime
from enum import Enum
from typing import Iterable, Protocol, Sequence

CSV_HEADERS = ("Sender Email", "Subject", "Received Date", "Received Time", "Content")
CONTENT_EXPORT_LIMIT = 500


class SortOrder(Enum):
    asc = "asc"
    desc = "desc"


class EmailRow(Protocol):
    sender_email: str
    subject: str
    content: str | None
    received_at: datetime


def matches(email: EmailRow, search: str) -> bool:
    """Case-insensitive substring match against subject or content."""
    needle = search.lower()
    return needle in (email.subject or "").lower() or needle in (email.content or "").lower()


def filter_emails(emails: Iterable[EmailRow], search: str | None) -> list[EmailRow]:
    if not search:
        return list(emails)
    return [email for email in emails if matches(email, search)]


def sort_emails(emails: Iterable[EmailRow], order: SortOrder = SortOrder.desc) -> list[EmailRow]:
    return sorted(emails, key=lambda email: email.received_at, reverse=order == SortOrder.desc)


def _quote(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def to_csv_row(email: EmailRow) -> str:
    content = (email.content or "")[:CONTENT_EXPORT_LIMIT].replace('"', '""')
    return ",".join(
        [
            email.sender_email,
            _quote(email.subject or ""),
            email.received_at.strftime("%Y-%m-%d"),
            email.received_at.strftime("%H:%M:%S"),
            f'"{content}"',
        ]
    )


def export_csv(emails: Sequence[EmailRow]) -> str:
    """Render rows as CSV; subject and content are quoted and content is cut at 500 characters."""
    return "\n".join([",".join(CSV_HEADERS), *(to_csv_row(email) for email in emails)])


def export_filename(sender_email: str | None, today: date | None = None) -> str:
    return f"{sender_email or 'emails'}-{(today or date.today()).isoformat()}.csv"
