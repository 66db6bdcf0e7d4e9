import importlib.util
import json
from pathlib import Path
from types import ModuleType
from unittest.mock import AsyncMock, Mock
from uuid import uuid4

import pytest

from app.controllers.emails import feed as feed_module
from app.controllers.emails.feed import CHANNEL, EmailInsert, EmailInsertFeed

from .conftest import OTHER_USER_ID, USER_ID

EMAIL_ID = uuid4()
SENDER_ID = uuid4()
MIGRATIONS = Path(__file__).parent.parent / "migrations" / "versions"
MIGRATION = MIGRATIONS / "20261017_120000_4c1d2e8f9a01_initial_migration.py"


def _payload(user_id: object = USER_ID, email_id: object = EMAIL_ID) -> str:
    return json.dumps({"user_id": str(user_id), "id": str(email_id), "sender_mail_id": str(SENDER_ID)})


@pytest.fixture
def connection() -> Mock:
    connection = Mock()
    connection.is_closed.return_value = False
    connection.add_listener = AsyncMock()
    connection.remove_listener = AsyncMock()
    connection.close = AsyncMock()
    return connection


@pytest.fixture
def feed(connection: Mock, monkeypatch: pytest.MonkeyPatch) -> EmailInsertFeed:
    monkeypatch.setattr(feed_module.asyncpg, "connect", AsyncMock(return_value=connection))
    return EmailInsertFeed(dsn="postgresql://localhost:5432/mailflow_test")


def _notify(feed: EmailInsertFeed, payload: str) -> None:
    feed._on_notification(None, 1, CHANNEL, payload)


def _load_migration() -> ModuleType:
    spec = importlib.util.spec_from_file_location("initial_migration", MIGRATION)
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_trigger_publishes_identifiers_only() -> None:
    function = _load_migration().NOTIFY_FUNCTION

    assert f"'{CHANNEL}'" in function
    for key in ("'user_id'", "'id'", "'sender_mail_id'"):
        assert key in function
    for column in ("NEW.subject", "NEW.content", "NEW.sender_email"):
        assert column not in function


async def test_rows_reach_only_their_owner(feed: EmailInsertFeed, connection: Mock) -> None:
    async with feed.subscribe(USER_ID) as mine, feed.subscribe(OTHER_USER_ID) as theirs:
        connection.add_listener.assert_awaited_once_with(CHANNEL, feed._on_notification)

        _notify(feed, _payload())

        assert mine.get_nowait() == EmailInsert(id=EMAIL_ID, sender_mail_id=SENDER_ID)
        assert theirs.empty()

    assert feed.subscriber_count(USER_ID) == 0


@pytest.mark.parametrize(
    "payload",
    [
        "not json",
        "[1]",
        json.dumps({"id": str(EMAIL_ID), "sender_mail_id": str(SENDER_ID)}),
        json.dumps({"user_id": str(USER_ID), "id": str(EMAIL_ID)}),
        _payload(user_id="x"),
        _payload(email_id=None),
    ],
)
async def test_malformed_notifications_are_dropped(feed: EmailInsertFeed, payload: str) -> None:
    async with feed.subscribe(USER_ID) as queue:
        _notify(feed, payload)

        assert queue.empty()


async def test_full_queue_drops_inserts(feed: EmailInsertFeed, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(feed_module, "SUBSCRIBER_QUEUE_SIZE", 1)
    later_id = uuid4()

    async with feed.subscribe(USER_ID) as queue:
        _notify(feed, _payload())
        _notify(feed, _payload(email_id=later_id))

        assert queue.qsize() == 1
        assert queue.get_nowait() == EmailInsert(id=EMAIL_ID, sender_mail_id=SENDER_ID)


async def test_close_ends_subscriptions(feed: EmailInsertFeed, connection: Mock) -> None:
    async with feed.subscribe(USER_ID) as queue:
        assert feed.is_listening

        await feed.close()

        assert queue.get_nowait() is None

    connection.remove_listener.assert_awaited_once_with(CHANNEL, feed._on_notification)
    connection.close.assert_awaited_once()
    assert not feed.is_listening
