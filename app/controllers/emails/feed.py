"""
Realtime feed of rows inserted into ``emails``.

A trigger on the table publishes the identifiers of every insert with ``pg_notify``;
one dedicated asyncpg connection listens and fans them out to per-user subscriber
queues. Subscribers read the row itself back from the database. There is no replay
and no de-duplication against rows a client fetched earlier.
"""

import asyncio
import json
import logging
from collections import defaultdict
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator
from uuid import UUID

import asyncpg

from settings import settings

CHANNEL = "tracked_email_inserted"
SUBSCRIBER_QUEUE_SIZE = 100


@dataclass(frozen=True)
class EmailInsert:
    id: UUID
    sender_mail_id: UUID


# None tells a subscriber the feed has shut down
FeedQueue = asyncio.Queue[EmailInsert | None]


class EmailInsertFeed:
    """Fans database insert notifications out to subscribed users."""

    def __init__(self, dsn: str | None = None) -> None:
        self._logger = logging.getLogger(__name__)
        self._dsn = dsn
        self._connection: asyncpg.Connection | None = None
        self._lock = asyncio.Lock()
        self._subscribers: dict[UUID, set[FeedQueue]] = defaultdict(set)

    @property
    def is_listening(self) -> bool:
        return self._connection is not None and not self._connection.is_closed()

    async def start(self) -> None:
        """Open the listener connection if it is not already open."""
        async with self._lock:
            if self.is_listening:
                return
            self._connection = await asyncpg.connect(self._dsn or settings.database.dsn)
            await self._connection.add_listener(CHANNEL, self._on_notification)
            self._logger.info(f"Listening for email inserts on channel {CHANNEL}")

    async def close(self) -> None:
        """Stop listening and end every open subscription."""
        for queues in list(self._subscribers.values()):
            for queue in list(queues):
                self._put(queue, None)

        async with self._lock:
            if self._connection is None:
                return
            connection, self._connection = self._connection, None
            try:
                if not connection.is_closed():
                    await connection.remove_listener(CHANNEL, self._on_notification)
            finally:
                await connection.close()
            self._logger.info("Email insert listener closed")

    @asynccontextmanager
    async def subscribe(self, user_id: UUID) -> AsyncIterator[FeedQueue]:
        """Yield a queue receiving the emails inserted for the user's senders."""
        await self.start()
        queue: FeedQueue = asyncio.Queue(maxsize=SUBSCRIBER_QUEUE_SIZE)
        self._subscribers[user_id].add(queue)
        try:
            yield queue
        finally:
            self._subscribers[user_id].discard(queue)
            if not self._subscribers[user_id]:
                del self._subscribers[user_id]

    def subscriber_count(self, user_id: UUID) -> int:
        return len(self._subscribers.get(user_id, ()))

    def _put(self, queue: FeedQueue, item: EmailInsert | None) -> bool:
        try:
            queue.put_nowait(item)
        except asyncio.QueueFull:
            return False
        return True

    def _on_notification(self, connection: Any, pid: int, channel: str, payload: str) -> None:
        try:
            message = json.loads(payload)
            user_id = UUID(message["user_id"])
            inserted = EmailInsert(id=UUID(message["id"]), sender_mail_id=UUID(message["sender_mail_id"]))
        except (ValueError, KeyError, TypeError, AttributeError):
            self._logger.warning(f"Dropping malformed notification on {channel}")
            return

        for queue in list(self._subscribers.get(user_id, ())):
            if not self._put(queue, inserted):
                self._logger.warning(f"Subscriber queue full, dropping email insert; user_id: {user_id}")
