"""In-process registry of pending long-poll waiters."""
from __future__ import annotations

import asyncio
import logging
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID

from direct_chat.application.exceptions import CapacityError
from direct_chat.domain.entities.message import Message

logger = logging.getLogger(__name__)

WaitKey = tuple[int, int | None]

HIGH_WATER_RATIO = 0.8


@dataclass(eq=False, slots=True)
class Waiter:
    """A suspended request waiting for the next message of a conversation.

    ``counterpart_user_id=None`` accepts a message from any sender. The future
    belongs to the event loop of the request that opened the wait; resolve it
    from that loop only.
    """

    waiting_user_id: int
    counterpart_user_id: int | None
    future: asyncio.Future[list[Message]]
    id: UUID = field(default_factory=uuid.uuid4)
    registered_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    timer: asyncio.TimerHandle | None = None

    @property
    def key(self) -> WaitKey:
        return (self.waiting_user_id, self.counterpart_user_id)

    def resolve(self, messages: list[Message]) -> bool:
        """Complete the wait. Returns False if the request is already gone."""
        self.disarm()
        if self.future.done():
            return False
        self.future.set_result(messages)
        return True

    def disarm(self) -> None:
        if self.timer is not None:
            self.timer.cancel()
            self.timer = None


def matches(waiter: Waiter, message: Message) -> bool:
    """True if ``message`` belongs to the conversation ``waiter`` is watching."""
    if waiter.waiting_user_id == message.to_user_id and waiter.counterpart_user_id in (
        None,
        message.from_user_id,
    ):
        return True
    return (
        waiter.waiting_user_id == message.from_user_id
        and waiter.counterpart_user_id == message.to_user_id
    )


def _candidate_keys(message: Message) -> set[WaitKey]:
    return {
        (message.to_user_id, message.from_user_id),
        (message.to_user_id, None),
        (message.from_user_id, message.to_user_id),
    }


class WaitRegistry:
    """Pending waiters keyed by (waiting user, counterpart or None).

    ``register``, ``remove`` and ``drain_matching`` are atomic with respect to
    each other. A waiter leaves the registry exactly once.
    """

    def __init__(self, max_waiters: int = 10_000) -> None:
        self._max_waiters = max_waiters
        self._high_water = max(1, int(max_waiters * HIGH_WATER_RATIO))
        self._buckets: dict[WaitKey, dict[UUID, Waiter]] = {}
        self._index: dict[UUID, WaitKey] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, handle: object) -> bool:
        return handle in self._index

    def register(self, waiter: Waiter) -> UUID:
        with self._lock:
            if waiter.id in self._index:
                raise ValueError(f"Waiter {waiter.id} is already registered")
            if len(self._index) >= self._max_waiters:
                raise CapacityError("Too many pending requests, retry later")
            self._buckets.setdefault(waiter.key, {})[waiter.id] = waiter
            self._index[waiter.id] = waiter.key
            size = len(self._index)

        if size == self._high_water:
            logger.warning(
                "Long-poll registry at %d/%d pending waiters", size, self._max_waiters,
            )
        logger.debug("Waiter registered: %s key=%s (total=%d)", waiter.id, waiter.key, size)
        return waiter.id

    def remove(self, handle: UUID) -> bool:
        with self._lock:
            removed = self._pop(handle) is not None
        if removed:
            logger.debug("Waiter removed: %s", handle)
        return removed

    def drain_matching(self, message: Message) -> list[Waiter]:
        """Remove and return every waiter interested in ``message``."""
        matched: list[Waiter] = []
        with self._lock:
            for key in _candidate_keys(message):
                bucket = self._buckets.get(key)
                if not bucket:
                    continue
                for waiter_id, waiter in list(bucket.items()):
                    if matches(waiter, message):
                        self._pop(waiter_id)
                        matched.append(waiter)
        return matched

    def drain_all(self) -> list[Waiter]:
        with self._lock:
            waiters = [w for bucket in self._buckets.values() for w in bucket.values()]
            self._buckets.clear()
            self._index.clear()
        return waiters

    def _pop(self, handle: UUID) -> Waiter | None:
        key = self._index.pop(handle, None)
        if key is None:
            return None
        bucket = self._buckets[key]
        waiter = bucket.pop(handle)
        if not bucket:
            del self._buckets[key]
        return waiter
