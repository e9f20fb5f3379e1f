"""Long-poll broker: one registry, its notifier and its timeout supervisor."""
from __future__ import annotations

import asyncio
import logging

from direct_chat.domain.entities.message import Message
from direct_chat.infrastructure.longpoll.notifier import Notifier
from direct_chat.infrastructure.longpoll.registry import Waiter, WaitRegistry
from direct_chat.infrastructure.longpoll.supervisor import TimeoutSupervisor

logger = logging.getLogger(__name__)


class LongPollBroker:
    """Implements application.ports.long_poll.WaitBroker."""

    def __init__(self, timeout: float = 30.0, max_waiters: int = 10_000) -> None:
        self.registry = WaitRegistry(max_waiters)
        self.notifier = Notifier(self.registry)
        self.supervisor = TimeoutSupervisor(self.registry, timeout)

    def open(self, waiting_user_id: int, counterpart_user_id: int | None = None) -> Waiter:
        future: asyncio.Future[list[Message]] = asyncio.get_running_loop().create_future()
        waiter = Waiter(waiting_user_id, counterpart_user_id, future)
        self.registry.register(waiter)
        self.supervisor.arm(waiter)
        return waiter

    async def wait(self, waiter: Waiter) -> list[Message]:
        try:
            return await waiter.future
        except asyncio.CancelledError:
            self.cancel(waiter)
            raise

    def cancel(self, waiter: Waiter) -> bool:
        """Withdraw a waiter its owner no longer needs."""
        removed = self.registry.remove(waiter.id)
        waiter.disarm()
        if removed and not waiter.future.done():
            waiter.future.cancel()
        return removed

    def publish(self, message: Message) -> int:
        return self.notifier.publish(message)

    def pending(self) -> int:
        return len(self.registry)

    def close(self) -> int:
        """Release every pending waiter with an empty result."""
        waiters = self.registry.drain_all()
        for waiter in waiters:
            try:
                waiter.resolve([])
            except Exception:
                logger.warning("Failed to release waiter %s", waiter.id, exc_info=True)
        if waiters:
            logger.info("Released %d pending long-poll waiter(s)", len(waiters))
        return len(waiters)
