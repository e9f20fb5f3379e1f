from __future__ import annotations

import logging

from direct_chat.infrastructure.longpoll.registry import Waiter, WaitRegistry

logger = logging.getLogger(__name__)


class TimeoutSupervisor:
    """Bounds how long a waiter may stay registered.

    On expiry the waiter is removed and resolved with an empty list, unless a
    publish already took it out of the registry.
    """

    def __init__(self, registry: WaitRegistry, timeout: float) -> None:
        if timeout <= 0:
            raise ValueError("Long-poll timeout must be positive")
        self._registry = registry
        self._timeout = timeout

    def arm(self, waiter: Waiter) -> None:
        loop = waiter.future.get_loop()
        waiter.timer = loop.call_later(self._timeout, self._expire, waiter)

    def _expire(self, waiter: Waiter) -> None:
        waiter.timer = None
        if not self._registry.remove(waiter.id):
            return
        try:
            if waiter.resolve([]):
                logger.debug("Waiter %s expired after %.1fs", waiter.id, self._timeout)
        except Exception:
            logger.warning("Failed to expire waiter %s", waiter.id, exc_info=True)
