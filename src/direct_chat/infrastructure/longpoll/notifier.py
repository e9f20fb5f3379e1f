from __future__ import annotations

import logging

from direct_chat.domain.entities.message import Message
from direct_chat.infrastructure.longpoll.registry import WaitRegistry

logger = logging.getLogger(__name__)


class Notifier:
    """Hands a freshly stored message to every waiter watching its conversation."""

    def __init__(self, registry: WaitRegistry) -> None:
        self._registry = registry

    def publish(self, message: Message) -> int:
        """Resolve all matching waiters with ``[message]``. Returns how many were resolved."""
        waiters = self._registry.drain_matching(message)
        resolved = 0
        for waiter in waiters:
            try:
                if waiter.resolve([message]):
                    resolved += 1
                else:
                    logger.debug("Waiter %s gone before delivery", waiter.id)
            except Exception:
                logger.warning("Failed to resolve waiter %s", waiter.id, exc_info=True)

        if waiters:
            logger.debug(
                "Message %s delivered to %d/%d waiter(s)", message.id, resolved, len(waiters),
            )
        return resolved
