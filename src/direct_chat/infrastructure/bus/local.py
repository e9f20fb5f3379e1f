from __future__ import annotations

from direct_chat.application.ports.long_poll import WaitBroker
from direct_chat.domain.entities.message import Message


class LocalMessagePublisher:
    """Implements application.ports.bus.MessagePublisher within a single process."""

    def __init__(self, broker: WaitBroker) -> None:
        self._broker = broker

    async def publish(self, message: Message) -> None:
        self._broker.publish(message)
