from __future__ import annotations

from typing import Protocol

from direct_chat.domain.entities.message import Message


class MessagePublisher(Protocol):
    """Delivers a stored message to long-poll waiters, locally or across processes."""

    async def publish(self, message: Message) -> None: ...
