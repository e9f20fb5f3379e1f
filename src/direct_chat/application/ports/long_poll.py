from __future__ import annotations

from typing import Protocol
from uuid import UUID

from direct_chat.domain.entities.message import Message


class PendingWait(Protocol):
    id: UUID


class WaitBroker(Protocol):
    def open(self, waiting_user_id: int, counterpart_user_id: int | None = None) -> PendingWait:
        """Register a waiter and arm its deadline."""
        ...

    async def wait(self, waiter: PendingWait) -> list[Message]:
        """Suspend until the waiter is resolved by a publish or its deadline."""
        ...

    def cancel(self, waiter: PendingWait) -> bool: ...

    def publish(self, message: Message) -> int: ...
