from __future__ import annotations

from datetime import datetime
from typing import Protocol

from direct_chat.domain.entities.chat_summary import ChatSummary
from direct_chat.domain.entities.message import Message


class MessageReader(Protocol):
    async def list_between(
        self,
        user_a: int,
        user_b: int,
        *,
        since: datetime | None = None,
    ) -> list[Message]:
        """Messages exchanged by the two users, oldest first, strictly after ``since``."""
        ...

    async def list_chats(self, user_id: int) -> list[ChatSummary]: ...


class MessageWriter(Protocol):
    async def create(self, from_user_id: int, to_user_id: int, content: str) -> Message: ...
