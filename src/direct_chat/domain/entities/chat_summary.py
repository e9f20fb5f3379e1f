from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class ChatSummary:
    """Latest message exchanged with one peer."""

    user_id: int
    username: str
    fullname: str
    last_message: str
    timestamp: datetime
