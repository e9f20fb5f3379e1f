from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class Message:
    id: int
    from_user_id: int
    to_user_id: int
    content: str
    timestamp: datetime
