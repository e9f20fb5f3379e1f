from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class User:
    id: int
    username: str
    fullname: str
    email: str
    avatar: str | None
    password_hash: str
    created_at: datetime
