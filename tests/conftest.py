"""Shared test fixtures."""
from __future__ import annotations

import asyncio
import itertools
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from direct_chat.application.dto.principal import Principal
from direct_chat.application.exceptions import ConflictError
from direct_chat.config import settings
from direct_chat.domain.entities.chat_summary import ChatSummary
from direct_chat.domain.entities.message import Message
from direct_chat.domain.entities.user import User
from direct_chat.infrastructure.longpoll.registry import Waiter

_ids = itertools.count(1000)


@pytest.fixture
def user_principal() -> Principal:
    return Principal(user_id=1, username="alice")


def make_user(
    *,
    user_id: int | None = None,
    username: str = "alice",
    fullname: str = "Alice Liddell",
    email: str | None = None,
    password_hash: str = "hashed:secret123",
) -> User:
    return User(
        id=user_id if user_id is not None else next(_ids),
        username=username,
        fullname=fullname,
        email=email or f"{username}@example.com",
        avatar=None,
        password_hash=password_hash,
        created_at=datetime.now(timezone.utc),
    )


def make_message(
    *,
    from_user_id: int = 2,
    to_user_id: int = 1,
    content: str = "hello",
    timestamp: datetime | None = None,
) -> Message:
    return Message(
        id=next(_ids),
        from_user_id=from_user_id,
        to_user_id=to_user_id,
        content=content,
        timestamp=timestamp or datetime.now(timezone.utc),
    )


def make_waiter(waiting_user_id: int, counterpart_user_id: int | None = None) -> Waiter:
    """Build an unregistered waiter bound to the running loop."""
    future = asyncio.get_running_loop().create_future()
    return Waiter(waiting_user_id, counterpart_user_id, future)


@dataclass
class FakeUserReader:
    _users: dict[int, User] = field(default_factory=dict)

    async def get_by_id(self, user_id: int) -> User | None:
        return self._users.get(user_id)

    async def get_by_username(self, username: str) -> User | None:
        return next((u for u in self._users.values() if u.username == username), None)

    async def find_conflicting(
        self,
        *,
        username: str | None = None,
        email: str | None = None,
        exclude_id: int | None = None,
    ) -> User | None:
        for u in self._users.values():
            if u.id == exclude_id:
                continue
            if (username is not None and u.username == username) or (
                email is not None and u.email == email
            ):
                return u
        return None

    async def search(self, query: str, *, exclude_id: int, limit: int = 20) -> list[User]:
        q = query.lower()
        found = [
            u for u in self._users.values()
            if u.id != exclude_id and (q in u.username.lower() or q in u.fullname.lower())
        ]
        return sorted(found, key=lambda u: u.username)[:limit]


@dataclass
class FakeUserWriter:
    _reader: FakeUserReader

    async def create(self, username: str, fullname: str, email: str, password_hash: str) -> User:
        if await self._reader.find_conflicting(username=username, email=email):
            raise ConflictError("User already exists")
        user = make_user(username=username, fullname=fullname, email=email, password_hash=password_hash)
        self._reader._users[user.id] = user
        return user

    async def update_profile(self, user_id: int, changes: dict[str, str]) -> User | None:
        user = self._reader._users.get(user_id)
        if user is None:
            return None
        user = replace(user, **changes)
        self._reader._users[user_id] = user
        return user

    async def set_password_hash(self, user_id: int, password_hash: str) -> None:
        user = self._reader._users[user_id]
        self._reader._users[user_id] = replace(user, password_hash=password_hash)


@dataclass
class FakeMessageReader:
    _messages: list[Message] = field(default_factory=list)
    _users: FakeUserReader | None = None
    fail_with: Exception | None = None

    async def list_between(
        self,
        user_a: int,
        user_b: int,
        *,
        since: datetime | None = None,
    ) -> list[Message]:
        if self.fail_with is not None:
            raise self.fail_with
        pair = {(user_a, user_b), (user_b, user_a)}
        return sorted(
            (
                m for m in self._messages
                if (m.from_user_id, m.to_user_id) in pair
                and (since is None or m.timestamp > since)
            ),
            key=lambda m: (m.timestamp, m.id),
        )

    async def list_chats(self, user_id: int) -> list[ChatSummary]:
        latest: dict[int, Message] = {}
        for m in sorted(self._messages, key=lambda m: (m.timestamp, m.id)):
            if user_id not in (m.from_user_id, m.to_user_id):
                continue
            peer = m.to_user_id if m.from_user_id == user_id else m.from_user_id
            if peer != user_id:
                latest[peer] = m
        users = self._users._users if self._users else {}
        summaries = [
            ChatSummary(
                user_id=peer,
                username=users[peer].username if peer in users else "",
                fullname=users[peer].fullname if peer in users else "",
                last_message=m.content,
                timestamp=m.timestamp,
            )
            for peer, m in latest.items()
        ]
        return sorted(summaries, key=lambda s: s.timestamp, reverse=True)


@dataclass
class FakeMessageWriter:
    _reader: FakeMessageReader

    async def create(self, from_user_id: int, to_user_id: int, content: str) -> Message:
        now = datetime.now(timezone.utc)
        if self._reader._messages:
            now = max(now, self._reader._messages[-1].timestamp + timedelta(microseconds=1))
        msg = make_message(
            from_user_id=from_user_id, to_user_id=to_user_id, content=content, timestamp=now,
        )
        self._reader._messages.append(msg)
        return msg


@dataclass
class FakeUoW:
    """In-memory UoW for unit tests."""
    users: FakeUserReader = field(default_factory=FakeUserReader)
    users_w: FakeUserWriter | None = None
    messages: FakeMessageReader = field(default_factory=FakeMessageReader)
    messages_w: FakeMessageWriter | None = None
    _committed: bool = False
    _rolled_back: bool = False
    rollback_error: Exception | None = None

    def __post_init__(self) -> None:
        if self.users_w is None:
            self.users_w = FakeUserWriter(self.users)
        if self.messages_w is None:
            self.messages_w = FakeMessageWriter(self.messages)
        self.messages._users = self.users

    def add_user(self, user: User) -> User:
        self.users._users[user.id] = user
        return user

    async def flush(self) -> None:
        pass

    async def commit(self) -> None:
        self._committed = True

    async def rollback(self) -> None:
        if self.rollback_error is not None:
            raise self.rollback_error
        self._rolled_back = True


class FakeHasher:
    """Reversible stand-in for bcrypt."""

    async def hash(self, password: str) -> str:
        return f"hashed:{password}"

    async def verify(self, password: str, password_hash: str) -> bool:
        return password_hash == f"hashed:{password}"


@pytest.fixture
def uow() -> FakeUoW:
    return FakeUoW()


@pytest.fixture
def hasher() -> FakeHasher:
    return FakeHasher()


def make_token(sub: int = 1, username: str = "alice") -> str:
    return jwt.encode(
        {
            "sub": str(sub),
            "username": username,
            "exp": datetime.now(timezone.utc) + timedelta(minutes=5),
        },
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )


def auth_headers(sub: int = 1) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(sub)}"}
