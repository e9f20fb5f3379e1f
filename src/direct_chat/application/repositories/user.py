from __future__ import annotations

from typing import Protocol

from direct_chat.domain.entities.user import User


class UserReader(Protocol):
    async def get_by_id(self, user_id: int) -> User | None: ...

    async def get_by_username(self, username: str) -> User | None: ...

    async def find_conflicting(
        self,
        *,
        username: str | None = None,
        email: str | None = None,
        exclude_id: int | None = None,
    ) -> User | None:
        """Return a user already holding ``username`` or ``email``."""
        ...

    async def search(self, query: str, *, exclude_id: int, limit: int = 20) -> list[User]: ...


class UserWriter(Protocol):
    async def create(
        self,
        username: str,
        fullname: str,
        email: str,
        password_hash: str,
    ) -> User:
        """Insert a user. Raises ConflictError if username or email is taken."""
        ...

    async def update_profile(self, user_id: int, changes: dict[str, str]) -> User | None: ...

    async def set_password_hash(self, user_id: int, password_hash: str) -> None: ...
