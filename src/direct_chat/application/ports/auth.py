from __future__ import annotations

from typing import Protocol

from direct_chat.application.dto.principal import Principal
from direct_chat.domain.entities.user import User


class TokenVerifier(Protocol):
    async def verify(self, token: str) -> Principal: ...


class TokenIssuer(Protocol):
    def issue(self, user: User) -> str: ...


class PasswordHasher(Protocol):
    async def hash(self, password: str) -> str: ...

    async def verify(self, password: str, password_hash: str) -> bool: ...
