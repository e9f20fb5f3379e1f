from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt

from direct_chat.application.dto.principal import Principal
from direct_chat.application.exceptions import AuthenticationError
from direct_chat.domain.entities.user import User


class HS256Tokens:
    """Issue and verify JWTs signed with a shared HS256 secret."""

    def __init__(self, secret: str, algorithm: str = "HS256", ttl_seconds: int = 3600) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = timedelta(seconds=ttl_seconds)

    def issue(self, user: User) -> str:
        now = datetime.now(timezone.utc)
        claims = {
            "sub": str(user.id),
            "username": user.username,
            "iat": now,
            "exp": now + self._ttl,
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    async def verify(self, token: str) -> Principal:
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["sub", "exp"]},
            )
            user_id = int(payload["sub"])
        except (jwt.PyJWTError, ValueError) as exc:
            raise AuthenticationError("Token is not valid") from exc
        return Principal(user_id=user_id, username=payload.get("username", ""))
