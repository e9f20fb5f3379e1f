from __future__ import annotations

import logging

import bcrypt
from starlette.concurrency import run_in_threadpool

logger = logging.getLogger(__name__)


class BcryptHasher:
    """Implements application.ports.auth.PasswordHasher. Hashing runs in the threadpool."""

    def __init__(self, rounds: int = 10) -> None:
        self._rounds = rounds

    async def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self._rounds)
        hashed = await run_in_threadpool(bcrypt.hashpw, password.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    async def verify(self, password: str, password_hash: str) -> bool:
        """False on mismatch, and also for input bcrypt refuses (over 72 bytes, malformed hash)."""
        try:
            return await run_in_threadpool(
                bcrypt.checkpw, password.encode("utf-8"), password_hash.encode("utf-8"),
            )
        except ValueError as exc:
            logger.debug("Password check rejected: %s", exc)
            return False
