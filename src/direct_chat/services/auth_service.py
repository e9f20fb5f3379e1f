from __future__ import annotations

import logging

from direct_chat.application.dto.user import RegisterUserDTO
from direct_chat.application.exceptions import ConflictError, ValidationError
from direct_chat.application.ports.auth import PasswordHasher, TokenIssuer
from direct_chat.application.uow import UnitOfWork

logger = logging.getLogger(__name__)


async def register(
    data: RegisterUserDTO,
    uow: UnitOfWork,
    hasher: PasswordHasher,
    tokens: TokenIssuer,
) -> str:
    """Create an account and return a fresh access token."""
    existing = await uow.users.find_conflicting(username=data.username, email=data.email)
    if existing is not None:
        raise ConflictError("User already exists")

    password_hash = await hasher.hash(data.password)
    user = await uow.users_w.create(data.username, data.fullname, data.email, password_hash)
    await uow.commit()

    logger.info("User registered: id=%d username=%s", user.id, user.username)
    return tokens.issue(user)


async def login(
    username: str,
    password: str,
    uow: UnitOfWork,
    hasher: PasswordHasher,
    tokens: TokenIssuer,
) -> str:
    user = await uow.users.get_by_username(username)
    if user is None or not await hasher.verify(password, user.password_hash):
        raise ValidationError("Invalid credentials")
    return tokens.issue(user)
