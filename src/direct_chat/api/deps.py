"""FastAPI dependency injection helpers."""
from __future__ import annotations

from typing import Annotated, AsyncIterator

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from direct_chat.application.dto.principal import Principal
from direct_chat.application.exceptions import AuthenticationError
from direct_chat.application.ports.auth import TokenVerifier
from direct_chat.application.ports.bus import MessagePublisher
from direct_chat.config import settings
from direct_chat.infrastructure.auth.bcrypt_hasher import BcryptHasher
from direct_chat.infrastructure.auth.hs256 import HS256Tokens
from direct_chat.infrastructure.bus.local import LocalMessagePublisher
from direct_chat.infrastructure.bus.redis_pubsub import RedisMessagePublisher
from direct_chat.infrastructure.db.session import AsyncSessionLocal
from direct_chat.infrastructure.db.uow import SqlAlchemyUoW
from direct_chat.infrastructure.longpoll.broker import LongPollBroker

_bearer_scheme = HTTPBearer(auto_error=False)


async def get_uow() -> AsyncIterator[SqlAlchemyUoW]:
    async with AsyncSessionLocal() as session:
        async with SqlAlchemyUoW(session) as uow:
            yield uow


UoWDep = Annotated[SqlAlchemyUoW, Depends(get_uow)]


_tokens: HS256Tokens | None = None
_hasher: BcryptHasher | None = None
_broker: LongPollBroker | None = None


def get_tokens() -> HS256Tokens:
    global _tokens  # noqa: PLW0603
    if _tokens is None:
        _tokens = HS256Tokens(
            settings.JWT_SECRET, settings.JWT_ALGORITHM, settings.JWT_TTL_SECONDS,
        )
    return _tokens


def get_hasher() -> BcryptHasher:
    global _hasher  # noqa: PLW0603
    if _hasher is None:
        _hasher = BcryptHasher(settings.BCRYPT_ROUNDS)
    return _hasher


def get_broker() -> LongPollBroker:
    """Process-wide long-poll broker."""
    global _broker  # noqa: PLW0603
    if _broker is None:
        _broker = LongPollBroker(
            timeout=settings.LONG_POLL_TIMEOUT_SECONDS,
            max_waiters=settings.LONG_POLL_MAX_WAITERS,
        )
    return _broker


TokensDep = Annotated[HS256Tokens, Depends(get_tokens)]
HasherDep = Annotated[BcryptHasher, Depends(get_hasher)]
BrokerDep = Annotated[LongPollBroker, Depends(get_broker)]


def get_publisher(request: Request, broker: BrokerDep) -> MessagePublisher:
    if settings.NOTIFY_BACKEND == "redis":
        return RedisMessagePublisher(request.app.state.redis, settings.REDIS_PUBSUB_CHANNEL)
    return LocalMessagePublisher(broker)


PublisherDep = Annotated[MessagePublisher, Depends(get_publisher)]


async def get_current_principal(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer_scheme)],
    tokens: Annotated[TokenVerifier, Depends(get_tokens)],
) -> Principal:
    if credentials is None:
        raise AuthenticationError("No token, authorization denied")
    return await tokens.verify(credentials.credentials)


CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]
