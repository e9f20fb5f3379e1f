from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import redis.asyncio as aioredis
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from direct_chat.api.deps import get_broker
from direct_chat.api.middleware.correlation_id import CorrelationIdMiddleware
from direct_chat.api.middleware.metrics import RequestTimingMiddleware
from direct_chat.api.routers import auth, chat, health, users
from direct_chat.api.schemas.common import error_body
from direct_chat.application.exceptions import (
    AppError,
    AuthenticationError,
    CapacityError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from direct_chat.config import settings
from direct_chat.infrastructure.bus.redis_pubsub import RedisPubSubSubscriber
from direct_chat.infrastructure.bus.serializer import MESSAGE_CREATED, message_from_payload
from direct_chat.infrastructure.db.session import dispose_engine

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: dict[type[AppError], int] = {
    NotFoundError: 404,
    ConflictError: 400,
    ValidationError: 400,
    AuthenticationError: 401,
    CapacityError: 503,
}


async def _on_pubsub_event(event_type: str, data: dict[str, Any]) -> None:
    """Hand a message published by any process to this process's waiters."""
    if event_type != MESSAGE_CREATED:
        return
    get_broker().publish(message_from_payload(data))


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""
    subscriber: RedisPubSubSubscriber | None = None
    if settings.NOTIFY_BACKEND == "redis":
        app.state.redis = aioredis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
        )
        logger.info("Redis connection pool created")

        subscriber = RedisPubSubSubscriber(
            app.state.redis,
            settings.REDIS_PUBSUB_CHANNEL,
            _on_pubsub_event,
        )
        await subscriber.start()

    yield

    if subscriber is not None:
        await subscriber.stop()
        await app.state.redis.aclose()
        logger.info("Redis connection pool closed")
    get_broker().close()
    await dispose_engine()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Direct Chat Service",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestTimingMiddleware)
    app.add_middleware(CorrelationIdMiddleware)

    _register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(chat.router)

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def _app_error(_req: Request, exc: AppError) -> JSONResponse:
        status_code = next(
            (code for cls, code in _STATUS_BY_ERROR.items() if isinstance(exc, cls)),
            400,
        )
        return JSONResponse(status_code=status_code, content=error_body(exc.detail))

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(_req: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def _validation(_req: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        message = "Invalid request"
        if errors:
            first = errors[0]
            field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
            message = f"{field}: {first['msg']}" if field else first["msg"]
        return JSONResponse(status_code=400, content=error_body(message))

    @app.exception_handler(Exception)
    async def _unhandled(_req: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled error", exc_info=exc)
        return JSONResponse(status_code=500, content=error_body("Internal server error"))
