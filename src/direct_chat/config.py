from __future__ import annotations

from typing import Literal

from pydantic import ConfigDict, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    POSTGRES_USER: str
    POSTGRES_PASSWORD: str
    POSTGRES_DB: str
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432

    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_RECYCLE: int = 300
    DB_ECHO: bool = False

    REDIS_URL: str = "redis://localhost:6379/0"
    NOTIFY_BACKEND: Literal["local", "redis"] = "local"
    REDIS_PUBSUB_CHANNEL: str = "chat.messages"

    JWT_SECRET: str = ""
    JWT_ALGORITHM: str = "HS256"
    JWT_TTL_SECONDS: int = 3600
    BCRYPT_ROUNDS: int = 10

    CORS_ORIGINS: list[str] = ["*"]

    LONG_POLL_TIMEOUT_SECONDS: float = Field(30.0, gt=0)
    LONG_POLL_MAX_WAITERS: int = Field(10_000, ge=1)

    LOG_LEVEL: str = "info"

    @property
    def database_url(self) -> str:
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.POSTGRES_DB}"
        )

    model_config = ConfigDict(
        env_file=".env",
        extra="ignore",
    )


settings = Settings()  # type: ignore[call-arg]
