from __future__ import annotations

from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    """Response body shared by every endpoint."""

    status: Literal["success", "error"] = "success"
    message: str
    data: T | None = None


def error_body(message: str) -> dict[str, Any]:
    return Envelope[None](status="error", message=message).model_dump()
