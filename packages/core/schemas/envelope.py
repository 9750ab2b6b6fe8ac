from __future__ import annotations

from typing import Any, Generic, List, Optional, TypeVar

from pydantic import Field

from packages.core.schemas.base import PortalModel

T = TypeVar("T")


class ApiResponse(PortalModel, Generic[T]):
    """Backend envelope. ``data`` is only trustworthy when ``success`` is true."""
    success: bool = False
    data: Optional[T] = None
    message: str = ""
    errors: List[str] = Field(default_factory=list)
    timestamp: Optional[str] = None


class PaginatedResponse(PortalModel, Generic[T]):
    data: List[T] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = 10
    total_pages: int = 0


def error_text(payload: Any, fallback: str = "An unexpected error occurred") -> str:
    """Pick the most specific human message out of an error body."""
    if not isinstance(payload, dict):
        return fallback
    errors = payload.get("errors")
    if isinstance(errors, list) and errors:
        return ", ".join(str(item) for item in errors)
    for key in ("message", "error"):
        value = payload.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return fallback


__all__ = ["ApiResponse", "PaginatedResponse", "error_text"]
