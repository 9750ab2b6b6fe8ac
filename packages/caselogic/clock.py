from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_aware(value: datetime) -> datetime:
    """Backend timestamps without an offset are UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def minutes_between(start: Optional[datetime], end: Optional[datetime] = None) -> Optional[float]:
    if not isinstance(start, datetime):
        return None
    end = end if isinstance(end, datetime) else utcnow()
    return (as_aware(end) - as_aware(start)).total_seconds() / 60


__all__ = ["as_aware", "minutes_between", "utcnow"]
