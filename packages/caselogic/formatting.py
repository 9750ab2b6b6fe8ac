from __future__ import annotations

import re
from datetime import datetime
from typing import Optional

from packages.caselogic.clock import as_aware, minutes_between

DEFAULT_DURATION_DAYS = 7


def format_duration(minutes: int) -> str:
    if minutes < 60:
        return f"{minutes}m"
    hours = minutes // 60
    if hours < 24:
        mins = minutes % 60
        return f"{hours}h {mins}m" if mins else f"{hours}h"
    days = hours // 24
    if days < 7:
        rest = hours % 24
        return f"{days}d {rest}h" if rest else f"{days}d"
    weeks = days // 7
    rest = days % 7
    return f"{weeks}w {rest}d" if rest else f"{weeks}w"


def wait_time(created_at: Optional[datetime], now: Optional[datetime] = None) -> Optional[str]:
    elapsed = minutes_between(created_at, now)
    if elapsed is None:
        return None
    return format_duration(max(0, round(elapsed)))


def format_relative_time(value: Optional[datetime], now: Optional[datetime] = None) -> str:
    elapsed = minutes_between(value, now)
    if elapsed is None:
        return "unknown"
    minutes = int(elapsed // 1)
    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes}m ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours}h ago"
    days = hours // 24
    if days == 1:
        return "Yesterday"
    if days < 7:
        return f"{days}d ago"
    return as_aware(value).strftime("%b %d, %Y")


def parse_duration_days(duration: str) -> int:
    """'7 days' -> 7; anything without a number falls back to a week."""
    match = re.search(r"\d+", duration or "")
    return int(match.group(0)) if match else DEFAULT_DURATION_DAYS


__all__ = ["format_duration", "format_relative_time", "parse_duration_days", "wait_time"]
