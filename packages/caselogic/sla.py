from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional

from packages.caselogic.clock import minutes_between
from packages.core.schemas.case import Case, SLAStatus

DEFAULT_TARGET_MINUTES = 30
AT_RISK_RATIO = 0.7


def classify_sla(
    created_at: Optional[datetime],
    target_minutes: float = DEFAULT_TARGET_MINUTES,
    now: Optional[datetime] = None,
) -> Optional[SLAStatus]:
    """Classify how close a case is to its response-time target.

    Returns ``None`` when ``created_at`` is missing so callers can render an
    indeterminate state instead of a false "OnTrack". A ``created_at`` in the
    future yields a negative elapsed time and classifies as OnTrack.
    """
    elapsed = minutes_between(created_at, now)
    if elapsed is None:
        return None
    if elapsed <= target_minutes * AT_RISK_RATIO:
        return "OnTrack"
    if elapsed <= target_minutes:
        return "AtRisk"
    return "Breached"


def sla_breakdown(
    cases: Iterable[Case],
    now: Optional[datetime] = None,
    target_minutes: float = DEFAULT_TARGET_MINUTES,
) -> dict[str, int]:
    counts = {"OnTrack": 0, "AtRisk": 0, "Breached": 0, "Unknown": 0}
    for case in cases:
        status = classify_sla(case.created_at, target_minutes, now)
        counts[status or "Unknown"] += 1
    counts["total"] = sum(counts.values())
    return counts


__all__ = ["AT_RISK_RATIO", "DEFAULT_TARGET_MINUTES", "classify_sla", "sla_breakdown"]
