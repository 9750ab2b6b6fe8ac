from __future__ import annotations

import math
from datetime import datetime
from typing import Literal, NamedTuple, Optional

from packages.caselogic.clock import minutes_between
from packages.core.schemas.case import Case

EDIT_WINDOW_MINUTES = 30

DiagnosisMode = Literal["submit", "update", "locked"]


class EditWindow(NamedTuple):
    editable: bool
    minutes_remaining: int


def can_edit(diagnosis_submitted_at: Optional[datetime], now: Optional[datetime] = None) -> EditWindow:
    """Grace period for amending a submitted diagnosis.

    Measured from the original submission; updates inside the window do not
    renew it. No submission means there is nothing to edit.
    """
    minutes_since = minutes_between(diagnosis_submitted_at, now)
    if minutes_since is None:
        return EditWindow(False, 0)
    # clock skew: a submission "in the future" never grants more than a full window
    minutes_since = max(0.0, minutes_since)
    editable = minutes_since <= EDIT_WINDOW_MINUTES
    remaining = max(0, math.ceil(EDIT_WINDOW_MINUTES - minutes_since))
    return EditWindow(editable, remaining)


def case_edit_window(case: Case, now: Optional[datetime] = None) -> EditWindow:
    if not (case.diagnosis or "").strip():
        return EditWindow(False, 0)
    return can_edit(case.diagnosis_submitted_at, now)


def diagnosis_mode(case: Case, now: Optional[datetime] = None) -> DiagnosisMode:
    if case.diagnosis_submitted_at is None:
        return "submit"
    return "update" if case_edit_window(case, now).editable else "locked"


__all__ = ["EDIT_WINDOW_MINUTES", "DiagnosisMode", "EditWindow", "can_edit", "case_edit_window", "diagnosis_mode"]
