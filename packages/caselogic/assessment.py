from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from packages.caselogic.claim_gate import ALL_ACTIONS, available_actions
from packages.caselogic.drugs import classify_medications
from packages.caselogic.edit_window import case_edit_window, diagnosis_mode
from packages.caselogic.formatting import wait_time
from packages.caselogic.sla import DEFAULT_TARGET_MINUTES, classify_sla
from packages.core.schemas.case import Case


class CaseAssessment(BaseModel):
    """Everything a screen needs to render and gate one case."""
    case_id: str
    case_number: str
    status: str
    sla_status: Optional[str] = None
    wait_time: Optional[str] = None
    actions: List[str] = Field(default_factory=list)
    edit_window_open: bool = False
    edit_minutes_remaining: int = 0
    diagnosis_mode: str = "submit"
    medications: List[dict] = Field(default_factory=list)


def assess_case(
    case: Case,
    doctor_id: Optional[str],
    now: Optional[datetime] = None,
    target_minutes: float = DEFAULT_TARGET_MINUTES,
) -> CaseAssessment:
    actions = available_actions(case, doctor_id)
    window = case_edit_window(case, now)
    return CaseAssessment(
        case_id=case.id,
        case_number=case.case_number,
        status=case.status,
        sla_status=classify_sla(case.created_at, target_minutes, now),
        wait_time=wait_time(case.created_at, now),
        actions=[action for action in ALL_ACTIONS if action in actions],
        edit_window_open=window.editable,
        edit_minutes_remaining=window.minutes_remaining,
        diagnosis_mode=diagnosis_mode(case, now),
        medications=classify_medications(case.medications),
    )


__all__ = ["CaseAssessment", "assess_case"]
