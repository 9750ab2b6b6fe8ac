from __future__ import annotations

from enum import Enum
from typing import FrozenSet, Optional

from packages.core.errors import ActionNotAllowed
from packages.core.schemas.case import Case

VIEW = "View"
CLAIM = "Claim"
CHAT = "Chat"
DIAGNOSE = "Diagnose"

ALL_ACTIONS = (VIEW, CLAIM, CHAT, DIAGNOSE)


class ChatClaimPolicy(str, Enum):
    """What opening a chat on an unclaimed case does.

    ``auto`` claims it on the doctor's behalf; ``prompt`` leaves it unclaimed
    and asks the doctor to claim before sending.
    """

    AUTO = "auto"
    PROMPT = "prompt"


def available_actions(case: Case, doctor_id: Optional[str]) -> FrozenSet[str]:
    """Actions the UI may offer. Advisory only: the backend still arbitrates."""
    actions = {VIEW}
    if case.status == "Pending" and not case.doctor_id:
        actions.add(CLAIM)
    if case.doctor_id:
        actions.add(CHAT)
    if doctor_id and case.doctor_id == doctor_id and not case.is_closed:
        actions.add(DIAGNOSE)
    return frozenset(actions)


def _denial_message(case: Case, doctor_id: Optional[str], action: str) -> str:
    if action == CLAIM:
        if case.doctor_id:
            owner = "you" if case.doctor_id == doctor_id else (case.doctor_name or "another doctor")
            return f"Case {case.case_number} is already claimed by {owner}."
        return f"Case {case.case_number} is {case.status} and can no longer be claimed."
    if action == CHAT:
        return "To chat with the PMV, you need to claim this case first."
    if action == DIAGNOSE:
        if case.is_closed:
            return f"Case {case.case_number} is {case.status}; diagnosis can no longer be changed."
        if not case.doctor_id:
            return "Claim this case first to submit a diagnosis."
        return f"Case {case.case_number} is assigned to {case.doctor_name or 'another doctor'}."
    return f"Unknown action: {action}"


def require_action(case: Case, doctor_id: Optional[str], action: str) -> None:
    if action not in available_actions(case, doctor_id):
        raise ActionNotAllowed(action, _denial_message(case, doctor_id, action))


__all__ = [
    "ALL_ACTIONS",
    "CHAT",
    "CLAIM",
    "DIAGNOSE",
    "VIEW",
    "ChatClaimPolicy",
    "available_actions",
    "require_action",
]
