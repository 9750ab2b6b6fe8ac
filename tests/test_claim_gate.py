import pytest

from packages.caselogic.claim_gate import (
    CHAT,
    CLAIM,
    DIAGNOSE,
    VIEW,
    available_actions,
    require_action,
)
from packages.core.errors import ActionNotAllowed
from tests.factories import DOCTOR_ID, OTHER_DOCTOR_ID, make_case


def test_unclaimed_pending_case_can_only_be_viewed_or_claimed() -> None:
    actions = available_actions(make_case(status="Pending", doctorId=None), DOCTOR_ID)
    assert actions == {VIEW, CLAIM}


def test_own_in_review_case_allows_chat_and_diagnose() -> None:
    actions = available_actions(make_case(status="InReview", doctorId=DOCTOR_ID), DOCTOR_ID)
    assert CHAT in actions
    assert DIAGNOSE in actions
    assert CLAIM not in actions


def test_case_held_by_someone_else() -> None:
    actions = available_actions(make_case(status="InReview", doctorId=OTHER_DOCTOR_ID), DOCTOR_ID)
    assert actions == {VIEW, CHAT}


@pytest.mark.parametrize("doctor_id", [None, DOCTOR_ID, OTHER_DOCTOR_ID])
@pytest.mark.parametrize("status", ["Completed", "Cancelled"])
def test_closed_case_never_claimable_or_diagnosable(status: str, doctor_id) -> None:
    actions = available_actions(make_case(status=status, doctorId=doctor_id), DOCTOR_ID)
    assert CLAIM not in actions
    assert DIAGNOSE not in actions
    assert VIEW in actions


def test_awaiting_doctor_unclaimed_is_not_claimable() -> None:
    actions = available_actions(make_case(status="AwaitingDoctor", doctorId=None), DOCTOR_ID)
    assert actions == {VIEW}


def test_no_signed_in_doctor_cannot_diagnose() -> None:
    actions = available_actions(make_case(status="InReview", doctorId=DOCTOR_ID), None)
    assert DIAGNOSE not in actions


def test_require_action_chat_on_unclaimed_case_asks_to_claim() -> None:
    with pytest.raises(ActionNotAllowed) as excinfo:
        require_action(make_case(doctorId=None), DOCTOR_ID, CHAT)
    assert "claim this case first" in str(excinfo.value)
    assert excinfo.value.action == CHAT


def test_require_action_diagnose_on_completed_case() -> None:
    case = make_case(status="Completed", doctorId=DOCTOR_ID)
    with pytest.raises(ActionNotAllowed) as excinfo:
        require_action(case, DOCTOR_ID, DIAGNOSE)
    assert "Completed" in str(excinfo.value)


def test_require_action_claim_names_current_owner() -> None:
    case = make_case(status="InReview", doctorId=OTHER_DOCTOR_ID, doctorName="Dr. Okafor")
    with pytest.raises(ActionNotAllowed) as excinfo:
        require_action(case, DOCTOR_ID, CLAIM)
    assert "Dr. Okafor" in str(excinfo.value)


def test_require_action_passes_silently_when_allowed() -> None:
    require_action(make_case(status="Pending", doctorId=None), DOCTOR_ID, CLAIM)
