from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, List, Optional

from packages.caselogic.claim_gate import DIAGNOSE, require_action
from packages.caselogic.drugs import classify_drug
from packages.caselogic.edit_window import EDIT_WINDOW_MINUTES, diagnosis_mode
from packages.caselogic.formatting import parse_duration_days
from packages.core.errors import ActionNotAllowed, DiagnosisValidationError, PortalAPIError, StaleCaseError
from packages.core.portal_client import PortalClient
from packages.core.schemas.case import Case, Medication, SubmitDiagnosisRequest
from packages.workflow.case_actions import refresh_case

logger = logging.getLogger(__name__)

_REQUIRED_MED_FIELDS = ("name", "dosage", "frequency", "duration")


def validate_diagnosis(diagnosis: str, advice: str, medications: List[Medication]) -> list[str]:
    errors = []
    if not (diagnosis or "").strip():
        errors.append("Please provide a diagnosis")
    if not (advice or "").strip():
        errors.append("Please provide advice for the patient")
    if not medications:
        errors.append("Please add at least one medication")
    elif any(not (getattr(med, name) or "").strip() for med in medications for name in _REQUIRED_MED_FIELDS):
        errors.append("Please complete all medication fields")
    return errors


def _classified(medications: Iterable[Medication]) -> list[Medication]:
    out = []
    for med in medications:
        classification = classify_drug(med.name)
        out.append(
            med.model_copy(
                update={
                    "name": med.name.strip(),
                    "drug_type": classification.type,
                    "is_otc": classification.is_otc,
                    "duration_days": parse_duration_days(med.duration),
                }
            )
        )
    return out


def build_diagnosis_request(
    case_id: str,
    diagnosis: str,
    advice: str,
    medications: List[Medication],
    **extra,
) -> SubmitDiagnosisRequest:
    errors = validate_diagnosis(diagnosis, advice, medications)
    if errors:
        raise DiagnosisValidationError(errors)
    return SubmitDiagnosisRequest(
        case_id=case_id,
        diagnosis=diagnosis.strip(),
        advice=advice.strip(),
        medications=_classified(medications),
        **extra,
    )


def submit_diagnosis(
    client: PortalClient,
    case: Case,
    request: SubmitDiagnosisRequest,
    now: Optional[datetime] = None,
) -> Case:
    """Submit a new diagnosis or update one still inside its edit window.

    A backend rejection re-fetches the case and raises StaleCaseError with
    the server's view, so stale local state is never trusted.
    """
    doctor_id = client.session.doctor_id if client.session else None
    require_action(case, doctor_id, DIAGNOSE)
    mode = diagnosis_mode(case, now)
    if mode == "locked":
        raise ActionNotAllowed(
            DIAGNOSE,
            f"The {EDIT_WINDOW_MINUTES}-minute edit window for case {case.case_number} has closed.",
        )

    try:
        updated = client.submit_diagnosis(request)
    except PortalAPIError as exc:
        logger.warning("diagnosis %s rejected for case=%s: %s", mode, case.case_number, exc)
        raise StaleCaseError(
            str(exc),
            case=refresh_case(client, case.id),
            status=exc.status,
            url=exc.url,
            errors=exc.errors,
        ) from exc
    logger.info("diagnosis %s accepted for case=%s", mode, case.case_number)
    return updated


__all__ = ["build_diagnosis_request", "submit_diagnosis", "validate_diagnosis"]
