from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from packages.caselogic.assessment import CaseAssessment, assess_case
from packages.caselogic.claim_gate import CLAIM, require_action
from packages.core.errors import ClaimConflictError, PortalAPIError
from packages.core.portal_client import PortalClient
from packages.core.schemas.case import Case

logger = logging.getLogger(__name__)


def _doctor_id(client: PortalClient) -> Optional[str]:
    return client.session.doctor_id if client.session else None


def refresh_case(client: PortalClient, case_id: str) -> Optional[Case]:
    try:
        return client.get_case(case_id)
    except PortalAPIError as exc:
        logger.warning("could not refresh case %s after rejection: %s", case_id, exc)
        return None


def claim_case(client: PortalClient, case: Case) -> Case:
    """Ask the backend for the case. Two outcomes: the claimed case, or ClaimConflictError.

    On conflict the error carries a freshly fetched copy so the caller can
    show who holds it now. Never retried.
    """
    require_action(case, _doctor_id(client), CLAIM)
    try:
        claimed = client.claim_case(case.id)
    except ClaimConflictError as exc:
        exc.case = refresh_case(client, case.id)
        logger.info("claim rejected case=%s owner=%s", case.case_number, exc.current_owner)
        raise

    doctor_id = _doctor_id(client)
    if doctor_id and claimed.doctor_id != doctor_id:
        raise ClaimConflictError(
            f"Case {claimed.case_number} was claimed by {claimed.doctor_name or 'another doctor'}.",
            case=claimed,
        )
    logger.info("claimed case=%s", claimed.case_number)
    return claimed


def load_case(
    client: PortalClient,
    case_id: str,
    now: Optional[datetime] = None,
) -> tuple[Case, CaseAssessment]:
    case = client.get_case(case_id)
    assessment = assess_case(case, _doctor_id(client), now, client.config.sla_target_minutes)
    return case, assessment


__all__ = ["claim_case", "load_case", "refresh_case"]
