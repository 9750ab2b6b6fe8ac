from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

from packages.core.schemas.case import Case

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)
DOCTOR_ID = "doc-1"
OTHER_DOCTOR_ID = "doc-2"


def minutes_ago(minutes: float) -> datetime:
    return NOW - timedelta(minutes=minutes)


def case_payload(**overrides: Any) -> dict:
    payload = {
        "id": "case-1",
        "caseNumber": "CASE-0001",
        "status": "Pending",
        "priority": "High",
        "pmvId": "pmv-1",
        "pmvName": "Greenleaf Pharmacy",
        "doctorId": None,
        "createdAt": minutes_ago(10).isoformat(),
        "symptoms": "fever, headache",
    }
    payload.update(overrides)
    return payload


def make_case(**overrides: Any) -> Case:
    return Case.model_validate(case_payload(**overrides))


def envelope(data: Any, success: bool = True, message: str = "", errors: list | None = None) -> dict:
    return {"success": success, "data": data, "message": message, "errors": errors or []}
