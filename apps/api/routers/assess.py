from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, ValidationError

from packages.caselogic.assessment import CaseAssessment, assess_case
from packages.caselogic.drugs import classify_drug
from packages.caselogic.sla import DEFAULT_TARGET_MINUTES
from packages.core.schemas.case import Case

router = APIRouter(prefix="/v1")


class AssessRequest(BaseModel):
    case: dict
    doctor_id: Optional[str] = None
    now: Optional[datetime] = None
    target_minutes: float = Field(default=DEFAULT_TARGET_MINUTES, gt=0)


class ClassifyRequest(BaseModel):
    names: List[str] = Field(default_factory=list)


def _error(status: int, code: str, message: str, detail: Optional[dict] = None) -> JSONResponse:
    payload = {"error": {"code": code, "message": message, "detail": detail or {}}}
    return JSONResponse(status_code=status, content=payload)


@router.post("/cases/assess", response_model=CaseAssessment)
def assess(request: AssessRequest) -> JSONResponse:
    try:
        case = Case.model_validate(request.case)
    except ValidationError as exc:
        fields = [".".join(str(part) for part in err["loc"]) for err in exc.errors()]
        return _error(400, "invalid_input", "case payload is invalid", {"fields": fields})

    result = assess_case(case, request.doctor_id, request.now, request.target_minutes)
    return JSONResponse(status_code=200, content=jsonable_encoder(result))


@router.post("/drugs/classify")
def classify(request: ClassifyRequest) -> JSONResponse:
    if not request.names:
        return _error(400, "invalid_input", "names is required")
    results = [{"name": name, **classify_drug(name).to_dict()} for name in request.names]
    return JSONResponse(status_code=200, content={"results": results})
