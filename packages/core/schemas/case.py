from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field, ValidationError, field_validator

from packages.core.schemas.base import PortalModel

CaseStatus = Literal["Pending", "AwaitingDoctor", "InReview", "Completed", "Cancelled"]
CasePriority = Literal["Low", "Medium", "High", "Urgent"]
SLAStatus = Literal["OnTrack", "AtRisk", "Breached"]
DrugType = Literal["OTC", "PrescriptionOnly", "Controlled"]

CLOSED_STATUSES = frozenset({"Completed", "Cancelled"})


class PatientVitals(PortalModel):
    blood_pressure: Optional[str] = None
    heart_rate: Optional[float] = None
    temperature: Optional[float] = None
    respiratory_rate: Optional[float] = None
    oxygen_saturation: Optional[float] = None
    weight: Optional[float] = None
    height: Optional[float] = None
    bmi: Optional[float] = None
    blood_glucose: Optional[float] = None
    notes: Optional[str] = None


class Medication(PortalModel):
    """One prescribed line item. Drug class is re-derived from ``name`` on every submission."""
    id: Optional[str] = None
    name: str
    dosage: str = ""
    frequency: str = ""
    duration: str = ""
    duration_days: Optional[int] = None
    quantity: Optional[int] = None
    instructions: Optional[str] = None
    # filled from classify_drug right before submission
    drug_type: Optional[DrugType] = None
    is_otc: Optional[bool] = Field(default=None, alias="isOTC")


class Prescription(PortalModel):
    id: Optional[str] = None
    medications: List[Medication] = Field(default_factory=list)
    instructions: Optional[str] = None
    follow_up_date: Optional[str] = None
    created_at: Optional[datetime] = None


class Case(PortalModel):
    """One patient consultation request as returned by the backend."""
    id: str
    case_number: str
    status: CaseStatus
    priority: CasePriority = "Medium"
    pmv_id: str
    pmv_name: Optional[str] = None
    pmv_business_name: Optional[str] = None

    # None means unclaimed
    doctor_id: Optional[str] = None
    doctor_name: Optional[str] = None

    # anchor for SLA computation; None when the backend omits or mangles it
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    assigned_at: Optional[datetime] = None
    diagnosis_submitted_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    patient_name: Optional[str] = None
    patient_age: Optional[int] = None
    patient_gender: Optional[str] = None
    patient_phone: Optional[str] = None
    symptoms: Optional[str] = None
    symptoms_details: List[str] = Field(default_factory=list)
    vitals: Optional[PatientVitals] = None
    pmv_notes: Optional[str] = None
    diagnosis: Optional[str] = None
    doctor_advice: Optional[str] = None
    prescription: Optional[Prescription] = None
    response_time: Optional[float] = None
    sla_status: Optional[SLAStatus] = None

    @field_validator(
        "created_at",
        "updated_at",
        "assigned_at",
        "diagnosis_submitted_at",
        "completed_at",
        mode="wrap",
    )
    @classmethod
    def _lenient_timestamp(cls, value, handler):
        if value in (None, ""):
            return None
        try:
            return handler(value)
        except ValidationError:
            return None

    @property
    def is_claimed(self) -> bool:
        return bool(self.doctor_id)

    @property
    def is_closed(self) -> bool:
        return self.status in CLOSED_STATUSES

    @property
    def medications(self) -> List[Medication]:
        return list(self.prescription.medications) if self.prescription else []


class SubmitDiagnosisRequest(PortalModel):
    case_id: str
    diagnosis: str
    advice: str
    medications: List[Medication] = Field(default_factory=list)
    prescription_instructions: Optional[str] = None
    follow_up_required: bool = False
    follow_up_date: Optional[str] = None
    referral_required: bool = False
    referral_notes: Optional[str] = None


class DoctorDashboardStats(PortalModel):
    pending_cases: int = 0
    in_review_cases: int = 0
    completed_today: int = 0
    completed_this_week: int = 0
    average_response_time: float = 0
    sla_compliance_rate: float = 0
    total_cases_handled: int = 0


class SLAMetrics(PortalModel):
    total_cases: int = 0
    within_sla: int = 0
    at_risk: int = 0
    breached: int = 0
    average_response_time: float = 0
    target_response_time: float = 30


__all__ = [
    "CLOSED_STATUSES",
    "Case",
    "CasePriority",
    "CaseStatus",
    "DoctorDashboardStats",
    "DrugType",
    "Medication",
    "PatientVitals",
    "Prescription",
    "SLAMetrics",
    "SLAStatus",
    "SubmitDiagnosisRequest",
]
