from packages.caselogic.assessment import CaseAssessment, assess_case
from packages.caselogic.claim_gate import ChatClaimPolicy, available_actions, require_action
from packages.caselogic.drugs import DrugClassification, classify_drug
from packages.caselogic.edit_window import EditWindow, can_edit
from packages.caselogic.sla import classify_sla, sla_breakdown

__all__ = [
    "CaseAssessment",
    "ChatClaimPolicy",
    "DrugClassification",
    "EditWindow",
    "assess_case",
    "available_actions",
    "can_edit",
    "classify_drug",
    "classify_sla",
    "require_action",
    "sla_breakdown",
]
