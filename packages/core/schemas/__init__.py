from packages.core.schemas.auth import LoginRequest, LoginResponse, User
from packages.core.schemas.case import (
    Case,
    DoctorDashboardStats,
    Medication,
    Prescription,
    SLAMetrics,
    SubmitDiagnosisRequest,
)
from packages.core.schemas.chat import ChatMessage, ChatMessagesPage, ChatThread, SendMessageRequest, UnreadCounts
from packages.core.schemas.envelope import ApiResponse, PaginatedResponse

__all__ = [
    "ApiResponse",
    "Case",
    "ChatMessage",
    "ChatMessagesPage",
    "ChatThread",
    "DoctorDashboardStats",
    "LoginRequest",
    "LoginResponse",
    "Medication",
    "PaginatedResponse",
    "Prescription",
    "SLAMetrics",
    "SendMessageRequest",
    "SubmitDiagnosisRequest",
    "UnreadCounts",
    "User",
]
