from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import Field

from packages.core.schemas.base import PortalModel

MessageType = Literal["Text", "Image", "Document", "SystemNotification"]
SenderRole = Literal["Doctor", "PMV"]


class ChatMessage(PortalModel):
    """Immutable once sent, apart from the read receipt fields."""
    id: str
    case_id: str
    sender_id: str
    sender_name: Optional[str] = None
    sender_role: SenderRole
    message: str = ""
    message_type: Optional[MessageType] = None
    attachment_url: Optional[str] = None
    attachment_name: Optional[str] = None
    is_read: bool = False
    read_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class ChatThread(PortalModel):
    id: str
    case_id: str
    case_number: Optional[str] = None
    doctor_id: Optional[str] = None
    doctor_name: Optional[str] = None
    pmv_id: Optional[str] = None
    pmv_name: Optional[str] = None
    last_message: Optional[str] = None
    last_message_at: Optional[datetime] = None
    unread_count: int = 0
    is_active: bool = True


class ChatMessagesPage(PortalModel):
    case_id: str
    case_number: Optional[str] = None
    thread: Optional[ChatThread] = None
    messages: List[ChatMessage] = Field(default_factory=list)
    has_more: bool = False


class SendMessageRequest(PortalModel):
    case_id: str
    message: str
    message_type: MessageType = "Text"
    attachment_url: Optional[str] = None
    attachment_name: Optional[str] = None


class UnreadCounts(PortalModel):
    total_unread_count: int = 0
    unread_by_case_id: Dict[str, int] = Field(default_factory=dict)


__all__ = [
    "ChatMessage",
    "ChatMessagesPage",
    "ChatThread",
    "MessageType",
    "SendMessageRequest",
    "SenderRole",
    "UnreadCounts",
]
