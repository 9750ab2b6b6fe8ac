from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from packages.caselogic.claim_gate import CHAT, CLAIM, ChatClaimPolicy, available_actions, require_action
from packages.core.errors import ClaimConflictError
from packages.core.portal_client import PortalClient
from packages.core.schemas.case import Case
from packages.core.schemas.chat import ChatMessage, MessageType, SendMessageRequest
from packages.workflow.case_actions import claim_case

logger = logging.getLogger(__name__)

CLAIM_PROMPT = "To chat with the PMV, you need to claim this case first. Would you like to claim it now?"


@dataclass
class ChatView:
    case: Case
    messages: List[ChatMessage] = field(default_factory=list)
    needs_claim: bool = False
    notice: Optional[str] = None


def open_chat(
    client: PortalClient,
    case_id: str,
    policy: ChatClaimPolicy = ChatClaimPolicy.PROMPT,
    limit: int = 50,
) -> ChatView:
    """Load a case thread, applying the chat claim policy to unclaimed cases."""
    case = client.get_case(case_id)
    doctor_id = client.session.doctor_id if client.session else None
    notice = None

    if CLAIM in available_actions(case, doctor_id):
        if policy == ChatClaimPolicy.AUTO:
            try:
                case = claim_case(client, case)
            except ClaimConflictError as exc:
                logger.info("auto-claim on chat open failed for case=%s: %s", case.case_number, exc)
                # still viewable, just not ours
                case = exc.case or case
                notice = str(exc)
        else:
            notice = CLAIM_PROMPT

    page = client.get_messages(case_id, limit=limit)
    view = ChatView(
        case=case,
        messages=page.messages,
        needs_claim=not case.is_claimed,
        notice=notice,
    )
    if case.is_claimed and any(not m.is_read and m.sender_role == "PMV" for m in page.messages):
        client.mark_as_read(case_id)
    return view


def send_message(
    client: PortalClient,
    case: Case,
    text: str,
    *,
    message_type: MessageType = "Text",
    attachment_url: Optional[str] = None,
    attachment_name: Optional[str] = None,
) -> ChatMessage:
    doctor_id = client.session.doctor_id if client.session else None
    require_action(case, doctor_id, CHAT)
    body = (text or "").strip()
    if not body and attachment_url:
        body = f"Sent a {message_type.lower()}"
    if not body:
        raise ValueError("Message is empty")
    request = SendMessageRequest(
        case_id=case.id,
        message=body,
        message_type=message_type,
        attachment_url=attachment_url,
        attachment_name=attachment_name,
    )
    return client.send_message(request)


__all__ = ["CLAIM_PROMPT", "ChatView", "open_chat", "send_message"]
