from packages.workflow.case_actions import claim_case, load_case, refresh_case
from packages.workflow.chat_actions import ChatView, open_chat, send_message
from packages.workflow.diagnosis import build_diagnosis_request, submit_diagnosis, validate_diagnosis
from packages.workflow.poller import Poller, messages_poller, unread_counts_poller

__all__ = [
    "ChatView",
    "Poller",
    "build_diagnosis_request",
    "claim_case",
    "load_case",
    "messages_poller",
    "open_chat",
    "refresh_case",
    "send_message",
    "submit_diagnosis",
    "unread_counts_poller",
    "validate_diagnosis",
]
