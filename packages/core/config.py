from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

from packages.caselogic.claim_gate import ChatClaimPolicy

DEFAULT_BASE_URL = "http://127.0.0.1:5000/api"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


class PortalConfig(BaseModel):
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: int = 30
    max_retries: int = 3
    sla_target_minutes: int = 30
    chat_claim_policy: ChatClaimPolicy = ChatClaimPolicy.PROMPT
    unread_poll_seconds: int = 30
    message_poll_seconds: int = 60
    token: Optional[str] = None
    session_id: Optional[str] = None
    doctor_id: Optional[str] = None


def load_config(env_path: Optional[Path] = None) -> PortalConfig:
    """Read PORTAL_* settings; a .env file fills in anything not already set."""
    load_dotenv(env_path, override=False)
    return PortalConfig(
        base_url=os.getenv("PORTAL_API_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
        timeout_seconds=_env_int("PORTAL_TIMEOUT_SECONDS", 30),
        max_retries=_env_int("PORTAL_MAX_RETRIES", 3),
        sla_target_minutes=_env_int("PORTAL_SLA_TARGET_MINUTES", 30),
        chat_claim_policy=ChatClaimPolicy(os.getenv("PORTAL_CHAT_CLAIM_POLICY", "prompt").strip().lower()),
        unread_poll_seconds=_env_int("PORTAL_UNREAD_POLL_SECONDS", 30),
        message_poll_seconds=_env_int("PORTAL_MESSAGE_POLL_SECONDS", 60),
        token=os.getenv("PORTAL_TOKEN") or None,
        session_id=os.getenv("PORTAL_SESSION_ID") or None,
        doctor_id=os.getenv("PORTAL_DOCTOR_ID") or None,
    )


__all__ = ["DEFAULT_BASE_URL", "PortalConfig", "load_config"]
