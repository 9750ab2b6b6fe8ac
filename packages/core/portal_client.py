from __future__ import annotations

import json
import logging
import random
import time
import urllib.error
import urllib.parse
import urllib.request
import uuid
from typing import Any, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from packages.core.config import PortalConfig
from packages.core.device import device_fingerprint
from packages.core.errors import ClaimConflictError, PortalAPIError, SessionExpired
from packages.core.schemas.auth import LoginRequest, LoginResponse, User
from packages.core.schemas.case import (
    Case,
    DoctorDashboardStats,
    SLAMetrics,
    SubmitDiagnosisRequest,
)
from packages.core.schemas.chat import (
    ChatMessage,
    ChatMessagesPage,
    ChatThread,
    SendMessageRequest,
    UnreadCounts,
)
from packages.core.schemas.envelope import PaginatedResponse, error_text
from packages.core.session import DoctorSession

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

_RETRY_STATUSES = {429, 503}


def _error_body(error: urllib.error.HTTPError) -> str:
    """Best-effort text of an error response; an unreadable body is empty."""
    try:
        raw = error.read() or b""
    except (OSError, ValueError):
        return ""
    return raw.decode("utf-8", errors="replace")


def _parse_json(text: str) -> Any:
    try:
        return json.loads(text) if text.strip() else None
    except ValueError:
        return None


class PortalClient:
    """Thin facade over the doctor-portal REST API.

    Every response is envelope-checked; ``data`` is only returned when the
    backend says ``success``. Nothing here retries a claim or mutates local
    state optimistically.
    """

    def __init__(self, config: PortalConfig, session: Optional[DoctorSession] = None) -> None:
        self.config = config
        self.base_url = config.base_url.rstrip("/")
        self.session = session
        self._fingerprint = device_fingerprint()

    # -- transport ---------------------------------------------------------

    def _headers(self, auth: bool) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "X-Request-Id": uuid.uuid4().hex[:8],
            "X-Device-Fingerprint": self._fingerprint,
        }
        if auth:
            if self.session is None:
                raise SessionExpired("Not signed in.")
            headers.update(self.session.auth_headers())
        return headers

    def _url(self, path: str, params: Optional[dict] = None) -> str:
        url = f"{self.base_url}/{path.lstrip('/')}"
        if params:
            query = {key: value for key, value in params.items() if value is not None}
            if query:
                url = f"{url}?{urllib.parse.urlencode(query)}"
        return url

    def _raise_for_status(self, status: int, url: str, body_text: str, content_type: str) -> None:
        payload = _parse_json(body_text)
        message = error_text(payload, fallback=f"Request failed with status {status}")
        errors = payload.get("errors") if isinstance(payload, dict) and isinstance(payload.get("errors"), list) else None
        logger.warning(
            "portal HTTPError: status=%s content_type=%s url=%s body_preview=%s",
            status,
            content_type,
            url,
            body_text.strip()[:500],
        )
        if status == 401:
            if self.session is not None:
                self.session.invalidate()
            raise SessionExpired(message)
        if status == 409:
            raise ClaimConflictError(message, status=status, url=url, errors=errors)
        raise PortalAPIError(message, status=status, url=url, errors=errors)

    def request(
        self,
        method: str,
        path: str,
        *,
        payload: Optional[dict] = None,
        params: Optional[dict] = None,
        auth: bool = True,
    ) -> Any:
        url = self._url(path, params)
        headers = self._headers(auth)
        data = json.dumps(payload).encode("utf-8") if payload is not None else None
        request = urllib.request.Request(url, data=data, headers=headers, method=method)
        request_id = headers["X-Request-Id"]
        logger.debug("portal request %s %s %s", request_id, method, url)

        max_retries = self.config.max_retries
        for attempt in range(max_retries + 1):
            started = time.monotonic()
            try:
                with urllib.request.urlopen(request, timeout=self.config.timeout_seconds) as response:
                    status = response.getcode()
                    raw = response.read()
                text = raw.decode("utf-8", errors="replace")
                logger.debug(
                    "portal response %s status=%s duration_ms=%d bytes=%d",
                    request_id,
                    status,
                    (time.monotonic() - started) * 1000,
                    len(raw),
                )
                return _parse_json(text)
            except urllib.error.HTTPError as exc:
                body_text = _error_body(exc)
                status = getattr(exc, "code", 0) or 0
                retry_after = None
                if exc.headers:
                    retry_after = exc.headers.get("Retry-After")
                if retry_after is not None:
                    try:
                        retry_after = float(retry_after)
                    except ValueError:
                        retry_after = None

                if status in _RETRY_STATUSES and attempt < max_retries:
                    backoff = 2**attempt
                    jitter = random.random() * 0.25
                    delay = retry_after if retry_after is not None else backoff
                    logger.info("portal retry %s status=%s in %.2fs", request_id, status, delay + jitter)
                    time.sleep(delay + jitter)
                    continue

                content_type = exc.headers.get("Content-Type", "unknown") if exc.headers else "unknown"
                self._raise_for_status(status, url, body_text, content_type)
            except urllib.error.URLError as exc:
                logger.warning("portal network error %s url=%s reason=%s", request_id, url, exc.reason)
                raise PortalAPIError(f"No response received from server: {exc.reason}", url=url) from exc

        raise PortalAPIError("Request failed after retries", url=url)

    # -- envelope ----------------------------------------------------------

    def _unwrap(self, body: Any, url_hint: str) -> Any:
        if not isinstance(body, dict):
            raise PortalAPIError(f"Malformed response from {url_hint}", url=url_hint)
        if not body.get("success"):
            raise PortalAPIError(
                error_text(body, fallback="Request was not successful"),
                url=url_hint,
                errors=body.get("errors") if isinstance(body.get("errors"), list) else None,
            )
        return body.get("data")

    def _model(self, model: Type[M], data: Any, url_hint: str) -> M:
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            raise PortalAPIError(f"Unexpected payload from {url_hint}: {exc.error_count()} field error(s)", url=url_hint) from exc

    def _get_model(self, model: Type[M], path: str, params: Optional[dict] = None) -> M:
        return self._model(model, self._unwrap(self.request("GET", path, params=params), path), path)

    def _page(self, path: str, params: dict) -> PaginatedResponse[Case]:
        body = self.request("GET", path, params=params)
        # list endpoints may answer bare or envelope-wrapped
        if isinstance(body, dict) and "success" in body:
            body = self._unwrap(body, path)
        return self._model(PaginatedResponse[Case], body, path)

    # -- auth --------------------------------------------------------------

    def login(self, email: str, password: str) -> DoctorSession:
        request = LoginRequest(email=email, password=password, device_fingerprint=self._fingerprint)
        body = self.request("POST", "/auth/login", payload=request.to_wire(), auth=False)
        response = self._model(LoginResponse, self._unwrap(body, "/auth/login"), "/auth/login")
        self.session = DoctorSession.from_login(response)
        logger.info("signed in doctor=%s session=%s", self.session.doctor_id, bool(self.session.session_id))
        return self.session

    def get_profile(self) -> User:
        user = self._get_model(User, "/auth/profile")
        if self.session is not None:
            self.session.user = user
        return user

    def logout(self) -> None:
        session = self.session
        try:
            self.request("POST", "/auth/logout")
        finally:
            if session is not None:
                session.invalidate()
            self.session = None

    def refresh(self) -> DoctorSession:
        if self.session is None or not self.session.refresh_token:
            raise SessionExpired("No refresh token available; log in again.")
        body = self.request(
            "POST", "/auth/refresh", payload={"refreshToken": self.session.refresh_token}, auth=False
        )
        response = self._model(LoginResponse, self._unwrap(body, "/auth/refresh"), "/auth/refresh")
        self.session.invalidate()
        self.session = DoctorSession.from_login(response)
        return self.session

    # -- cases -------------------------------------------------------------

    def get_pending_cases(self, page: int = 1, page_size: int = 10) -> PaginatedResponse[Case]:
        return self._page(
            "/doctor/cases/pending", {"page": page, "pageSize": page_size, "status": "AwaitingDoctor"}
        )

    def get_my_cases(self, page: int = 1, page_size: int = 10, status: Optional[str] = None) -> PaginatedResponse[Case]:
        return self._page("/doctor/cases/my-cases", {"page": page, "pageSize": page_size, "status": status})

    def get_completed_cases(self, page: int = 1, page_size: int = 10) -> PaginatedResponse[Case]:
        return self._page("/doctor/cases/history", {"page": page, "pageSize": page_size, "status": "Completed"})

    def get_case(self, case_id: str) -> Case:
        return self._get_model(Case, f"/doctor/cases/{case_id}")

    def claim_case(self, case_id: str) -> Case:
        path = f"/doctor/cases/{case_id}/claim"
        try:
            body = self.request("POST", path)
        except ClaimConflictError:
            raise
        except PortalAPIError as exc:
            # any answered rejection is a lost claim; no status means no answer
            if exc.status is None:
                raise
            raise ClaimConflictError(str(exc), status=exc.status, url=exc.url, errors=exc.errors) from exc
        if isinstance(body, dict) and not body.get("success"):
            raise ClaimConflictError(
                error_text(body, fallback="Failed to claim case"),
                url=path,
                errors=body.get("errors") if isinstance(body.get("errors"), list) else None,
            )
        return self._model(Case, self._unwrap(body, path), path)

    def submit_diagnosis(self, request: SubmitDiagnosisRequest) -> Case:
        path = f"/doctor/cases/{request.case_id}/diagnosis"
        body = self.request("POST", path, payload=request.to_wire())
        return self._model(Case, self._unwrap(body, path), path)

    def get_dashboard_stats(self) -> DoctorDashboardStats:
        return self._get_model(DoctorDashboardStats, "/doctor/dashboard/stats")

    def get_sla_metrics(self) -> SLAMetrics:
        return self._get_model(SLAMetrics, "/doctor/dashboard/sla-metrics")

    # -- chat --------------------------------------------------------------

    def get_messages(self, case_id: str, limit: int = 50) -> ChatMessagesPage:
        return self._get_model(ChatMessagesPage, f"/chat/cases/{case_id}/messages", {"limit": limit})

    def send_message(self, request: SendMessageRequest) -> ChatMessage:
        body = self.request("POST", "/chat/messages", payload=request.to_wire())
        return self._model(ChatMessage, self._unwrap(body, "/chat/messages"), "/chat/messages")

    def mark_as_read(self, case_id: str) -> None:
        self.request("POST", f"/chat/cases/{case_id}/read")

    def get_threads(self) -> list[ChatThread]:
        data = self._unwrap(self.request("GET", "/chat/threads"), "/chat/threads")
        return [self._model(ChatThread, item, "/chat/threads") for item in data or []]

    def get_unread_counts(self) -> UnreadCounts:
        return self._get_model(UnreadCounts, "/chat/unread")


__all__ = ["PortalClient"]
