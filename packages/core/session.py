from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional

from packages.caselogic.clock import as_aware, utcnow
from packages.core.errors import SessionExpired
from packages.core.schemas.auth import LoginResponse, User


@dataclass
class DoctorSession:
    """Auth context for one signed-in doctor.

    Created from a login response and handed to the client explicitly.
    Once invalidated (logout, 401, expiry) it cannot be revived; log in again.
    """

    doctor_id: str
    token: str
    refresh_token: Optional[str] = None
    session_id: Optional[str] = None
    email: Optional[str] = None
    full_name: Optional[str] = None
    expires_at: Optional[datetime] = None
    user: Optional[User] = None
    invalidated: bool = field(default=False)

    @classmethod
    def from_login(cls, response: LoginResponse, now: Optional[datetime] = None) -> "DoctorSession":
        issued = now or utcnow()
        return cls(
            doctor_id=response.user_id,
            token=response.id_token,
            refresh_token=response.refresh_token,
            session_id=response.session_id,
            email=response.email,
            full_name=response.full_name,
            expires_at=as_aware(issued) + timedelta(seconds=response.expires_in),
        )

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.expires_at is None:
            return False
        return as_aware(now or utcnow()) >= as_aware(self.expires_at)

    @property
    def is_active(self) -> bool:
        return not self.invalidated and not self.is_expired()

    def invalidate(self) -> None:
        self.invalidated = True

    def auth_headers(self) -> dict[str, str]:
        if self.invalidated:
            raise SessionExpired("Session has been signed out; log in again.")
        if self.is_expired():
            self.invalidated = True
            raise SessionExpired("Session expired; log in again.")
        headers = {"Authorization": f"Bearer {self.token}"}
        if self.session_id:
            headers["X-Session-Id"] = self.session_id
        return headers


__all__ = ["DoctorSession"]
