from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from packages.core.schemas.base import PortalModel

UserRole = Literal["Admin", "SuperAdmin", "PMV", "Doctor"]


class User(PortalModel):
    id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    full_name: Optional[str] = None
    phone_number: Optional[str] = None
    role: UserRole = "Doctor"
    is_active: bool = True
    is_email_verified: bool = False
    specialization: Optional[str] = None
    license_number: Optional[str] = None
    created_at: Optional[datetime] = None


class LoginRequest(PortalModel):
    email: str
    password: str
    device_fingerprint: Optional[str] = None


class LoginResponse(PortalModel):
    user_id: str
    email: str
    full_name: Optional[str] = None
    role: UserRole = "Doctor"
    id_token: str
    refresh_token: Optional[str] = None
    expires_in: int = 3600
    session_id: Optional[str] = None


__all__ = ["LoginRequest", "LoginResponse", "User", "UserRole"]
