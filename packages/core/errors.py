from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from packages.core.schemas.case import Case


class PortalError(RuntimeError):
    """Base for everything this package raises on purpose."""


class ActionNotAllowed(PortalError):
    def __init__(self, action: str, message: str) -> None:
        self.action = action
        super().__init__(message)


class SessionExpired(PortalError):
    pass


class DiagnosisValidationError(PortalError):
    def __init__(self, errors: List[str]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class PortalAPIError(PortalError):
    """Backend rejected a call, either via HTTP status or ``success: false``."""

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        url: Optional[str] = None,
        errors: Optional[List[str]] = None,
    ) -> None:
        self.status = status
        self.url = url
        self.errors = list(errors or [])
        super().__init__(message)


class ClaimConflictError(PortalAPIError):
    """Someone else holds the case. ``case`` is the refreshed server copy, if fetched."""

    def __init__(self, message: str, *, case: Optional["Case"] = None, **kwargs) -> None:
        self.case = case
        super().__init__(message, **kwargs)

    @property
    def current_owner(self) -> Optional[str]:
        if self.case is None:
            return None
        return self.case.doctor_name or self.case.doctor_id


class StaleCaseError(PortalAPIError):
    """A gated action was rejected; ``case`` holds the reconciled server state."""

    def __init__(self, message: str, *, case: Optional["Case"] = None, **kwargs) -> None:
        self.case = case
        super().__init__(message, **kwargs)


__all__ = [
    "ActionNotAllowed",
    "ClaimConflictError",
    "DiagnosisValidationError",
    "PortalAPIError",
    "PortalError",
    "SessionExpired",
    "StaleCaseError",
]
