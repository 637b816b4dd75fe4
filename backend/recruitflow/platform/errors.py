"""Domain error taxonomy shared by every component.

Components raise these; ``main.py`` maps them to HTTP responses.
"""

from __future__ import annotations

from typing import Any


class DomainError(Exception):
    """Base exception for domain errors."""

    status_code = 400
    code = "DOMAIN_ERROR"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.message, "code": self.code}
        payload.update(self.details)
        return payload


class ValidationError(DomainError):
    """Malformed or missing input, weight-sum violation."""

    status_code = 400
    code = "VALIDATION_ERROR"


class NotFoundError(DomainError):
    """Resource not found."""

    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, resource: str, identifier: Any = None, message: str | None = None):
        details = {"resource": resource}
        if identifier is not None:
            details["id"] = identifier
        super().__init__(message or f"{resource} not found", details=details)


class AuthorizationError(DomainError):
    """Caller lacks ownership or role for the operation."""

    status_code = 403
    code = "FORBIDDEN"


class ConflictError(DomainError):
    """Operation blocked by dependent rows; message says what to delete first."""

    status_code = 400
    code = "CONFLICT"


class NoNextRoundError(DomainError):
    status_code = 400
    code = "NO_NEXT_ROUND"

    def __init__(self, recruitment_round_id: Any):
        super().__init__(
            "No next round found. Cannot accept applicant.",
            details={"recruitment_round_id": recruitment_round_id},
        )


class StoreError(DomainError):
    """Underlying query failure. The original exception is logged, not exposed."""

    status_code = 500
    code = "STORE_ERROR"

    def __init__(self, message: str = "Database operation failed", *, operation: str | None = None):
        details = {"operation": operation} if operation else None
        super().__init__(message, details=details)
