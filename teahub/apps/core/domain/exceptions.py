from __future__ import annotations

from typing import Any, Dict


class DomainError(Exception):
    status_code = 400
    error_code = "error"

    def __init__(self, detail: str | None = None, *, error_code: str | None = None) -> None:
        self.detail = detail or "An error occurred."
        if error_code:
            self.error_code = error_code
        super().__init__(self.detail)

    @property
    def public_detail(self) -> str:
        """Message safe to return to API callers."""
        return self.detail

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.public_detail}


class ValidationError(DomainError):
    status_code = 400
    error_code = "validation_error"


class InvalidLifecycleTransitionError(ValidationError):
    error_code = "invalid_lifecycle_transition"

    def __init__(self, current: str, requested: str) -> None:
        super().__init__(f"Invalid lifecycle transition from '{current}' to '{requested}'")
        self.current = current
        self.requested = requested


class AuthenticationRequiredError(DomainError):
    status_code = 401
    error_code = "authentication_required"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or "Authentication required")


class AccessDeniedError(DomainError):
    status_code = 403
    error_code = "access_denied"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or "Access denied")


class NotFoundError(DomainError):
    status_code = 404
    error_code = "not_found"


class ConflictError(DomainError):
    status_code = 409
    error_code = "conflict"


class DuplicateAssociationError(ConflictError):
    error_code = "duplicate_association"


class InternalError(DomainError):
    """Unexpected store or transaction failure; the detail is logged, never returned."""

    status_code = 500
    error_code = "internal_error"

    @property
    def public_detail(self) -> str:
        return "Internal server error"


class CorruptRecordError(InternalError):
    error_code = "corrupt_record"
