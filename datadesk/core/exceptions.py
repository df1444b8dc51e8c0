"""Typed failures raised by services and mapped to HTTP responses in main."""

from typing import Any


class DashboardError(Exception):
    """Base exception for all domain errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict[str, Any]:
        return {"message": self.message}


class UnauthenticatedError(DashboardError):
    """No valid session."""

    status_code = 401


class ForbiddenError(DashboardError):
    """Role lacks the capability for this action."""

    status_code = 403


class NotFoundError(DashboardError):
    """Referenced row does not exist."""

    status_code = 404


class ValidationFailure(DashboardError):
    """Malformed input, with optional field-level detail."""

    status_code = 400

    def __init__(self, message: str, errors: list[dict[str, str]] | None = None):
        super().__init__(message)
        self.errors = errors or []

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        if self.errors:
            payload["errors"] = self.errors
        return payload


class InvalidTransitionError(ValidationFailure):
    """Status change requested out of a terminal state."""


class ConflictError(DashboardError):
    """Unique constraint violation on a named field."""

    status_code = 400

    def __init__(self, message: str, field: str):
        super().__init__(message)
        self.field = field

    def to_payload(self) -> dict[str, Any]:
        return {"message": self.message, "field": self.field}


class TransactionFailure(DashboardError):
    """An engine transaction failed and was rolled back."""

    status_code = 500
