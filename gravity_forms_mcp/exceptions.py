"""Custom exception hierarchy for the Gravity Forms MCP system.

All exceptions carry a machine-readable ``error_code``, a ``details`` mapping
and a ``user_message`` that is safe to surface to the agent host.
"""

from __future__ import annotations

from typing import Any

UNKNOWN_ERROR = "UNKNOWN_ERROR"


class GravityFormsMCPError(Exception):
    """Base exception for all Gravity Forms MCP errors."""

    def __init__(
        self,
        message: str,
        error_code: str = UNKNOWN_ERROR,
        details: dict[str, Any] | None = None,
        user_message: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.user_message = user_message or message

    def to_dict(self) -> dict[str, Any]:
        """Convert the exception to a dictionary for structured responses."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "user_message": self.user_message,
            "details": self.details,
        }


class ValidationError(GravityFormsMCPError):
    """Raised when a single tool parameter fails validation."""

    def __init__(self, message: str, field: str | None = None, value: Any = None, **kwargs):
        details = kwargs.pop("details", {})
        if field:
            details["field"] = field
        if value is not None:
            details["invalid_value"] = value
        super().__init__(message, error_code="VALIDATION_ERROR", details=details, **kwargs)


class BulkValidationError(GravityFormsMCPError):
    """Raised before any remote call when a bulk request violates its constraints."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        message = f"Validation failed: {', '.join(self.errors)}"
        super().__init__(
            message,
            error_code="BULK_VALIDATION_ERROR",
            details={"errors": self.errors},
        )


class ConfigurationError(GravityFormsMCPError):
    """Raised when the server configuration cannot produce a usable API connection."""

    def __init__(self, message: str, setting: str | None = None, **kwargs):
        details = kwargs.pop("details", {})
        if setting:
            details["setting"] = setting
        super().__init__(message, error_code="CONFIGURATION_ERROR", details=details, **kwargs)


class APIRequestError(GravityFormsMCPError):
    """Raised when a call to the Gravity Forms REST API fails."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        error_code: str = "API_REQUEST_ERROR",
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if status_code is not None:
            details["status_code"] = status_code
        self.status_code = status_code
        super().__init__(message, error_code=error_code, details=details, **kwargs)


class EntryNotFoundError(GravityFormsMCPError):
    """Raised when an entry does not exist on the remote site."""

    def __init__(self, entry_id: str, **kwargs):
        details = kwargs.pop("details", {})
        details["entry_id"] = entry_id
        super().__init__(
            f"Entry not found: {entry_id}",
            error_code="ENTRY_NOT_FOUND",
            details=details,
            user_message=f"Entry '{entry_id}' does not exist.",
            **kwargs,
        )
