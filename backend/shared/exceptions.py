"""
Base exception classes for the Taskboard backend.

Each module should define its own exceptions that inherit from these bases.
The API layer maps each base class to one HTTP status code in a single place
(api/error_handlers.py), so modules never pick status codes themselves.
"""

from typing import Optional, Any


class TaskboardError(Exception):
    """
    Base exception for all Taskboard errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to the error envelope used by API responses."""
        body: dict[str, Any] = {
            "success": False,
            "error": self.message,
            "code": self.code,
        }
        if self.details:
            body["details"] = self.details
        return body


class NotFoundError(TaskboardError):
    """Resource not found."""

    pass


class ValidationError(TaskboardError):
    """Input validation failed."""

    pass


class ConflictError(TaskboardError):
    """Resource already exists or conflicts with existing state."""

    pass


class AuthenticationError(TaskboardError):
    """Authentication failed (invalid or missing credentials)."""

    pass


class AuthorizationError(TaskboardError):
    """Authorization failed (authenticated but not allowed)."""

    pass


class DatabaseError(TaskboardError):
    """The document store failed or returned an unusable result."""

    def __init__(
        self,
        message: str = "Database operation failed",
        code: Optional[str] = "DATABASE_ERROR",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)


class RequestTimeoutError(TaskboardError):
    """The request did not finish within the configured timeout."""

    def __init__(self, timeout_seconds: float):
        super().__init__(
            "Request timeout",
            code="REQUEST_TIMEOUT",
            details={"timeout_seconds": timeout_seconds},
        )


class ExternalServiceError(TaskboardError):
    """Error communicating with an external service."""

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service
