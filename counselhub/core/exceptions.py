"""
Exception hierarchy for the CounselHub application.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class CounselHubException(Exception):
    """Base exception for all CounselHub application errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(CounselHubException):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class AuthenticationError(CounselHubException):
    """Raised when credentials or a bearer token cannot be verified."""

    def __init__(self, message: str = "Could not validate credentials") -> None:
        super().__init__(message)


class PermissionDeniedError(CounselHubException):
    """Raised when an authenticated account may not perform an operation."""

    def __init__(
        self,
        message: str = "Not allowed",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)


class NotFoundError(CounselHubException):
    """Base exception for unknown resource identifiers."""

    resource = "Resource"

    def __init__(self, resource_id: Any, details: dict[str, Any] | None = None) -> None:
        """
        Initialize not found error.

        Args:
            resource_id: ID of the missing resource
            details: Additional context
        """
        details = details or {}
        details["id"] = str(resource_id)
        super().__init__(f"{self.resource} not found: {resource_id}", details)


class SessionNotFoundError(NotFoundError):
    """Raised when a counseling session cannot be found."""

    resource = "Session"


class UserNotFoundError(NotFoundError):
    """Raised when a user account cannot be found."""

    resource = "User"


class NotificationNotFoundError(NotFoundError):
    """Raised when a notification cannot be found for its recipient."""

    resource = "Notification"


class CheckInNotFoundError(NotFoundError):
    """Raised when a check-in cannot be found."""

    resource = "Check-in"


class ConflictError(CounselHubException):
    """Raised when a write loses against the current state of the store."""

    pass


class InvalidTransitionError(ConflictError):
    """Raised when a session status transition is not allowed."""

    def __init__(
        self,
        session_id: Any,
        current: str,
        operation: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize invalid transition error.

        Args:
            session_id: Session the operation targeted
            current: Status the session is currently in
            operation: Name of the rejected operation
            details: Additional context
        """
        details = details or {}
        details.update(
            {"session_id": str(session_id), "status": current, "operation": operation}
        )
        super().__init__(f"Cannot {operation} a session that is {current}", details)


class CounselorAtCapacityError(ConflictError):
    """Raised when a counselor already holds the maximum active sessions."""

    def __init__(self, counselor_id: Any, limit: int) -> None:
        super().__init__(
            f"Counselor already has {limit} active sessions",
            {"counselor_id": str(counselor_id), "limit": limit},
        )


class DuplicateAccountError(ConflictError):
    """Raised when a username or e-mail is already registered."""

    def __init__(self, field: str, value: str) -> None:
        super().__init__(f"An account with this {field} already exists", {field: value})


class CompanionUnavailableError(CounselHubException):
    """Raised when the AI companion model cannot produce a reply."""

    pass
