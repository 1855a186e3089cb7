"""
Exception hierarchy for the tutoring assistant.

Every category carries a short, stable public message that is safe to show
to a learner. Upstream detail (provider bodies, stack traces) goes into
``details`` for logging only and is never serialised to clients.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class TutorAssistantError(Exception):
    """Base exception for all tutoring assistant errors."""

    public_message = "The AI assistant could not process this request."

    def __init__(self, message: str | None = None, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: User-safe error message (defaults to the class public message)
            details: Optional dictionary of additional context for debugging
        """
        self.message = message or self.public_message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class RateLimitedError(TutorAssistantError):
    """Raised when a principal exceeds its request window."""

    public_message = "Too many requests. Please try again in a few minutes."

    def __init__(self, principal_id: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize rate limit error.

        Args:
            principal_id: User id or IP-derived key that was throttled
            details: Additional context
        """
        details = details or {}
        details["principal_id"] = principal_id
        super().__init__(None, details)


class AccessDeniedError(TutorAssistantError):
    """Raised when the principal may not use the assistant for this target."""

    public_message = "You do not have access to the AI assistant for this request."

    # Distinguishes "course not found" (404) from the other denials (403).
    not_found = False


class CourseNotFoundError(AccessDeniedError):
    """Raised when a course-scoped chat names a course that does not exist."""

    public_message = "Course not found"
    not_found = True

    def __init__(self, course_id: Any, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["course_id"] = str(course_id)
        super().__init__(None, details)


class TenantNotFoundError(AccessDeniedError):
    """Raised when a request names a tenant that does not exist."""

    public_message = "Tenant not found"
    not_found = True

    def __init__(self, tenant_id: Any, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["tenant_id"] = str(tenant_id)
        super().__init__(None, details)


class EnrollmentRequiredError(AccessDeniedError):
    """Raised when the learner has no active enrollment in the course."""

    public_message = (
        "You must have an active enrollment in this course to use the AI assistant."
    )


class TenantKeyMissingError(AccessDeniedError):
    """Raised when a tenant-scoped request has no configured Gemini key."""

    public_message = "Ask the Admin to Configure Gemini Key"


class AIDisabledError(AccessDeniedError):
    """Raised when a tenant has switched AI features off."""

    public_message = "AI Features are currently disabled globally."


class UpstreamUnavailableError(TutorAssistantError):
    """Raised when the embedding or generation backend fails (masked)."""

    public_message = "The AI service is temporarily unavailable. Please try again."

    def __init__(
        self,
        message: str | None = None,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize upstream error.

        Args:
            message: User-safe message
            operation: Upstream operation that failed (embed, generate)
            details: Additional context (logged, never returned)
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class ValidationError(TutorAssistantError):
    """Raised when input validation fails."""

    public_message = "Invalid request."

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
