"""
Core business logic module.

Pure, synchronous building blocks of the assistant: chunking, prompt
assembly, rate limiting, background job execution, and the exception
hierarchy.
"""

from tutor_backend.core.exceptions import (
    AccessDeniedError,
    AIDisabledError,
    CourseNotFoundError,
    EnrollmentRequiredError,
    RateLimitedError,
    TenantKeyMissingError,
    TenantNotFoundError,
    TutorAssistantError,
    UpstreamUnavailableError,
    ValidationError,
)

__all__ = [
    "TutorAssistantError",
    "RateLimitedError",
    "AccessDeniedError",
    "CourseNotFoundError",
    "EnrollmentRequiredError",
    "TenantKeyMissingError",
    "TenantNotFoundError",
    "AIDisabledError",
    "UpstreamUnavailableError",
    "ValidationError",
]
