"""
Exception handlers.

Maps the assistant exception hierarchy to HTTP status codes and the shared
ErrorResponse body. Only the public message is returned; details are logged.

Dependencies: fastapi, tutor_backend.core.exceptions
System role: Error-to-HTTP translation
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from tutor_backend.core.exceptions import (
    AccessDeniedError,
    RateLimitedError,
    TutorAssistantError,
    UpstreamUnavailableError,
    ValidationError,
)
from tutor_backend.models.common import ErrorResponse
from tutor_backend.observability.log_utils import log_with_context

logger = logging.getLogger(__name__)


def status_code_for(exc: TutorAssistantError) -> int:
    """HTTP status for an assistant error."""
    if isinstance(exc, RateLimitedError):
        return status.HTTP_429_TOO_MANY_REQUESTS
    if isinstance(exc, AccessDeniedError):
        return status.HTTP_404_NOT_FOUND if exc.not_found else status.HTTP_403_FORBIDDEN
    if isinstance(exc, ValidationError):
        return status.HTTP_422_UNPROCESSABLE_ENTITY
    if isinstance(exc, UpstreamUnavailableError):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def tutor_assistant_error_handler(request: Request, exc: TutorAssistantError) -> JSONResponse:
    """Render an assistant error as ErrorResponse."""
    status_code = status_code_for(exc)
    log_with_context(
        logger,
        logging.WARNING,
        f"{__name__}:tutor_assistant_error_handler - {type(exc).__name__} on {request.url.path}",
        status_code=status_code,
        **exc.details,
    )
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=exc.message).model_dump(),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the assistant error handler to an app."""
    app.add_exception_handler(TutorAssistantError, tutor_assistant_error_handler)
