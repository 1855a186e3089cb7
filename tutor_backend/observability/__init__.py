"""
Observability module.

Provides logging configuration, correlation ID tracking, and structured
logging helpers.
"""

from tutor_backend.observability.correlation import (
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from tutor_backend.observability.logger import configure_logging
from tutor_backend.observability.log_utils import (
    log_exception_with_context,
    log_with_context,
)
from tutor_backend.observability.middleware import (
    CorrelationMiddleware,
    RequestLoggingMiddleware,
)

__all__ = [
    "configure_logging",
    "log_with_context",
    "log_exception_with_context",
    "set_correlation_id",
    "get_correlation_id",
    "clear_correlation_id",
    "CorrelationMiddleware",
    "RequestLoggingMiddleware",
]
