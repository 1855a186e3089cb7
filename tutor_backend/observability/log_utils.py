"""
Logging utilities for structured logging.

Upstream errors are logged here with full detail; user-facing messages are
produced elsewhere and never include these values.

Dependencies: logging (stdlib)
System role: Logging helper functions
"""

import logging
from typing import Any

# LogRecord attributes that must not be overwritten through ``extra``.
_RESERVED = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}


def safe_log_value(value: Any, max_length: int = 500) -> str:
    """
    Convert any value to a bounded string for logging.

    Collections are summarised by size rather than dumped, so prompts and
    embeddings never flood the logs.

    Args:
        value: Value to convert
        max_length: Maximum length before truncating

    Returns:
        str: Safe string representation
    """
    try:
        if value is None:
            return "None"
        if isinstance(value, str):
            text = value
        elif isinstance(value, (list, tuple)):
            text = f"{type(value).__name__}({len(value)} items)"
        elif isinstance(value, dict):
            text = f"dict({len(value)} keys)"
        else:
            text = str(value)

        if len(text) > max_length:
            return f"{text[:max_length]}... (truncated, {len(text)} total)"
        return text
    except Exception as e:
        return f"<unable to log: {type(e).__name__}>"


def _safe_context(context: dict[str, Any]) -> dict[str, str]:
    return {
        (f"ctx_{key}" if key in _RESERVED else key): safe_log_value(val)
        for key, val in context.items()
    }


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **context: Any,
) -> None:
    """
    Log a message with structured context.

    Args:
        logger: Logger instance
        level: Log level (logging.INFO, etc.)
        message: Log message
        **context: Arbitrary key-value pairs attached as record attributes
    """
    logger.log(level, message, extra=_safe_context(context))


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: BaseException,
    **context: Any,
) -> None:
    """
    Log an exception with traceback and context.

    Args:
        logger: Logger instance
        message: Log message
        exc: Exception instance
        **context: Additional context
    """
    safe_context = _safe_context(context)
    safe_context.update({
        "error_type": type(exc).__name__,
        "error_msg": safe_log_value(str(exc)),
    })
    logger.error(message, exc_info=exc, extra=safe_context)
