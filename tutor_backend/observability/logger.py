"""
Logger configuration.

Configures the root logger once with an ISO timestamp format and injects the
current correlation ID into every record.

Dependencies: logging (stdlib), tutor_backend.observability.correlation
System role: Centralized logging configuration
"""

import logging
import sys

from tutor_backend.observability.correlation import get_correlation_id

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(correlation_id)s] %(message)s"


class CorrelationIdFilter(logging.Filter):
    """Attach the active correlation ID to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "-"
        return True


def configure_logging(level: str = "INFO") -> None:
    """
    Configure Python logging with ISO timestamp and correlation IDs.

    Args:
        level: Root log level name (DEBUG, INFO, WARNING, ...)
    """
    # Remove any existing handlers to avoid duplicates
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.DEBUG)
    handler.addFilter(CorrelationIdFilter())
    handler.setFormatter(
        logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    )

    root_logger.setLevel(level.upper())
    root_logger.addHandler(handler)

    # Reduce noise from verbose third-party libraries
    for noisy in ("httpx", "httpcore", "urllib3", "google", "sqlalchemy.engine"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

