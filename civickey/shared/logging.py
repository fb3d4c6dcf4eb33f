"""Logging configuration for the application."""

import logging
import sys
from contextvars import ContextVar

from civickey.core.config import get_settings

# Set by RequestIDMiddleware for the duration of a request.
current_request_id: ContextVar[str | None] = ContextVar(
    "current_request_id", default=None
)


class RequestIDFilter(logging.Filter):
    """Attach the current request ID (or '-') to every record as request_id."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = current_request_id.get() or "-"
        return True


def setup_logging() -> None:
    """Configure application-wide logging.

    Level is DEBUG when settings.debug is True, otherwise INFO.
    Output goes to stdout.
    """
    settings = get_settings()
    log_level = logging.DEBUG if settings.debug else logging.INFO
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIDFilter())
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s",
        handlers=[handler],
    )
