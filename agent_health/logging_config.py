"""
Structured logging configuration with correlation IDs and log files.
"""

from __future__ import annotations

import json
import logging
import sys
import traceback
from contextvars import ContextVar
from pathlib import Path

from agent_health.domain import domain_format_timestamp, domain_utc_now

SERVICE_LOGGER_NAME = "agent_health"
COMBINED_LOG_FILENAME = "combined.log"
ERROR_LOG_FILENAME = "error.log"
CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s"

# Context variable for the correlation ID of the request being handled
request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)

_RESERVED_RECORD_ATTRIBUTES = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", (), None).__dict__
) | {"message", "asctime", "request_id", "taskName"}


class RequestIdLogFilter(logging.Filter):
    """Attach the current correlation ID to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get() or "-"
        return True


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON with additional metadata."""
        request_id = getattr(record, "request_id", None)
        log_entry: dict[str, object] = {
            "timestamp": domain_format_timestamp(domain_utc_now()),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": None if request_id in (None, "-") else request_id,
        }

        if record.exc_info and record.exc_info[0] is not None:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": traceback.format_exception(*record.exc_info),
            }

        # Extra fields passed through `extra=`
        for key, value in record.__dict__.items():
            if key not in _RESERVED_RECORD_ATTRIBUTES:
                log_entry[key] = value

        return json.dumps(log_entry, default=str)


def logging_configure(level: str = "info", log_directory: str | None = "logs") -> logging.Logger:
    """Configure process logging with console output and append-only log files.

    Existing root handlers are replaced so repeated calls stay idempotent.

    Args:
        level: Root log level name.
        log_directory: Directory for `combined.log` and `error.log`; None
            disables file output.

    Returns:
        logging.Logger: Service logger to pass into the application.

    Raises:
        OSError: Raised when the log directory cannot be created.
    """

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.getLevelName(level.upper()))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    request_id_filter = RequestIdLogFilter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    console_handler.addFilter(request_id_filter)
    root_logger.addHandler(console_handler)

    if log_directory:
        log_path = Path(log_directory)
        log_path.mkdir(parents=True, exist_ok=True)

        combined_handler = logging.FileHandler(log_path / COMBINED_LOG_FILENAME, encoding="utf-8")
        combined_handler.setFormatter(StructuredFormatter())
        combined_handler.addFilter(request_id_filter)
        root_logger.addHandler(combined_handler)

        error_handler = logging.FileHandler(log_path / ERROR_LOG_FILENAME, encoding="utf-8")
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(StructuredFormatter())
        error_handler.addFilter(request_id_filter)
        root_logger.addHandler(error_handler)

    return logging.getLogger(SERVICE_LOGGER_NAME)
