"""
Logging configuration for provider operations.

Every list/read/create/delete call is logged on the
``workspacefs.operations`` logger as one structured JSON line, so that
multi-backend setups can be traced per backend and per path.
"""

import json
import logging
from logging.handlers import TimedRotatingFileHandler
from typing import Any

OPERATIONS_LOGGER = "workspacefs.operations"

_EXTRA_FIELDS = (
    "event",
    "backend",
    "operation",
    "path",
    "kind",
    "duration_ms",
    "error",
)


class ProviderOperationFormatter(logging.Formatter):
    """Format log records as JSON with operation context."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for field in _EXTRA_FIELDS:
            if hasattr(record, field):
                log_entry[field] = getattr(record, field)

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


def configure_logging(
    log_file: str | None = None,
    log_level: str = "INFO",
    enable_console: bool = True,
) -> None:
    """
    Configure the operations logger.

    Args:
        log_file: Path to a log file (optional, rotated hourly)
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        enable_console: Whether to also log to the console
    """
    logger = logging.getLogger(OPERATIONS_LOGGER)
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    logger.propagate = False

    logger.handlers.clear()

    formatter = ProviderOperationFormatter()

    if log_file:
        file_handler = TimedRotatingFileHandler(
            log_file,
            when="H",
            interval=1,
            backupCount=168,  # 7 days
            encoding="utf-8",
            utc=False,
        )
        file_handler.suffix = "%Y%m%d_%H%M%S.log"
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if enable_console:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)


def get_operation_logger() -> logging.Logger:
    """Get the provider operations logger."""
    return logging.getLogger(OPERATIONS_LOGGER)
