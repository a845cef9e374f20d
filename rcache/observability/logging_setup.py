"""
rcache - Logging Setup

Structured JSON logging for the rcache logger hierarchy.
Library code only calls logging.getLogger(__name__); applications opt in to
this formatter with configure_logging().
"""

import json
import logging
from datetime import UTC, datetime

from ..config.schemas import LogLevel

ROOT_LOGGER = "rcache"

# LogRecord attributes that are not user-supplied extra fields
_RESERVED_ATTRS = frozenset(
    {
        "args",
        "msg",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "name",
        "message",
    }
)


class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        # Add any extra fields from record.__dict__
        for key, value in record.__dict__.items():
            if key not in log_data and not key.startswith("_") and key not in _RESERVED_ATTRS:
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def configure_logging(
    level: LogLevel | str = LogLevel.INFO,
    json_format: bool = True,
) -> logging.Logger:
    """
    Install a stream handler on the rcache logger.

    Args:
        level: Log level name
        json_format: Emit JSON lines (True) or plain text (False)

    Returns:
        The configured rcache logger
    """
    level_name = level.value if isinstance(level, LogLevel) else LogLevel(level.upper()).value
    logger = logging.getLogger(ROOT_LOGGER)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler()
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level_name)
    logger.propagate = False

    return logger
