"""Structured JSON logging for the catalog service."""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional


LOGGER_PREFIX = "gopherpods"

_OPTIONAL_FIELDS = ("context", "execution_time_ms", "error_code")


class JSONFormatter(logging.Formatter):
    """
    Render each log record as a single JSON object.

    Every line carries timestamp, level, component and message. Records
    logged through ``log_with_context`` also carry their structured context.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "component": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for field_name in _OPTIONAL_FIELDS:
            if hasattr(record, field_name):
                log_data[field_name] = getattr(record, field_name)

        return json.dumps(log_data, default=str)


def configure_logging(log_level: str = "INFO") -> None:
    """
    Install the JSON formatter on the root logger.

    Args:
        log_level: Logging level name (ERROR, WARNING, INFO, DEBUG)
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(numeric_level)
    handler.setFormatter(JSONFormatter())
    root_logger.addHandler(handler)

    for noisy in ("boto3", "botocore", "urllib3", "httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a component, e.g. ``get_logger("CatalogCache")``."""
    return logging.getLogger(f"{LOGGER_PREFIX}.{name}")


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    context: Optional[Dict[str, Any]] = None,
    execution_time_ms: Optional[float] = None,
    error_code: Optional[str] = None,
    exc_info: bool = False,
) -> None:
    """
    Log a message with structured context attached to the record.

    Args:
        logger: Logger instance
        level: Log level (logging.INFO, logging.ERROR, etc.)
        message: Log message
        context: Optional context dictionary
        execution_time_ms: Optional execution time in milliseconds
        error_code: Optional error code (for AWS errors)
        exc_info: Attach the active exception's traceback
    """
    extra: Dict[str, Any] = {}

    if context:
        extra["context"] = context

    if execution_time_ms is not None:
        extra["execution_time_ms"] = execution_time_ms

    if error_code:
        extra["error_code"] = error_code

    logger.log(level, message, extra=extra, exc_info=exc_info)
