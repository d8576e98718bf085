"""Logging configuration with JSON formatting."""

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

from keygate.config import settings

# Context keys whose values must never reach the log stream
REDACTED_KEYS = frozenset({"credential", "api_key", "apikey", "key_hash", "x-api-key"})


def redact(context: dict[str, Any]) -> dict[str, Any]:
    """
    Mask key material in a log context dict.

    Args:
        context: Context passed through `extra`

    Returns:
        Copy of the context with sensitive values masked
    """
    return {
        key: "[REDACTED]" if key.lower() in REDACTED_KEYS else value
        for key, value in context.items()
    }


class JSONFormatter(logging.Formatter):
    """
    Custom formatter that outputs logs as JSON.

    Each log record is formatted as a JSON object with the following fields:
    - timestamp: ISO 8601 timestamp in UTC
    - level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - logger: Logger name
    - message: Log message
    - environment: Runtime environment
    - correlation_id: Request correlation ID (if present in extra)
    - Additional fields from the `context` dict passed in `extra`,
      with key material redacted
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format the log record as JSON.

        Args:
            record: The log record to format

        Returns:
            JSON string representation of the log record
        """
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "environment": settings.environment,
        }

        if getattr(record, "correlation_id", None):
            log_data["correlation_id"] = record.correlation_id

        if hasattr(record, "context") and isinstance(record.context, dict):
            log_data.update(redact(record.context))

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # File location only at DEBUG level
        if record.levelno == logging.DEBUG:
            log_data["file"] = record.pathname
            log_data["line"] = record.lineno
            log_data["function"] = record.funcName

        return json.dumps(log_data, default=str)


def configure_logging() -> None:
    """
    Configure application logging with JSON formatter.

    Sets up the root logger to output structured JSON logs to stdout.
    Log level is determined by the LOG_LEVEL environment variable.
    """
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(JSONFormatter())
    root_logger.addHandler(console_handler)

    root_logger.info(
        "Logging configured",
        extra={
            "context": {
                "log_level": settings.log_level,
                "hardened": settings.is_hardened,
            }
        },
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the specified name.

    Args:
        name: The name of the logger (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
