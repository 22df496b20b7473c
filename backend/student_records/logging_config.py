"""
Structured JSON logging configuration.

Every log line is a single JSON object on stdout with a channel
(http, store, auth, verification), the current request ID and any
business context attached by the caller. Credentials and one-time
codes must never be passed into log context.
"""

import logging
import json
import os
import uuid
from datetime import datetime, timezone
from contextvars import ContextVar

# ──────────────────────────────────────────────────────────────
# Request ID of the HTTP request currently being served.
# Set by the middleware in main.py and read by the formatter,
# so store and verification logs are traceable per request.
# ──────────────────────────────────────────────────────────────
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

CHANNELS = ["http", "store", "auth", "verification"]


class StructuredJsonFormatter(logging.Formatter):
    """
    Formats log records as one JSON object per line.

    Fields:
    - timestamp: ISO 8601 timestamp in UTC
    - level: log severity
    - message: human-readable message
    - channel: log source category
    - context: request_id plus business context (student_id, handle, ...)
    - extra: additional metadata (duration_ms, status_code, ...)
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
            "level": record.levelname,
            "message": record.getMessage(),
            "channel": getattr(record, "channel", record.name.split(".")[-1] if "." in record.name else "app"),
            "context": {
                "request_id": request_id_var.get(""),
                **(getattr(record, "context", {}) or {})
            },
            "extra": getattr(record, "extra_data", {}) or {}
        }
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, default=str, ensure_ascii=False)


def setup_logging():
    """
    Configure the root logger and the channel loggers.

    All output goes to stdout through a single handler so the
    process can run unchanged in a container.
    """
    formatter = StructuredJsonFormatter()

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    root_logger.handlers = [handler]

    for channel in CHANNELS:
        logger = logging.getLogger(f"student_records.{channel}")
        logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))

    return root_logger


def get_logger(channel: str) -> logging.Logger:
    """Return the logger for a channel (http, store, auth, verification)."""
    return logging.getLogger(f"student_records.{channel}")


def log_with_context(logger: logging.Logger, level: str, message: str,
                     context: dict = None, extra_data: dict = None,
                     exc_info: bool = False):
    """
    Emit a structured log entry with business context and extra metadata.

    Args:
        logger: The channel logger to use
        level: Log level string (INFO, WARNING, ERROR, DEBUG)
        message: Human-readable log message
        context: Business context dict (student_id, login, handle)
        extra_data: Additional metadata dict (duration_ms, status_code, error)
        exc_info: Attach the exception currently being handled
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    logger.log(
        log_level,
        message,
        exc_info=exc_info,
        extra={"context": context or {}, "extra_data": extra_data or {}, "channel": logger.name.split(".")[-1]}
    )


def generate_request_id() -> str:
    """Generate a new UUID for request tracking."""
    return str(uuid.uuid4())
