"""
Structured Logging Utility.

This module provides structured JSON logging. All logs are formatted as JSON
with consistent fields for easy querying and filtering.

Features:
- JSON format, one object per line
- Correlation IDs (request_id, workflow_id, profile_id) for request tracing
- Performance metrics (duration, timing)
- Structured context passed through extra={"extra_fields": {...}}
- Log level from the LOG_LEVEL environment variable

Usage:
    from resumeai.utils.logger import get_logger, log_performance

    logger = get_logger(__name__)
    logger.info("Message", extra={"extra_fields": {"agent_id": "skills-extractor"}})

    with log_performance("merge", profile_id="p1"):
        ...
"""

import json
import logging
import os
import time
from contextlib import contextmanager
from typing import Any, Dict, Optional

# Determine log level from environment
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
LOG_LEVEL = getattr(logging, LOG_LEVEL, logging.INFO)

# Global context for correlation IDs
_log_context: Dict[str, Any] = {}

# Attributes every LogRecord carries; anything else was added through extra
_RESERVED_ATTRS = {
    "name",
    "msg",
    "args",
    "created",
    "filename",
    "funcName",
    "levelname",
    "levelno",
    "lineno",
    "module",
    "msecs",
    "message",
    "pathname",
    "process",
    "processName",
    "relativeCreated",
    "thread",
    "threadName",
    "taskName",
    "exc_info",
    "exc_text",
    "stack_info",
    "extra_fields",
}


class JSONLogFormatter(logging.Formatter):
    """JSON formatter with correlation IDs and custom fields."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Args:
            record: LogRecord to format.

        Returns:
            JSON string with structured log data.
        """
        # Base log structure
        log_data = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Add correlation IDs from global context
        for key in ("request_id", "workflow_id", "profile_id"):
            if key in _log_context:
                log_data[key] = _log_context[key]

        # Add custom fields from extra parameter
        extra_fields = getattr(record, "extra_fields", None)
        if isinstance(extra_fields, dict):
            log_data.update(extra_fields)

        # Any other attribute set directly via extra
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value

        # Add exception info if present
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
            log_data["exception_type"] = (
                record.exc_info[0].__name__ if record.exc_info[0] else None
            )

        return json.dumps(log_data, default=str)


def configure_logging(level: Optional[int] = None) -> None:
    """Configure the root logger with the JSON formatter.

    Args:
        level: Log level. Defaults to LOG_LEVEL from the environment.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level or LOG_LEVEL)

    # Remove existing handlers to avoid duplicate logs
    root_logger.handlers = []

    handler = logging.StreamHandler()
    handler.setLevel(level or LOG_LEVEL)
    handler.setFormatter(JSONLogFormatter())

    root_logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with structured logging support.

    Args:
        name: Logger name (typically __name__).

    Returns:
        Logger instance.
    """
    return logging.getLogger(name)


def set_correlation_id(
    request_id: Optional[str] = None,
    workflow_id: Optional[str] = None,
    profile_id: Optional[str] = None,
) -> None:
    """Set correlation IDs for request tracing.

    Correlation IDs are added to all subsequent log records.

    Args:
        request_id: Request ID (from the X-Request-ID header).
        workflow_id: ID of a workflow execution.
        profile_id: ID of the profile being optimized.
    """
    if request_id:
        _log_context["request_id"] = request_id
    if workflow_id:
        _log_context["workflow_id"] = workflow_id
    if profile_id:
        _log_context["profile_id"] = profile_id


def clear_correlation_ids() -> None:
    """Clear correlation IDs from log context."""
    _log_context.clear()


@contextmanager
def log_performance(operation: str, **extra_fields):
    """Context manager for logging operation performance.

    Logs start, completion, and duration of an operation.

    Args:
        operation: Operation name (e.g., "workflow", "merge").
        **extra_fields: Additional fields to include in log records.

    Example:
        with log_performance("merge", profile_id="p1"):
            merged = merge(...)
    """
    start_time = time.time()
    logger = get_logger(__name__)

    logger.info(
        f"Starting {operation}",
        extra={"extra_fields": {"operation": operation, **extra_fields}},
    )

    try:
        yield
    except Exception as e:
        duration_ms = (time.time() - start_time) * 1000
        logger.error(
            f"Failed {operation}",
            exc_info=True,
            extra={
                "extra_fields": {
                    "operation": operation,
                    "duration_ms": round(duration_ms, 2),
                    "status": "error",
                    "error": str(e),
                    **extra_fields,
                }
            },
        )
        raise

    duration_ms = (time.time() - start_time) * 1000
    logger.info(
        f"Completed {operation}",
        extra={
            "extra_fields": {
                "operation": operation,
                "duration_ms": round(duration_ms, 2),
                "status": "success",
                **extra_fields,
            }
        },
    )
