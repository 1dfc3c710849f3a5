"""
Structured JSON logging configuration.

This module sets up package-wide JSON logging with:
- Consistent field names across all logs
- Collection and operation tracking for repository calls
- Entity identity and page tracking
- Timestamp, level, message, duration

Logs are output to stdout in JSON format for easy parsing by
log aggregation systems (CloudWatch, Datadog, etc.).
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional


# LogRecord attributes that are never copied into the JSON payload
_RESERVED_ATTRS = frozenset({
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "message", "pathname", "process", "processName", "relativeCreated",
    "thread", "threadName", "exc_info", "exc_text", "stack_info",
    "taskName",
})


class JSONFormatter(logging.Formatter):
    """
    Custom JSON formatter for structured logging.

    Outputs log records as single-line JSON objects with consistent fields:
    - timestamp: ISO 8601 format with microseconds (UTC)
    - level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - message: Log message
    - logger: Logger name (module path)
    - collection: Collection name (if available)
    - operation: Repository operation (if available)
    - entity_id: Identity of the record involved (if available)
    - duration_ms: Store call latency in milliseconds (if available)
    - page: Requested page for listings (if available)
    - count: Number of records returned or affected (if available)
    - exception: Exception details (if exception occurred)
    - extra: Any additional fields from log record

    Example output:
        {"timestamp": "2025-11-24T10:30:00.123456+00:00", "level": "DEBUG",
         "message": "get_all completed", "collection": "users",
         "operation": "get_all", "page": 1, "count": 10, "duration_ms": 4.2}
    """

    context_fields = (
        "collection",
        "operation",
        "entity_id",
        "duration_ms",
        "page",
        "count",
    )

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record as JSON string.

        Args:
            record: LogRecord to format

        Returns:
            JSON string representation of log record
        """
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if record.stack_info:
            log_data["stack_info"] = self.formatStack(record.stack_info)

        for field in self.context_fields:
            value = getattr(record, field, None)
            if value is not None:
                log_data[field] = value

        # Any other custom fields passed via extra={...}
        for key, value in record.__dict__.items():
            if (
                key not in _RESERVED_ATTRS
                and key not in log_data
                and key not in self.context_fields
            ):
                log_data[key] = value

        return json.dumps(log_data, default=str)


def setup_logging(
    level: str = "INFO",
    json_format: bool = True
) -> None:
    """
    Configure package logging.

    Sets up:
    - Root logger with specified level
    - JSON formatter (if json_format=True)
    - StreamHandler to stdout
    - Removes default handlers

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use JSON formatter (True) or simple formatter (False)

    Example:
        setup_logging(level=settings.log_level, json_format=settings.log_json)

    Note:
        Call this once at application startup, before any logging occurs.
    """
    root_logger = logging.getLogger()

    log_level = getattr(logging, level.upper(), logging.INFO)
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)

    if json_format:
        formatter = JSONFormatter()
    else:
        # Simple format for development/debugging
        formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Suppress noisy driver loggers
    logging.getLogger("pymongo").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get logger instance with given name.

    Args:
        name: Logger name (usually __name__ of the module)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def log_with_context(
    logger: logging.Logger,
    level: str,
    message: str,
    collection: Optional[str] = None,
    operation: Optional[str] = None,
    entity_id: Optional[str] = None,
    duration_ms: Optional[float] = None,
    page: Optional[int] = None,
    count: Optional[int] = None,
    exc_info: bool = False,
    **extra_fields: Any
) -> None:
    """
    Log message with structured repository context fields.

    Args:
        logger: Logger instance
        level: Log level (debug, info, warning, error, critical)
        message: Log message
        collection: Collection name
        operation: Repository operation name
        entity_id: Identity of the record involved
        duration_ms: Store call latency in milliseconds
        page: Requested page
        count: Records returned or affected
        exc_info: Attach the active exception's traceback
        **extra_fields: Additional fields to include

    Example:
        log_with_context(
            logger,
            "debug",
            "get completed",
            collection="users",
            operation="get",
            entity_id="65f0c0ffee0000000000abcd",
            duration_ms=1.7
        )
    """
    extra: Dict[str, Any] = {}

    if collection is not None:
        extra["collection"] = collection
    if operation is not None:
        extra["operation"] = operation
    if entity_id is not None:
        extra["entity_id"] = entity_id
    if duration_ms is not None:
        extra["duration_ms"] = duration_ms
    if page is not None:
        extra["page"] = page
    if count is not None:
        extra["count"] = count

    extra.update(extra_fields)

    log_method = getattr(logger, level.lower())
    log_method(message, extra=extra, exc_info=exc_info)
