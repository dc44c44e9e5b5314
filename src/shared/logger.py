"""
Centralized logging utilities for the Project Store.

Supports both JSON (production) and text (development) log formats.
JSON format is meant for containers, where log aggregation tools parse stdout.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional


def _effective_format() -> str:
    return os.getenv("LOG_FORMAT", "text").lower()
LOG_FORMAT_TEXT = "%(asctime)s - %(service)s - %(levelname)s - %(message)s"

# Attributes every LogRecord carries; anything else came in through `extra=`
_RESERVED_ATTRS = frozenset([
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "message", "pathname", "process", "processName", "relativeCreated",
    "thread", "threadName", "taskName", "exc_info", "exc_text", "stack_info",
    "service", "payload",
])


class ServiceFilter(logging.Filter):
    """Injects the service name into log records."""

    def __init__(self, service_name: str) -> None:
        super().__init__()
        self.service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "service"):
            record.service = self.service_name
        return True


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging in production.

    Promotes keys from extra={"payload": {...}} or extra={"project_id": ...}
    to top-level JSON fields for easy filtering.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": getattr(record, "service", "unknown"),
            "level": record.levelname,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "payload") and isinstance(record.payload, dict):
            log_data.update(record.payload)
        else:
            for key in ["project_id", "class_id", "user_id", "label", "error"]:
                value = getattr(record, key, None)
                if value is not None:
                    log_data[key] = value

        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key.startswith("_") or key in log_data:
                continue
            log_data[key] = value

        return json.dumps(log_data, ensure_ascii=False, default=str)


def get_logger(service_name: str, name: Optional[str] = None, level: int = logging.INFO) -> logging.Logger:
    """
    Configure and return a logger that writes to stdout with consistent format.

    Format is determined by LOG_FORMAT environment variable:
    - "json": Structured JSON logs for production
    - "text" (default): Human-readable text logs for development

    Args:
        service_name: Logical service identifier (e.g., "projectstore").
        name: Optional logger name; defaults to service_name.
        level: Logging level; defaults to INFO.

    Example (JSON format):
        logger.info("Label added", extra={"payload": {"project_id": "123", "label": "cats"}})
        # Output: {"timestamp": "...", "service": "projectstore", "level": "INFO", "message": "Label added", "project_id": "123", "label": "cats"}
    """
    logger_name = name or service_name
    logger = logging.getLogger(logger_name)
    logger.setLevel(level)
    logger.propagate = False

    eff_format = _effective_format()

    if logger.handlers:
        # Reconfigure if format changed
        logger.handlers = []

    handler = logging.StreamHandler(sys.stdout)
    if eff_format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(LOG_FORMAT_TEXT))

    handler.addFilter(ServiceFilter(service_name))
    logger.addHandler(handler)

    return logger
