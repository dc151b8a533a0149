"""
Structured JSON Logging for WhereToChill.

Provides consistent JSON-formatted logs for the submission, moderation and
embed-loading components.

Usage:
    from observability.logging import setup_logging, get_logger

    # At process startup:
    setup_logging(service_name="moderation")

    # In any module:
    logger = get_logger(__name__)
    logger.info("Location approved", extra={"location_id": "8c1f..."})

Output format:
    {"timestamp": "2025-12-01T00:45:00.123Z", "level": "INFO", "service": "moderation",
     "logger": "flows.moderation", "message": "Location approved",
     "location_id": "8c1f...", "trace_id": "abc123"}
"""

import json
import logging
import os
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Optional

# Context-local trace id: every asyncio task sees its own copy
_trace_id: ContextVar[Optional[str]] = ContextVar("trace_id", default=None)

# LogRecord attributes that are not user-supplied extras
_RESERVED_FIELDS = frozenset({
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname',
    'filename', 'module', 'lineno', 'funcName', 'created',
    'thread', 'threadName', 'processName', 'process', 'exc_info',
    'exc_text', 'stack_info', 'message', 'msecs', 'relativeCreated',
    'taskName',
})

_NOISY_LOGGERS = ("httpx", "httpcore", "urllib3", "minio", "asyncio", "sqlalchemy.engine")


def get_trace_id() -> Optional[str]:
    """Get the current trace ID from context."""
    return _trace_id.get()


def set_trace_id(trace_id: Optional[str]) -> None:
    """Set the trace ID in context."""
    _trace_id.set(trace_id)


def clear_trace_id() -> None:
    """Clear the trace ID from context."""
    _trace_id.set(None)


def _extra_fields(record: logging.LogRecord) -> dict:
    return {
        k: v for k, v in record.__dict__.items()
        if k not in _RESERVED_FIELDS and not k.startswith('_')
    }


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    One JSON object per line, with any `extra={...}` fields merged in.
    """

    def __init__(self, service_name: str = "unknown"):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "service": self.service_name,
            "logger": record.name,
            "message": record.getMessage(),
        }

        trace_id = get_trace_id()
        if trace_id:
            log_entry["trace_id"] = trace_id

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        if record.levelno >= logging.ERROR:
            log_entry["file"] = record.pathname
            log_entry["line"] = record.lineno
            log_entry["function"] = record.funcName

        for key, value in _extra_fields(record).items():
            try:
                json.dumps(value)
                log_entry[key] = value
            except (TypeError, ValueError):
                log_entry[key] = str(value)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


class ConsoleFormatter(logging.Formatter):
    """
    Human-readable console formatter for local development.

    Format: [LEVEL] service/logger: message {extra_fields}
    """

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def __init__(self, service_name: str = "unknown", use_colors: bool = True):
        super().__init__()
        self.service_name = service_name
        self.use_colors = use_colors and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        level = record.levelname
        if self.use_colors:
            level = f"{self.COLORS.get(level, '')}{level}{self.RESET}"

        logger_name = record.name.split('.')[-1]

        extra = _extra_fields(record)
        extra_str = ""
        if extra:
            extra_str = " {" + ", ".join(f"{k}={v}" for k, v in extra.items()) + "}"

        trace_id = get_trace_id()
        trace_str = f" [{trace_id[:8]}]" if trace_id else ""

        message = f"[{level}] {self.service_name}/{logger_name}:{trace_str} {record.getMessage()}{extra_str}"
        if record.exc_info:
            message += f"\n{self.formatException(record.exc_info)}"
        return message


def setup_logging(
    service_name: str,
    level: str = None,
    json_format: bool = None,
) -> None:
    """
    Configure structured logging for a process.

    Args:
        service_name: Name reported in every record (e.g., "submission", "moderation")
        level: Log level. Defaults to LOG_LEVEL env var or INFO.
        json_format: Whether to use JSON format. Defaults to True unless
            LOG_FORMAT=console.
    """
    if level is None:
        level = os.environ.get("LOG_LEVEL", "INFO").upper()
    log_level = getattr(logging, level, logging.INFO)

    if json_format is None:
        json_format = os.environ.get("LOG_FORMAT", "json").lower() != "console"

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)
    if json_format:
        handler.setFormatter(JSONFormatter(service_name=service_name))
    else:
        handler.setFormatter(ConsoleFormatter(service_name=service_name))
    root_logger.addHandler(handler)

    for noisy in _NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        "Logging initialized",
        extra={"log_level": level, "json_format": json_format},
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance, typically `get_logger(__name__)`."""
    return logging.getLogger(name)


class LogContext:
    """
    Context manager for tagging log records with a trace id.

    Usage:
        with LogContext(trace_id=submission_id):
            logger.info("Uploading photo")  # Will include trace_id
    """

    def __init__(self, trace_id: str):
        self.trace_id = trace_id
        self._token = None

    def __enter__(self):
        self._token = _trace_id.set(self.trace_id)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        _trace_id.reset(self._token)
        return False
