"""
POS Admin - Structured Logging Configuration
============================================
Provides JSON-formatted structured logging with per-session context.

Features:
- JSON output for log aggregation
- Session-scoped context (request_id, user_email, page)
- Performance tracking (duration_ms) for backend calls
- Error tracking with stack traces
- Log level filtering via environment

Usage:
    from pos_admin.logging_config import get_logger, log_event

    logger = get_logger(__name__)
    logger.info("Products loaded", extra={"count": 20})

    # Or use the helper
    log_event("product_created", product_id=12)
"""

from __future__ import annotations

import json
import logging
import os
import sys
import threading
import time
import traceback
import uuid
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

from pos_admin.config import settings


class LogLevel(str, Enum):
    """Standard log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


# =============================================================================
# Context Variables
# =============================================================================


class LogContext:
    """
    Thread-local storage for session-scoped log context.

    Streamlit runs each script rerun on its own thread, so the context is
    set at the top of every rerun and cleared when it finishes.
    """

    _local = threading.local()
    _fields = ("request_id", "user_email", "page")

    @classmethod
    def set(cls, name: str, value: str | None) -> None:
        if name not in cls._fields:
            raise KeyError(name)
        setattr(cls._local, name, value)

    @classmethod
    def get(cls, name: str) -> str | None:
        return getattr(cls._local, name, None)

    @classmethod
    def get_request_id(cls) -> str | None:
        return cls.get("request_id")

    @classmethod
    def clear(cls) -> None:
        """Clear all context."""
        for name in cls._fields:
            setattr(cls._local, name, None)

    @classmethod
    def get_all(cls) -> dict[str, Any]:
        """Get all context as a dict."""
        return {name: cls.get(name) for name in cls._fields}


# =============================================================================
# JSON Formatter
# =============================================================================


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs logs in a consistent JSON format with timestamps,
    log levels, and contextual fields.
    """

    _standard_attrs = frozenset(
        {
            "name", "msg", "args", "levelname", "levelno", "pathname",
            "filename", "module", "lineno", "funcName", "created", "msecs",
            "relativeCreated", "thread", "threadName", "processName",
            "process", "getMessage", "exc_info", "exc_text", "stack_info",
            "taskName",
        }
    )

    def __init__(
        self,
        *,
        service_name: str = "pos-admin",
        environment: str = "production",
        include_extra_fields: bool = True,
    ) -> None:
        super().__init__()
        self.service_name = service_name
        self.environment = environment
        self.include_extra_fields = include_extra_fields
        self._iso_format = "%Y-%m-%dT%H:%M:%S.%fZ"

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as JSON."""
        log_entry: dict[str, Any] = {
            "timestamp": self._format_timestamp(record.created),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service_name,
            "environment": self.environment,
        }

        if record.pathname:
            log_entry["file"] = Path(record.pathname).name
            log_entry["line"] = record.lineno
            log_entry["function"] = record.funcName

        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": "".join(traceback.format_exception(*record.exc_info)),
            }

        for key, value in LogContext.get_all().items():
            if value is not None:
                log_entry[key] = value

        # Anything passed via `extra=`
        if self.include_extra_fields:
            for key, value in record.__dict__.items():
                if key not in self._standard_attrs and not key.startswith("_"):
                    log_entry[key] = value

        return json.dumps(log_entry, default=self._json_serializer, ensure_ascii=False)

    def _format_timestamp(self, created: float) -> str:
        dt = datetime.fromtimestamp(created, tz=timezone.utc)
        return dt.strftime(self._iso_format)

    @staticmethod
    def _json_serializer(obj: Any) -> str:
        """Custom JSON serializer for non-serializable objects."""
        if isinstance(obj, datetime):
            return obj.isoformat()
        return str(obj)


# =============================================================================
# Console Formatter (human-readable fallback)
# =============================================================================


class ConsoleFormatter(logging.Formatter):
    """
    Human-readable formatter for console output during development.
    """

    LEVEL_COLORS = {
        "DEBUG": "\033[36m",     # Cyan
        "INFO": "\033[32m",      # Green
        "WARNING": "\033[33m",   # Yellow
        "ERROR": "\033[31m",     # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        level_color = self.LEVEL_COLORS.get(record.levelname, "")
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")
        request_id = LogContext.get_request_id() or "-"

        base = (
            f"{level_color}{record.levelname:<8}{self.RESET} "
            f"{timestamp} "
            f"[{request_id}] "
            f"{record.name}: "
            f"{record.getMessage()}"
        )

        if record.exc_info:
            base += "\n" + "".join(traceback.format_exception(*record.exc_info))

        return base


# =============================================================================
# Logger Factory
# =============================================================================


def _get_log_level() -> int:
    """Get log level from environment."""
    level_str = os.environ.get("LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_str, logging.INFO)


def _should_use_json() -> bool:
    """Determine if JSON logging should be used."""
    if os.environ.get("LOG_FORMAT", "").lower() == "console":
        return False
    if os.environ.get("LOG_FORMAT", "").lower() == "json":
        return True
    # Default to JSON in production, console in dev
    return not settings.debug_mode


def _convert_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    return getattr(logging, str(level).upper(), logging.INFO)


_configured = False


def configure_logging(
    *,
    level: str | int | None = None,
    service_name: str = "pos-admin",
    environment: str = "production",
    log_format: str | None = None,
) -> None:
    """
    Configure the root logger with structured logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        service_name: Service name for log identification
        environment: Environment label (production, staging, development)
        log_format: Format type ("json" or "console")
    """
    global _configured

    resolved = _get_log_level() if level is None else _convert_level(level)
    root = logging.getLogger()
    root.setLevel(resolved)
    root.handlers.clear()

    use_json = _should_use_json() if log_format is None else log_format == "json"

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(resolved)
    if use_json:
        handler.setFormatter(StructuredFormatter(service_name=service_name, environment=environment))
    else:
        handler.setFormatter(ConsoleFormatter())

    root.addHandler(handler)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger, configuring the root logger on first use.

    Args:
        name: Logger name (usually __name__)
    """
    if not _configured:
        configure_logging()
    return logging.getLogger(name)


# =============================================================================
# Helper Functions
# =============================================================================


def log_event(
    event_name: str,
    level: str | LogLevel = LogLevel.INFO,
    **extra_fields: Any,
) -> None:
    """
    Log a structured event with additional fields.

    Example:
        log_event("category_deleted", category_id=3)
    """
    logger = get_logger("event")
    log_func = getattr(logger, str(getattr(level, "value", level)).lower(), logger.info)
    log_func(event_name, extra=extra_fields)


def log_error(
    event_name: str,
    exc: Exception | None = None,
    **extra_fields: Any,
) -> None:
    """Log an error event with optional exception info."""
    logger = get_logger("error")
    if exc is not None:
        extra_fields.setdefault("error_type", type(exc).__name__)
        extra_fields.setdefault("error_message", str(exc))
    logger.error(event_name, exc_info=exc, extra=extra_fields)


# =============================================================================
# Context Managers
# =============================================================================


class LogContextManager:
    """
    Context manager for rerun-scoped log context.

    Example:
        with LogContextManager(user_email="admin@pos.com", page="products"):
            logger.info("Rendering page")
    """

    def __init__(
        self,
        *,
        request_id: str | None = None,
        user_email: str | None = None,
        page: str | None = None,
    ) -> None:
        self.request_id = request_id or str(uuid.uuid4())
        self.user_email = user_email
        self.page = page

    def __enter__(self) -> LogContextManager:
        LogContext.set("request_id", self.request_id)
        LogContext.set("user_email", self.user_email)
        LogContext.set("page", self.page)
        return self

    def __exit__(self, *args: Any) -> None:
        LogContext.clear()


class PerformanceTracker:
    """
    Context manager for tracking operation performance.

    Logs the duration and any additional metrics when the context exits.
    Fields added to ``extra`` inside the block are logged too.

    Example:
        with PerformanceTracker("api_request", method="GET", path="/menu") as t:
            resp = session.get(...)
            t.extra["status"] = resp.status_code
    """

    def __init__(
        self,
        operation: str,
        **extra_fields: Any,
    ) -> None:
        self.operation = operation
        self.extra = extra_fields
        self._start_time: float | None = None

    def __enter__(self) -> PerformanceTracker:
        self._start_time = time.perf_counter()
        return self

    def __exit__(self, *args: Any) -> None:
        if self._start_time is None:
            return

        duration_ms = (time.perf_counter() - self._start_time) * 1000
        self.extra["duration_ms"] = round(duration_ms, 2)

        if args[0] is not None:
            self.extra["error"] = str(args[1])
            get_logger("performance").warning(f"{self.operation}_failed", extra=self.extra)
        else:
            get_logger("performance").info(f"{self.operation}_completed", extra=self.extra)
