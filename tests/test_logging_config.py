"""
Tests for pos_admin.logging_config.

Covers:
- JSON formatter output and context fields
- Event/error helpers
- Context manager and performance tracker
"""

import json
import logging
import sys

import pytest

from pos_admin import logging_config
from pos_admin.logging_config import (
    ConsoleFormatter,
    LogContext,
    LogContextManager,
    LogLevel,
    PerformanceTracker,
    StructuredFormatter,
    log_error,
    log_event,
)


class _ListHandler(logging.Handler):
    def __init__(self):
        super().__init__(level=logging.DEBUG)
        self.records = []

    def emit(self, record):
        self.records.append(record)


@pytest.fixture
def captured(monkeypatch):
    """Collect records from the helper loggers without touching root handlers."""
    monkeypatch.setattr(logging_config, "_configured", True)
    handler = _ListHandler()
    loggers = [logging.getLogger(name) for name in ("event", "error", "performance")]
    for logger in loggers:
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG)
    yield handler.records
    for logger in loggers:
        logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)


@pytest.fixture(autouse=True)
def _clear_context():
    yield
    LogContext.clear()


def _record(msg="hello", **extra):
    record = logging.LogRecord("pos_admin.test", logging.INFO, __file__, 10, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatter:
    def test_basic_fields(self):
        payload = json.loads(StructuredFormatter(environment="test").format(_record()))

        assert payload["message"] == "hello"
        assert payload["level"] == "INFO"
        assert payload["service"] == "pos-admin"
        assert payload["environment"] == "test"
        assert payload["timestamp"].endswith("Z")

    def test_extra_and_context_fields(self):
        LogContext.set("page", "products")

        payload = json.loads(StructuredFormatter().format(_record(product_id="12")))

        assert payload["product_id"] == "12"
        assert payload["page"] == "products"
        assert "request_id" not in payload

    def test_exception_block(self):
        try:
            raise ValueError("bad price")
        except ValueError:
            record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", None, sys.exc_info())

        payload = json.loads(StructuredFormatter().format(record))

        assert payload["exception"]["type"] == "ValueError"
        assert payload["exception"]["message"] == "bad price"


class TestConsoleFormatter:
    def test_includes_request_id(self):
        LogContext.set("request_id", "req-9")

        line = ConsoleFormatter().format(_record("Products loaded"))

        assert "[req-9]" in line
        assert "Products loaded" in line


class TestLogContext:
    def test_unknown_field(self):
        with pytest.raises(KeyError):
            LogContext.set("tenant", "x")

    def test_context_manager_sets_and_clears(self):
        with LogContextManager(user_email="admin@pos.com", page="reports") as ctx:
            assert LogContext.get("user_email") == "admin@pos.com"
            assert LogContext.get_request_id() == ctx.request_id

        assert LogContext.get_all() == {"request_id": None, "user_email": None, "page": None}


class TestHelpers:
    def test_log_event_levels(self, captured):
        log_event("category_deleted", category_id="3")
        log_event("forced_logout", level="WARNING", status=401)
        log_event("debug_thing", level=LogLevel.DEBUG)

        assert [(r.getMessage(), r.levelname) for r in captured] == [
            ("category_deleted", "INFO"),
            ("forced_logout", "WARNING"),
            ("debug_thing", "DEBUG"),
        ]
        assert captured[0].category_id == "3"

    def test_log_error_adds_exception_fields(self, captured):
        log_error("report_load_failed", RuntimeError("boom"), report_type="weekly")

        record = captured[-1]
        assert record.levelname == "ERROR"
        assert record.error_type == "RuntimeError"
        assert record.error_message == "boom"
        assert record.report_type == "weekly"

    def test_performance_tracker_success(self, captured):
        with PerformanceTracker("api_request", method="GET") as tracker:
            tracker.extra["status"] = 200

        record = captured[-1]
        assert record.getMessage() == "api_request_completed"
        assert record.status == 200
        assert record.duration_ms >= 0

    def test_performance_tracker_failure(self, captured):
        with pytest.raises(ValueError):
            with PerformanceTracker("api_request"):
                raise ValueError("down")

        record = captured[-1]
        assert record.getMessage() == "api_request_failed"
        assert record.levelname == "WARNING"
        assert record.error == "down"
