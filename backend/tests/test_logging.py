"""Tests for structured logging configuration."""

import json
import logging

from csrms.core.logging import (
    RequestContextFilter,
    current_client_ip,
    current_request_context,
    request_context,
    setup_logging,
)


def _record(msg: str = "hello") -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg=msg,
        args=(),
        exc_info=None,
    )


def test_request_context_filter_injects_fields():
    record = _record()

    with request_context("req-123", "203.0.113.9"):
        context_filter = RequestContextFilter()
        assert context_filter.filter(record) is True

    assert record.request_id == "req-123"
    assert record.client_ip == "203.0.113.9"


def test_request_context_is_unbound_after_block():
    with request_context("req-456", "198.51.100.7"):
        assert current_client_ip() == "198.51.100.7"
        assert current_request_context().request_id == "req-456"

    assert current_client_ip() is None
    record = _record()
    RequestContextFilter().filter(record)
    assert record.request_id == "-"
    assert record.client_ip == "-"


def test_setup_logging_attaches_json_handler():
    root_logger = logging.getLogger()
    original_handlers = root_logger.handlers[:]
    original_level = root_logger.level

    try:
        setup_logging("DEBUG")
        assert root_logger.level == logging.DEBUG
        (handler,) = root_logger.handlers
        assert any(isinstance(filter_, RequestContextFilter) for filter_ in handler.filters)

        record = _record("message")
        with request_context("req-789", "203.0.113.9"):
            for filter_ in handler.filters:
                filter_.filter(record)
        payload = json.loads(handler.format(record))

        assert payload["message"] == "message"
        assert payload["level"] == "INFO"
        assert payload["logger"] == "test"
        assert payload["service"] == "csrms"
        assert payload["request_id"] == "req-789"
        assert payload["client_ip"] == "203.0.113.9"
        assert logging.getLogger("uvicorn.access").propagate is True
    finally:
        root_logger.handlers = original_handlers
        root_logger.setLevel(original_level)
