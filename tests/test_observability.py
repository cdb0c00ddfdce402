"""Tests for log correlation and request metrics."""

from __future__ import annotations

import logging

from asgi_correlation_id.context import correlation_id

from nasa_gateway.config import settings
from nasa_gateway.observability.logging import CorrelationIdFilter, configure_logging
from nasa_gateway.observability.metrics import REQUEST_COUNTER


def _record() -> logging.LogRecord:
    return logging.LogRecord("nasa_gateway", logging.INFO, __file__, 1, "hello", None, None)


def test_filter_marks_records_outside_a_request():
    record = _record()
    assert CorrelationIdFilter().filter(record) is True
    assert record.correlation_id == "-"


def test_filter_copies_current_request_id():
    token = correlation_id.set("req-123")
    try:
        record = _record()
        CorrelationIdFilter().filter(record)
    finally:
        correlation_id.reset(token)
    assert record.correlation_id == "req-123"


def test_configure_logging_keeps_httpx_quiet():
    try:
        configure_logging("debug")
        assert logging.getLogger("nasa_gateway").level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.WARNING
    finally:
        configure_logging(settings.log_level)


def test_requests_are_counted_by_route_template(client, employee_headers, db_session):
    labels = ("GET", "/api/apod/{apod_id}", "404")
    before = REQUEST_COUNTER.labels(*labels)._value.get()

    client.get("/api/apod/123456", headers=employee_headers)

    assert REQUEST_COUNTER.labels(*labels)._value.get() == before + 1
