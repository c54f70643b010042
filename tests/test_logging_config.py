"""Tests for structured logging."""

import json
import logging

from app.core.request_context import clear_context, set_notification_context, set_request_id
from app.logging_config import ContextFilter, JSONFormatter


def _record(message="Email sent", **extra):
    record = logging.LogRecord(
        name="app.infrastructure.channels.email",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_context():
    """Test that request and notification ids end up in the JSON line."""
    set_request_id("req-1")
    set_notification_context("ntf_1")
    try:
        record = _record(to="user@example.com")
        ContextFilter().filter(record)
        data = json.loads(JSONFormatter().format(record))
    finally:
        clear_context()

    assert data["message"] == "Email sent"
    assert data["severity"] == "INFO"
    assert data["request_id"] == "req-1"
    assert data["notification_id"] == "ntf_1"
    assert "tenant_id" not in data
    assert data["to"] == "user@example.com"


def test_json_formatter_without_context():
    record = _record()
    ContextFilter().filter(record)

    data = json.loads(JSONFormatter().format(record))

    assert "request_id" not in data
    assert data["logger"] == "app.infrastructure.channels.email"
