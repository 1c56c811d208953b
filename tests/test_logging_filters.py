"""Tests for sensitive data filtering and request correlation in logs."""

from __future__ import annotations

import json
import logging
from io import StringIO

from app.core.logging import (
    JsonFormatter,
    RequestIdFilter,
    SensitiveDataFilter,
    clear_request_id,
    hash_identifier,
    set_request_id,
)


def _capture(name: str) -> tuple[logging.Logger, StringIO]:
    logger = logging.getLogger(name)
    logger.setLevel(logging.INFO)
    logger.handlers.clear()

    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.addFilter(RequestIdFilter())
    handler.addFilter(SensitiveDataFilter())
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)
    return logger, stream


def test_sensitive_filter_redacts_tokens():
    logger, stream = _capture("test_redaction")

    logger.info(
        "auth_event",
        extra={
            "authorization": "Bearer admin-secret",
            "auth_token": "cookie-secret",
            "safe_field": "visible",
        },
    )

    output = stream.getvalue()
    assert "admin-secret" not in output
    assert "cookie-secret" not in output
    assert "[REDACTED]" in output
    assert "visible" in output


def test_sensitive_filter_allows_safe_fields():
    logger, stream = _capture("test_safe_fields")

    logger.info(
        "http.request",
        extra={
            "route": "/v1/products",
            "status": 200,
            "duration_ms": 12.5,
        },
    )

    payload = json.loads(stream.getvalue())
    assert payload["route"] == "/v1/products"
    assert payload["status"] == 200
    assert payload["level"] == "info"
    assert "[REDACTED]" not in stream.getvalue()


def test_sensitive_filter_redacts_nested_dicts():
    logger, stream = _capture("test_nested")

    logger.info(
        "nested_event",
        extra={
            "headers": {
                "Authorization": "Bearer nested-secret",
                "Cookie": "auth_token=nested-cookie",
                "user-agent": "pytest",
            },
        },
    )

    output = stream.getvalue()
    assert "nested-secret" not in output
    assert "nested-cookie" not in output
    assert "pytest" in output


def test_request_id_is_attached_from_context():
    logger, stream = _capture("test_request_id")

    set_request_id("req-123")
    try:
        logger.info("inside_request")
    finally:
        clear_request_id()
    logger.info("outside_request")

    first, second = (json.loads(line) for line in stream.getvalue().splitlines())
    assert first["request_id"] == "req-123"
    assert "request_id" not in second


def test_hash_identifier_is_stable_and_opaque():
    digest = hash_identifier("203.0.113.7")

    assert digest == hash_identifier("203.0.113.7")
    assert digest != hash_identifier("203.0.113.8")
    assert len(digest) == 16
