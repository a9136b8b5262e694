"""Tests for logging configuration and sanitization."""

import json
import logging

import httpx
import pytest

from core.logging_utils import (
    _PrettyJsonFormatter,
    configure_json_logging,
    format_request_log,
    format_response_log,
    sanitize_headers,
)
from tests.conftest import MockLambdaContext


@pytest.fixture
def restore_root_logger():
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield root_logger
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


class TestSanitizeHeaders:
    def test_sensitive_headers_redacted(self):
        sanitized = sanitize_headers(
            {
                "Authorization": "Bearer abc",
                "Cookie": "session=1",
                "X-Api-Key": "k",
                "X-Amz-Security-Token": "t",
                "Content-Type": "application/json",
            }
        )

        assert sanitized["Authorization"] == "[REDACTED]"
        assert sanitized["Cookie"] == "[REDACTED]"
        assert sanitized["X-Api-Key"] == "[REDACTED]"
        assert sanitized["X-Amz-Security-Token"] == "[REDACTED]"
        assert sanitized["Content-Type"] == "application/json"

    def test_accepts_httpx_headers(self):
        headers = httpx.Headers({"authorization": "secret", "accept": "*/*"})
        sanitized = sanitize_headers(headers)

        assert sanitized == {"authorization": "[REDACTED]", "accept": "*/*"}


class TestFormatLogs:
    def test_request_log_has_no_body(self):
        request = httpx.Request(
            "POST",
            "https://example.com/x",
            headers={"authorization": "secret"},
            content=b"private payload",
        )

        log_data = format_request_log(
            request_id="req-1",
            request=request,
            event_kind="proxy",
            lambda_context=MockLambdaContext(),
        )

        assert log_data["request_path"] == "/x"
        assert log_data["request_body_bytes"] == len(b"private payload")
        assert log_data["request_headers"]["authorization"] == "[REDACTED]"
        assert log_data["lambda_function_name"] == "test-function"
        assert "private payload" not in json.dumps(log_data)

    def test_response_log(self):
        log_data = format_response_log(
            request_id="req-1",
            reply={"statusCode": 200, "headers": {"set-cookie": "a=1"}, "body": "aGk="},
            duration_ms=12.3456,
        )

        assert log_data["response_status"] == 200
        assert log_data["response_headers"]["set-cookie"] == "[REDACTED]"
        assert log_data["duration_ms"] == 12.35


class TestConfigureJsonLogging:
    def test_compact_json_handler_installed(self, restore_root_logger):
        configure_json_logging(level="WARNING")

        assert restore_root_logger.level == logging.WARNING
        assert len(restore_root_logger.handlers) == 1
        assert not isinstance(
            restore_root_logger.handlers[0].formatter, _PrettyJsonFormatter
        )

    def test_pretty_formatter_installed(self, restore_root_logger):
        configure_json_logging(level="DEBUG", pretty=True)

        assert isinstance(
            restore_root_logger.handlers[0].formatter, _PrettyJsonFormatter
        )

    def test_pretty_formatter_includes_extra(self):
        formatter = _PrettyJsonFormatter(max_string_length=5)
        record = logging.LogRecord(
            "test", logging.INFO, __file__, 1, "hello", None, None
        )
        record.request_id = "req-1"
        record.note = "a long value"

        output = json.loads(formatter.format(record))

        assert output["message"] == "hello"
        assert output["request_id"] == "req-1"
        assert output["note"].startswith("a lon... (truncated")
