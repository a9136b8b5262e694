"""Logging utilities for the Lambda HTTP adapter.

Provides centralized JSON logging configuration and header sanitization so
request metadata can be logged without leaking credentials.
"""

import json
import logging
from typing import Any, Dict, Mapping, Optional

import httpx
from pythonjsonlogger import json as jsonlogger

# Sensitive header names (case-insensitive substring match)
SENSITIVE_KEYS = [
    "api_key",
    "apikey",
    "api-key",
    "authorization",
    "auth",
    "token",
    "password",
    "secret",
    "credential",
    "session",
    "cookie",
]

# Sensitive header prefixes (case-insensitive)
SENSITIVE_HEADER_PREFIXES = [
    "x-api-key",
    "x-auth",
    "x-token",
    "x-secret",
    "x-amz-security-token",
    "authorization",
    "proxy-authorization",
    "cookie",
    "set-cookie",
]

# LogRecord attributes that are not "extra" fields
_RESERVED_ATTRS = frozenset(
    (
        "name", "msg", "args", "created", "filename", "funcName",
        "levelname", "levelno", "lineno", "module", "msecs",
        "message", "pathname", "process", "processName",
        "relativeCreated", "thread", "threadName", "exc_info",
        "exc_text", "stack_info", "asctime", "datefmt", "taskName",
    )
)


def configure_json_logging(level: str = "INFO", pretty: bool = False) -> None:
    """Configure ALL loggers to use JSON format.

    This function sets up the root logger with JSON formatting, ensuring
    all child loggers inherit JSON format.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        pretty: If True, use pretty-printed JSON (for local development).
                If False, use compact JSON (for CloudWatch).
    """
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    log_level = getattr(logging, level.upper(), logging.INFO)
    root_logger.setLevel(log_level)

    handler = logging.StreamHandler()
    handler.setLevel(log_level)

    if pretty:
        formatter = _PrettyJsonFormatter()
    else:
        formatter = jsonlogger.JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s",
            timestamp=True,
        )

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)


class _PrettyJsonFormatter(logging.Formatter):
    """Pretty JSON formatter for local development.

    Formats logs as indented JSON for better readability in terminals.
    Long string values are truncated.
    """

    def __init__(self, max_string_length: int = 500):
        super().__init__()
        self.max_string_length = max_string_length

    def _truncate_value(self, value: Any) -> Any:
        if isinstance(value, str) and len(value) > self.max_string_length:
            return value[: self.max_string_length] + f"... (truncated, {len(value)} chars)"
        if isinstance(value, dict):
            return {k: self._truncate_value(v) for k, v in value.items()}
        return value

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as pretty JSON."""
        log_data = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = self._truncate_value(value)

        if record.exc_info:
            log_data["exc_info"] = self.formatException(record.exc_info)

        try:
            return json.dumps(log_data, indent=2, ensure_ascii=False, default=str)
        except (TypeError, ValueError):
            return json.dumps({"message": str(record.getMessage())}, indent=2)


def _is_sensitive_key(key: str) -> bool:
    key_lower = key.lower()
    return any(sensitive_key in key_lower for sensitive_key in SENSITIVE_KEYS)


def sanitize_headers(headers: Mapping[str, str]) -> Dict[str, str]:
    """Sanitize HTTP headers by redacting sensitive values.

    Args:
        headers: HTTP headers (plain mapping or httpx.Headers)

    Returns:
        Sanitized headers dictionary
    """
    sanitized = {}
    for key, value in headers.items():
        key_lower = key.lower()
        if any(
            key_lower.startswith(prefix) for prefix in SENSITIVE_HEADER_PREFIXES
        ) or _is_sensitive_key(key):
            sanitized[key] = "[REDACTED]"
        else:
            sanitized[key] = value
    return sanitized


def format_request_log(
    request_id: str,
    request: httpx.Request,
    event_kind: Optional[str] = None,
    lambda_context: Optional[Any] = None,
) -> Dict[str, Any]:
    """Format structured request log entry.

    Only the body size is logged, never the body itself.

    Args:
        request_id: Request ID (from Lambda context or generated)
        request: Canonical request built from the event
        event_kind: Detected event shape
        lambda_context: Optional Lambda context for metadata

    Returns:
        Dictionary with structured log data
    """
    log_data = {
        "request_id": request_id,
        "event_kind": event_kind,
        "http_method": request.method,
        "request_path": request.url.path,
        "request_headers": sanitize_headers(request.headers),
        "request_body_bytes": len(request.content),
    }

    if lambda_context:
        log_data["lambda_function_name"] = getattr(
            lambda_context, "function_name", None
        )
        log_data["lambda_memory_limit"] = getattr(
            lambda_context, "memory_limit_in_mb", None
        )
        log_data["lambda_remaining_time_ms"] = getattr(
            lambda_context, "get_remaining_time_in_millis", lambda: None
        )()

    return log_data


def format_response_log(
    request_id: str,
    reply: Mapping[str, Any],
    duration_ms: float,
) -> Dict[str, Any]:
    """Format structured response log entry from a reply envelope.

    Args:
        request_id: Request ID
        reply: Reply envelope returned to Lambda
        duration_ms: Processing duration in milliseconds

    Returns:
        Dictionary with structured log data
    """
    return {
        "request_id": request_id,
        "response_status": reply.get("statusCode"),
        "response_headers": sanitize_headers(reply.get("headers", {})),
        "response_body_base64_length": len(reply.get("body", "")),
        "duration_ms": round(duration_ms, 2),
    }
