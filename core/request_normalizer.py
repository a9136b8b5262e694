"""Turn a Lambda HTTP invocation event into a canonical ``httpx.Request``.

All three event shapes end up as the same request: an absolute ``https`` URL
built from ``requestContext.domainName``, the HTTP method, the non-empty
headers and the (base64-decoded) body.
"""

import base64
import binascii
import logging
from typing import Any, Dict, Optional, Union

import httpx

from core.interfaces import (
    FunctionUrlEvent,
    FunctionUrlEventV2,
    InvalidEventError,
    LambdaContext,
    ProxyEvent,
    parse_event,
)

logger = logging.getLogger(__name__)

# Key under request.extensions where the Lambda invocation details live
LAMBDA_EXTENSION = "aws.lambda"

ParsedEvent = Union[ProxyEvent, FunctionUrlEventV2, FunctionUrlEvent]


def extract_method(event: ParsedEvent) -> str:
    """Top-level ``httpMethod`` if present, else ``requestContext.http.method``."""
    if isinstance(event, (ProxyEvent, FunctionUrlEventV2)):
        return event.http_method
    return event.request_context.http.method


def extract_path(event: ParsedEvent) -> str:
    if isinstance(event, ProxyEvent):
        return event.path
    return event.raw_path


def extract_query_string(event: ParsedEvent) -> str:
    """Build the query string for the request URL.

    Proxy events carry a flat mapping: entries with an empty or missing value
    are dropped and the rest are joined as ``key=value`` verbatim, without any
    further percent-encoding. Function URL events already carry an encoded
    ``rawQueryString``, used as is.

    Args:
        event: Parsed invocation event

    Returns:
        Query string without the leading ``?`` (possibly empty)
    """
    if isinstance(event, ProxyEvent):
        params = event.query_string_parameters or {}
        return "&".join(f"{key}={value}" for key, value in params.items() if value)

    return event.raw_query_string


def build_url(event: ParsedEvent) -> str:
    """Assemble the absolute request URL.

    Events carry no scheme, so ``https`` is always used. The host comes from
    ``requestContext.domainName``; ALB events have none, in which case the
    ``Host`` header is used instead.

    Raises:
        InvalidEventError: If neither a domain name nor a Host header is present
    """
    domain_name = event.request_context.domain_name
    if not domain_name:
        domain_name = next(
            (v for k, v in event.headers.items() if k.lower() == "host" and v), None
        )
    if not domain_name:
        raise InvalidEventError(
            "Event has no requestContext.domainName and no Host header"
        )

    url = f"https://{domain_name}{extract_path(event)}"
    query_string = extract_query_string(event)
    return f"{url}?{query_string}" if query_string else url


def build_headers(event: ParsedEvent) -> httpx.Headers:
    """Copy every header with a non-empty value; the last value per name wins."""
    headers = httpx.Headers()
    for name, value in event.headers.items():
        if value:
            headers[name] = value

    # Function URL events move cookies out of the headers into their own array
    cookies = getattr(event, "cookies", None)
    if cookies and "cookie" not in headers:
        headers["cookie"] = "; ".join(cookies)

    return headers


def decode_body(event: ParsedEvent) -> Optional[bytes]:
    """Return the request body as bytes, or None if the event has none.

    Raises:
        InvalidEventError: If the body is flagged as base64 but is not
    """
    if not event.body:
        return None

    if event.is_base64_encoded:
        try:
            return base64.b64decode(event.body, validate=True)
        except binascii.Error as e:
            raise InvalidEventError(f"Invalid base64-encoded body: {e}") from e

    return event.body.encode("utf-8")


def normalize(
    event: Any,
    context: Optional[LambdaContext] = None,
    request_id: Optional[str] = None,
) -> httpx.Request:
    """Build the canonical request for a Lambda HTTP event.

    The raw event, the Lambda context, the request ID and the detected event
    kind are attached under ``request.extensions["aws.lambda"]`` so the
    application can reach them.

    Args:
        event: Raw Lambda event (any of the three HTTP shapes) or a parsed model
        context: Optional Lambda context object
        request_id: Optional request ID for logging/tracing

    Returns:
        httpx.Request ready to be handed to the application

    Raises:
        InvalidEventError: If the event cannot be interpreted
    """
    parsed = parse_event(event)

    request = httpx.Request(
        extract_method(parsed),
        build_url(parsed),
        headers=build_headers(parsed),
        content=decode_body(parsed),
        extensions={
            LAMBDA_EXTENSION: {
                "event": event,
                "context": context,
                "request_id": request_id,
                "event_kind": parsed.kind.value,
            }
        },
    )

    logger.debug(
        "Normalized Lambda event",
        extra={
            "request_id": request_id,
            "event_kind": parsed.kind.value,
            "http_method": request.method,
            "request_path": request.url.path,
        },
    )

    return request


def lambda_extension(request: httpx.Request) -> Dict[str, Any]:
    """Return the Lambda invocation details attached by ``normalize``."""
    return request.extensions.get(LAMBDA_EXTENSION, {})
