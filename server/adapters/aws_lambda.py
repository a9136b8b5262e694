"""AWS Lambda adapter.

This adapter transforms AWS Lambda HTTP events (API Gateway REST / ALB proxy
events, and Function URL / HTTP API events) into a canonical
``httpx.Request``, hands it to the application, and serializes the
``httpx.Response`` back into the reply Lambda expects.

Typical usage in the Lambda function module::

    from server.adapters import handle
    from server.http_handler import ASGIApp

    lambda_handler = handle(ASGIApp(app))
"""

import asyncio
import inspect
import logging
import time
import uuid
from typing import Any, Callable, Dict, Optional

from core.interfaces import HTTPApp, LambdaContext
from core.logging_utils import (
    configure_json_logging,
    format_request_log,
    format_response_log,
)
from core.request_normalizer import lambda_extension, normalize
from core.response_serializer import serialize
from core.validators import AdapterConfig, get_logging_config, load_config

logger = logging.getLogger(__name__)

LambdaHandler = Callable[[Dict[str, Any], Optional[LambdaContext]], Dict[str, Any]]


def _new_request_id() -> str:
    return str(uuid.uuid4())


async def handle_event(
    app: HTTPApp,
    event: Dict[str, Any],
    context: Optional[LambdaContext] = None,
    request_id_factory: Callable[[], str] = _new_request_id,
) -> Dict[str, Any]:
    """Process one Lambda HTTP invocation.

    Args:
        app: Application taking an httpx.Request and returning an httpx.Response
            (directly or as an awaitable)
        event: Lambda event (any of the supported HTTP event shapes)
        context: Lambda context object
        request_id_factory: Generates a request ID when the context has none

    Returns:
        Reply envelope with statusCode, headers, base64 body and isBase64Encoded

    Raises:
        InvalidEventError: If the event is not a supported HTTP event
        Exception: Any error raised by the application or while reading its
            response body is logged and re-raised to the Lambda runtime
    """
    start_time = time.perf_counter()
    request_id = getattr(context, "aws_request_id", None) or request_id_factory()

    try:
        request = normalize(event, context=context, request_id=request_id)

        logger.info(
            "Lambda invocation started",
            extra=format_request_log(
                request_id=request_id,
                request=request,
                event_kind=lambda_extension(request).get("event_kind"),
                lambda_context=context,
            ),
        )

        response = app(request)
        if inspect.isawaitable(response):
            response = await response

        reply = await serialize(response)

    except Exception as e:
        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.error(
            f"Error in Lambda handler: {e}",
            extra={
                "request_id": request_id,
                "error_type": type(e).__name__,
                "duration_ms": round(duration_ms, 2),
            },
            exc_info=True,
        )
        raise

    duration_ms = (time.perf_counter() - start_time) * 1000
    logger.info(
        "Lambda invocation completed",
        extra=format_response_log(
            request_id=request_id, reply=reply, duration_ms=duration_ms
        ),
    )

    return reply


def handle(
    app: HTTPApp,
    config: Optional[AdapterConfig] = None,
    request_id_factory: Optional[Callable[[], str]] = None,
) -> LambdaHandler:
    """Build a Lambda handler function for ``app``.

    Call this once at module import so logging is configured during cold
    start and the returned handler is reused on warm starts.

    Args:
        app: Application taking an httpx.Request and returning an httpx.Response
        config: Adapter configuration; loaded from the environment when omitted
        request_id_factory: Generates request IDs when Lambda provides none

    Returns:
        Synchronous ``lambda_handler(event, context)`` function
    """
    if config is None:
        config = load_config()
    configure_json_logging(**get_logging_config(config))

    factory = request_id_factory or _new_request_id

    def lambda_handler(
        event: Dict[str, Any], context: Optional[LambdaContext] = None
    ) -> Dict[str, Any]:
        """AWS Lambda handler function."""
        return asyncio.run(
            handle_event(app, event, context, request_id_factory=factory)
        )

    logger.info("Lambda handler created", extra={"app": repr(app)})
    return lambda_handler
