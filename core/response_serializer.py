"""Serialize a canonical ``httpx.Response`` into the Lambda reply envelope."""

import asyncio
import base64
import logging
from typing import Any, Dict

import httpx

from core.interfaces import ReplyEnvelope

logger = logging.getLogger(__name__)


async def read_body(response: httpx.Response) -> bytes:
    """Drain the response body into a single buffer of raw bytes.

    Bytes are taken as the application produced them, so a body sent with a
    ``Content-Encoding`` (e.g. gzip) stays encoded. A streamed body is
    consumed exactly once, chunk by chunk; reading it a second time raises
    ``httpx.StreamConsumed``. An in-memory body (e.g.
    ``httpx.Response(200, content=b"...")``) is taken from its stream, which
    still holds the raw bytes after httpx decoded ``response.content``.

    Args:
        response: Response produced by the application

    Returns:
        Raw body bytes (empty if the response has no body)
    """
    if isinstance(response.stream, httpx.ByteStream):
        return b"".join(response.stream)

    if isinstance(response.stream, httpx.AsyncByteStream):
        chunks = []
        async for chunk in response.aiter_raw():
            chunks.append(chunk)
        return b"".join(chunks)

    # Synchronous streams may block, keep them off the event loop
    return await asyncio.to_thread(lambda: b"".join(response.iter_raw()))


def collect_headers(response: httpx.Response) -> Dict[str, str]:
    """Flatten response headers to one value per name.

    Lambda replies cannot hold repeated header names, so when a name occurs
    more than once the last value wins.
    """
    return {name: value for name, value in response.headers.multi_items()}


async def serialize(response: httpx.Response) -> Dict[str, Any]:
    """Convert the application's response into a Lambda reply envelope.

    The body is always base64-encoded from the raw bytes, and the envelope
    always declares ``isBase64Encoded: true``, even for an empty body.

    Args:
        response: Response produced by the application

    Returns:
        Dictionary with statusCode, headers, body and isBase64Encoded
    """
    body = await read_body(response)

    envelope = ReplyEnvelope(
        status_code=response.status_code,
        headers=collect_headers(response),
        body=base64.b64encode(body).decode("ascii"),
    )

    logger.debug(
        "Serialized response",
        extra={"response_status": response.status_code, "body_bytes": len(body)},
    )

    return envelope.to_lambda()
