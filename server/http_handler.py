"""Bindings that expose ASGI and WSGI applications as request handlers.

The Lambda adapter hands an ``httpx.Request`` to a callable and expects an
``httpx.Response`` back. These wrappers let existing ASGI (FastAPI,
Starlette) and WSGI (Flask) applications be used as that callable, through
httpx's in-process transports.
"""

import asyncio
import logging
from typing import Any, Callable

import httpx

logger = logging.getLogger(__name__)


class ASGIApp:
    """Adapt an ASGI application to the request -> response contract."""

    def __init__(self, app: Callable[..., Any], root_path: str = "") -> None:
        """Initialize the binding.

        Args:
            app: ASGI application
            root_path: ASGI root_path (e.g. an API Gateway stage prefix)
        """
        self.app = app
        self._transport = httpx.ASGITransport(app=app, root_path=root_path)
        logger.info("ASGI application bound", extra={"root_path": root_path})

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        return await self._transport.handle_async_request(request)


class WSGIApp:
    """Adapt a WSGI application to the request -> response contract.

    WSGI applications are synchronous, so each call runs in a worker thread
    and the body is read there.
    """

    def __init__(self, app: Callable[..., Any], script_name: str = "") -> None:
        """Initialize the binding.

        Args:
            app: WSGI application
            script_name: WSGI SCRIPT_NAME (e.g. an API Gateway stage prefix)
        """
        self.app = app
        self._transport = httpx.WSGITransport(app=app, script_name=script_name)
        logger.info("WSGI application bound", extra={"script_name": script_name})

    def _handle(self, request: httpx.Request) -> httpx.Response:
        response = self._transport.handle_request(request)
        # Buffer the raw bytes; read() would undo any Content-Encoding
        raw = b"".join(response.iter_raw())
        return httpx.Response(
            response.status_code,
            headers=response.headers,
            stream=httpx.ByteStream(raw),
            request=request,
        )

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        return await asyncio.to_thread(self._handle, request)
