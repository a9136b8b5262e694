"""Run an application behind the Lambda adapter locally (no Lambda needed).

Each incoming HTTP request is turned into a Function URL event, run through
the same adapter code path as in Lambda, and the reply envelope is decoded
back into an HTTP response.

Usage:
    python scripts/local_server.py myapp.main:app --asgi --port 8000
"""

import argparse
import asyncio
import base64
import importlib
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

# Add project root to Python path so we can import from core
project_root = Path(__file__).parent.parent.resolve()
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from aiohttp import web

from core.interfaces import HTTPApp
from core.logging_utils import configure_json_logging
from core.validators import get_logging_config, load_config
from server.adapters.aws_lambda import handle_event
from server.http_handler import ASGIApp, WSGIApp

logger = logging.getLogger(__name__)

# aiohttp computes these itself from the body it sends
_HOP_HEADERS = ("content-length", "transfer-encoding")

_APP_KEY = web.AppKey("http_app", object)


def build_function_url_event(
    method: str,
    host: str,
    raw_path: str,
    raw_query_string: str,
    headers: Dict[str, str],
    body: bytes,
) -> Dict[str, Any]:
    """Build a bare Function URL event like the one Lambda would deliver."""
    return {
        "rawPath": raw_path,
        "rawQueryString": raw_query_string,
        "headers": headers,
        "body": base64.b64encode(body).decode("ascii") if body else None,
        "isBase64Encoded": bool(body),
        "requestContext": {
            "domainName": host,
            "http": {"method": method, "path": raw_path},
        },
    }


async def handle_local_request(request: web.Request) -> web.Response:
    """Proxy one aiohttp request through the Lambda adapter."""
    body = await request.read()
    event = build_function_url_event(
        method=request.method,
        host=request.host,
        raw_path=request.rel_url.raw_path,
        raw_query_string=request.rel_url.raw_query_string,
        headers=dict(request.headers),
        body=body,
    )

    reply = await handle_event(request.app[_APP_KEY], event)

    headers = {
        k: v for k, v in reply["headers"].items() if k.lower() not in _HOP_HEADERS
    }
    return web.Response(
        body=base64.b64decode(reply["body"]),
        status=reply["statusCode"],
        headers=headers,
    )


def create_app(http_app: HTTPApp) -> web.Application:
    """Create the aiohttp application serving ``http_app`` on every path."""
    app = web.Application()
    app[_APP_KEY] = http_app
    app.router.add_route("*", "/{tail:.*}", handle_local_request)
    return app


def load_http_app(target: str, kind: Optional[str] = None) -> HTTPApp:
    """Import ``module:attribute`` and wrap it according to ``kind``.

    Args:
        target: Import path such as ``myapp.main:app``
        kind: "asgi", "wsgi", or None for a plain request -> response callable

    Returns:
        Application usable by the adapter
    """
    module_name, _, attribute = target.partition(":")
    if not attribute:
        raise ValueError(f"Expected 'module:attribute', got '{target}'")

    obj = getattr(importlib.import_module(module_name), attribute)
    if kind == "asgi":
        return ASGIApp(obj)
    if kind == "wsgi":
        return WSGIApp(obj)
    return obj


async def start_server(http_app: HTTPApp, host: str, port: int) -> None:
    """Start local HTTP server."""
    runner = web.AppRunner(create_app(http_app))
    await runner.setup()
    site = web.TCPSite(runner, host, port)
    await site.start()

    logger.info(f"Local server running on http://{host}:{port}")

    try:
        await asyncio.Event().wait()
    finally:
        await runner.cleanup()


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("target", help="Application import path, module:attribute")
    kind = parser.add_mutually_exclusive_group()
    kind.add_argument("--asgi", action="store_const", const="asgi", dest="kind")
    kind.add_argument("--wsgi", action="store_const", const="wsgi", dest="kind")
    parser.add_argument("--host", default="localhost")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--config", default=None, help="Path to config.yaml")
    args = parser.parse_args()

    # Pretty-print JSON for better local readability
    logging_config = get_logging_config(load_config(args.config))
    configure_json_logging(level=logging_config["level"], pretty=True)

    http_app = load_http_app(args.target, args.kind)
    try:
        asyncio.run(start_server(http_app, args.host, args.port))
    except KeyboardInterrupt:
        logger.info("Shutting down")


if __name__ == "__main__":
    main()
