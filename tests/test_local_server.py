"""Tests for the local development server."""

import httpx
import pytest
from aiohttp import test_utils

from core.request_normalizer import lambda_extension, normalize
from scripts.local_server import build_function_url_event, create_app, load_http_app
from server.http_handler import ASGIApp


def echo_app(request: httpx.Request) -> httpx.Response:
    return httpx.Response(
        200,
        json={
            "method": request.method,
            "path": request.url.path,
            "query": request.url.query.decode("ascii"),
            "body": request.content.decode("utf-8"),
            "event_kind": lambda_extension(request)["event_kind"],
        },
        headers={"x-echo": "1"},
    )


class TestBuildFunctionUrlEvent:
    def test_event_normalizes_to_same_request(self):
        event = build_function_url_event(
            method="PATCH",
            host="localhost:8000",
            raw_path="/a/b",
            raw_query_string="q=1",
            headers={"Content-Type": "text/plain"},
            body=b"\x00\x01",
        )

        request = normalize(event)

        assert request.method == "PATCH"
        assert str(request.url) == "https://localhost:8000/a/b?q=1"
        assert request.content == b"\x00\x01"

    def test_empty_body_is_absent(self):
        event = build_function_url_event("GET", "localhost", "/", "", {}, b"")

        assert event["body"] is None
        assert event["isBase64Encoded"] is False


class TestLocalServer:
    @pytest.mark.asyncio
    async def test_request_goes_through_adapter(self):
        server = test_utils.TestServer(create_app(echo_app))
        async with test_utils.TestClient(server) as client:
            response = await client.post("/items?x=1&y=two", data=b"payload")
            payload = await response.json()

        assert response.status == 200
        assert response.headers["x-echo"] == "1"
        assert payload == {
            "method": "POST",
            "path": "/items",
            "query": "x=1&y=two",
            "body": "payload",
            "event_kind": "function_url",
        }


class TestLoadHttpApp:
    def test_loads_plain_callable(self):
        app = load_http_app("tests.test_local_server:echo_app")
        assert app is echo_app

    def test_wraps_asgi_app(self):
        app = load_http_app("tests.test_http_handler:asgi_echo", "asgi")
        assert isinstance(app, ASGIApp)

    def test_rejects_target_without_attribute(self):
        with pytest.raises(ValueError, match="module:attribute"):
            load_http_app("tests.test_local_server")
