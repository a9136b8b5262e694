"""Shared Lambda event fixtures.

The three events describe the same logical request:
POST https://abc123.lambda-url.us-east-1.on.aws/x?a=1 with a JSON body.
"""

import json

import pytest

DOMAIN = "abc123.lambda-url.us-east-1.on.aws"
BODY = json.dumps({"hello": "world"})


class MockLambdaContext:
    """Mock Lambda context object."""

    def __init__(self, request_id="test-request-id-123"):
        self.aws_request_id = request_id
        self.function_name = "test-function"
        self.memory_limit_in_mb = 512


@pytest.fixture
def proxy_event():
    return {
        "httpMethod": "POST",
        "path": "/x",
        "queryStringParameters": {"a": "1"},
        "headers": {
            "Content-Type": "application/json",
            "X-Empty": "",
            "X-Missing": None,
        },
        "body": BODY,
        "isBase64Encoded": False,
        "requestContext": {"domainName": DOMAIN},
    }


@pytest.fixture
def function_url_v2_event():
    return {
        "httpMethod": "POST",
        "rawPath": "/x",
        "rawQueryString": "a=1",
        "headers": {
            "content-type": "application/json",
            "x-empty": "",
        },
        "body": BODY,
        "isBase64Encoded": False,
        "requestContext": {"domainName": DOMAIN},
    }


@pytest.fixture
def function_url_event():
    return {
        "version": "2.0",
        "rawPath": "/x",
        "rawQueryString": "a=1",
        "headers": {"content-type": "application/json"},
        "body": BODY,
        "isBase64Encoded": False,
        "requestContext": {
            "domainName": DOMAIN,
            "http": {"method": "POST", "path": "/x", "sourceIp": "203.0.113.7"},
        },
    }


@pytest.fixture
def lambda_context():
    return MockLambdaContext()
