"""Cloud provider adapters.

This package contains adapters that transform cloud-specific event formats
into the canonical ``httpx.Request`` handed to the application, and the
application's ``httpx.Response`` back into the cloud-specific reply.

Each adapter handles:
- Event format transformation (cloud-specific -> canonical request)
- Response format transformation (canonical response -> cloud-specific)
- Cloud-specific context extraction (request IDs, function names, etc.)
"""

from .aws_lambda import handle, handle_event

__all__ = ["handle", "handle_event"]
