"""Core interfaces and data models for the Lambda HTTP adapter.

This module defines the three invocation event shapes AWS Lambda can deliver
for an HTTP call, the reply envelope Lambda expects back, and the protocols
the adapter relies on (the application being adapted and the Lambda context).

Event shapes overlap heavily, so they are modeled as a tagged union whose tag
is computed once by ``classify_event``. Every other module works on the
parsed models instead of probing raw dictionaries.
"""

from enum import Enum
from typing import (
    Annotated,
    Any,
    Awaitable,
    ClassVar,
    Dict,
    List,
    Literal,
    Mapping,
    Optional,
    Protocol,
    Union,
)

import httpx
from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    TypeAdapter,
    ValidationError,
    field_validator,
)


class InvalidEventError(ValueError):
    """Raised when a Lambda event matches none of the known HTTP event shapes."""

    pass


class EventKind(str, Enum):
    """Invocation event shapes understood by the adapter."""

    PROXY = "proxy"  # REST API Gateway or ALB
    FUNCTION_URL_V2 = "function_url_v2"  # rawPath with top-level httpMethod
    FUNCTION_URL = "function_url"  # rawPath, method under requestContext.http


class LambdaContext(Protocol):
    """Protocol for AWS Lambda context object.

    This defines the expected interface for Lambda context objects,
    which provide runtime information about the Lambda execution environment.
    """

    aws_request_id: str
    function_name: Optional[str]
    memory_limit_in_mb: Optional[int]


class HTTPApp(Protocol):
    """Application being adapted: takes a request, returns a response.

    Both plain functions and coroutine functions satisfy this protocol.
    """

    def __call__(
        self, request: httpx.Request
    ) -> Union[httpx.Response, Awaitable[httpx.Response]]: ...


class _EventModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class HTTPDetails(_EventModel):
    """``requestContext.http`` block of Function URL / HTTP API events."""

    method: str
    path: Optional[str] = None
    source_ip: Optional[str] = Field(None, alias="sourceIp")


class RequestContext(_EventModel):
    """Subset of ``requestContext`` the adapter reads."""

    domain_name: Optional[str] = Field(None, alias="domainName")
    request_id: Optional[str] = Field(None, alias="requestId")
    http: Optional[HTTPDetails] = None


class FunctionUrlRequestContext(RequestContext):
    http: HTTPDetails


class _BaseEvent(_EventModel):
    kind: ClassVar[EventKind]

    headers: Dict[str, Optional[str]] = Field(default_factory=dict)
    body: Optional[str] = None
    is_base64_encoded: bool = Field(False, alias="isBase64Encoded")
    request_context: RequestContext = Field(
        default_factory=RequestContext, alias="requestContext"
    )

    @field_validator("headers", mode="before")
    @classmethod
    def _null_headers(cls, v: Any) -> Any:
        # API Gateway sends "headers": null when the request has none
        return {} if v is None else v


class ProxyEvent(_BaseEvent):
    """Event from a REST API Gateway or an Application Load Balancer."""

    kind: ClassVar[EventKind] = EventKind.PROXY

    http_method: str = Field(..., alias="httpMethod")
    path: str
    query_string_parameters: Optional[Dict[str, Optional[str]]] = Field(
        None, alias="queryStringParameters"
    )


class FunctionUrlEventV2(_BaseEvent):
    """Function URL style event that also carries a top-level ``httpMethod``."""

    kind: ClassVar[EventKind] = EventKind.FUNCTION_URL_V2

    http_method: str = Field(..., alias="httpMethod")
    raw_path: str = Field(..., alias="rawPath")
    raw_query_string: str = Field("", alias="rawQueryString")
    cookies: List[str] = Field(default_factory=list)


class FunctionUrlEvent(_BaseEvent):
    """Event from a bare Lambda Function URL (or an HTTP API v2 payload)."""

    kind: ClassVar[EventKind] = EventKind.FUNCTION_URL

    raw_path: str = Field(..., alias="rawPath")
    raw_query_string: str = Field("", alias="rawQueryString")
    cookies: List[str] = Field(default_factory=list)
    request_context: FunctionUrlRequestContext = Field(..., alias="requestContext")


def classify_event(raw: Any) -> Optional[EventKind]:
    """Determine which event shape ``raw`` is.

    A ``path`` key marks a proxy event. Otherwise a ``rawPath`` key marks one
    of the Function URL shapes, told apart by a top-level ``httpMethod``.

    Args:
        raw: Raw event mapping or an already parsed event model

    Returns:
        The event kind, or None if the event matches no known shape
    """
    if isinstance(raw, _BaseEvent):
        return raw.kind
    if not isinstance(raw, Mapping):
        return None

    if "path" in raw:
        return EventKind.PROXY
    if "rawPath" in raw:
        if "httpMethod" in raw:
            return EventKind.FUNCTION_URL_V2
        return EventKind.FUNCTION_URL
    return None


def _event_tag(raw: Any) -> Optional[str]:
    kind = classify_event(raw)
    return kind.value if kind is not None else None


InvocationEvent = Annotated[
    Union[
        Annotated[ProxyEvent, Tag(EventKind.PROXY.value)],
        Annotated[FunctionUrlEventV2, Tag(EventKind.FUNCTION_URL_V2.value)],
        Annotated[FunctionUrlEvent, Tag(EventKind.FUNCTION_URL.value)],
    ],
    Discriminator(_event_tag),
]

_event_adapter: TypeAdapter = TypeAdapter(InvocationEvent)


def parse_event(raw: Any) -> Union[ProxyEvent, FunctionUrlEventV2, FunctionUrlEvent]:
    """Parse a raw Lambda event into its typed model.

    Args:
        raw: JSON-deserialized Lambda event, or an already parsed model

    Returns:
        Parsed event model

    Raises:
        InvalidEventError: If the event matches none of the known shapes
    """
    if isinstance(raw, _BaseEvent):
        return raw

    try:
        return _event_adapter.validate_python(raw)
    except ValidationError as e:
        raise InvalidEventError(f"Unrecognized Lambda HTTP event: {e}") from e


class ReplyEnvelope(BaseModel):
    """Response structure Lambda turns into the HTTP reply."""

    model_config = ConfigDict(populate_by_name=True)

    status_code: int = Field(..., alias="statusCode")
    headers: Dict[str, str] = Field(default_factory=dict)
    body: str = ""
    is_base64_encoded: Literal[True] = Field(True, alias="isBase64Encoded")

    def to_lambda(self) -> Dict[str, Any]:
        """Dump with the camelCase keys Lambda expects."""
        return self.model_dump(by_alias=True)
