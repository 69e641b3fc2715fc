"""Canonical Pydantic models shared across all simplerest modules.

This is the single source of truth for data shapes in the project.  The
models fall into three groups:

**Request/response models** -- the library's public surface:
    :class:`ParameterType`, :class:`Parameter`, :class:`Method`,
    :class:`RestRequest`, :class:`ResponseStatus`,
    :class:`RestResponseCookie`, :class:`RestResponse`, and the client-wide
    :class:`ClientConfig`.

**OAuth enumerations** -- :class:`OAuthType`, :class:`OAuthSignatureMethod`
and :class:`OAuthParameterHandling`, consumed by
:mod:`simplerest.auth.oauth` and by :class:`AuthConfig`.

**Configuration models** -- serialised as JSON in the user's config
directory: :class:`AuthConfig`, :class:`RequestConfig`,
:class:`OutputConfig`, :class:`CacheConfig`, :class:`GlobalConfig`, and
:class:`Profile`.
"""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from simplerest.exceptions import AuthError, ConnectionError_, NotFoundError, ServerError


# --- Parameters ---


class ParameterType(str, enum.Enum):
    """Transport role of a :class:`Parameter`.

    The set is closed: the merger, the URI builder and the request
    configurator each handle every member explicitly.
    """

    URL_SEGMENT = "url_segment"
    GET_OR_POST = "get_or_post"
    HTTP_HEADER = "http_header"
    COOKIE = "cookie"
    REQUEST_BODY = "request_body"


class Parameter(BaseModel):
    """A name/value pair tagged with its transport role.

    Identity for merge and conflict purposes is ``(name, type)``.  For
    :attr:`ParameterType.REQUEST_BODY` the ``name`` holds the MIME type and
    ``value`` the body content.
    """

    name: str
    value: Any = None
    type: ParameterType = ParameterType.GET_OR_POST

    @property
    def key(self) -> tuple[str, ParameterType]:
        return (self.name, self.type)

    def value_as_str(self) -> str:
        """Return the string form used on the wire (``""`` for ``None``)."""
        if self.value is None:
            return ""
        return str(self.value)


class Method(str, enum.Enum):
    """HTTP methods a :class:`RestRequest` can be sent with."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    PATCH = "PATCH"

    @property
    def carries_body(self) -> bool:
        """``True`` for methods whose form parameters travel in the body."""
        return self in (Method.POST, Method.PUT, Method.PATCH)


class RestRequest(BaseModel):
    """Declarative description of a single API call.

    The ``add_*`` helpers append a parameter and return the request so
    calls can be chained::

        request = (
            RestRequest(resource="users/{id}", method="GET")
            .add_url_segment("id", 42)
            .add_parameter("fields", "name,email")
            .add_header("Accept", "application/json")
        )

    Clients never mutate the request they are given; authenticators and
    default parameters are applied to a copy.
    """

    resource: str = ""
    method: Method = Method.GET
    parameters: list[Parameter] = Field(default_factory=list)
    timeout: float = Field(
        default=0, description="Timeout in seconds; 0 falls back to the client value"
    )

    @field_validator("method", mode="before")
    @classmethod
    def _upper_method(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.upper()
        return value

    def add_parameter(
        self,
        name: str,
        value: Any = None,
        type: ParameterType = ParameterType.GET_OR_POST,
    ) -> RestRequest:
        self.parameters.append(Parameter(name=name, value=value, type=type))
        return self

    def add_query_parameter(self, name: str, value: Any) -> RestRequest:
        return self.add_parameter(name, value, ParameterType.GET_OR_POST)

    def add_header(self, name: str, value: Any) -> RestRequest:
        return self.add_parameter(name, value, ParameterType.HTTP_HEADER)

    def add_cookie(self, name: str, value: Any) -> RestRequest:
        return self.add_parameter(name, value, ParameterType.COOKIE)

    def add_url_segment(self, name: str, value: Any) -> RestRequest:
        return self.add_parameter(name, value, ParameterType.URL_SEGMENT)

    def add_body(self, body: str, content_type: str = "application/json") -> RestRequest:
        """Set the raw request body, replacing any body added earlier."""
        self.parameters = [
            p for p in self.parameters if p.type != ParameterType.REQUEST_BODY
        ]
        return self.add_parameter(content_type, body, ParameterType.REQUEST_BODY)

    def parameters_of(self, type: ParameterType) -> list[Parameter]:
        return [p for p in self.parameters if p.type == type]


# --- Responses ---


class ResponseStatus(str, enum.Enum):
    """Transport-level outcome of a request.

    Independent of the HTTP status code: a 404 or 500 answer is still
    ``COMPLETED``.  ``ERROR`` and ``TIMED_OUT`` mean no HTTP answer was
    received.
    """

    NONE = "none"
    COMPLETED = "completed"
    ERROR = "error"
    TIMED_OUT = "timed_out"
    ABORTED = "aborted"


class RestResponseCookie(BaseModel):
    """A cookie set by the server, with every attribute the transport exposed."""

    name: str
    value: str = ""
    domain: str = ""
    path: str = ""
    port: str = ""
    expires: Optional[datetime] = None
    expired: bool = False
    secure: bool = False
    http_only: bool = False
    discard: bool = False
    comment: str = ""
    comment_uri: str = ""
    version: int = 0
    timestamp: Optional[datetime] = None


class RestResponse(BaseModel):
    """Container for data sent back from the API.

    Produced by :func:`~simplerest.client.mapper.convert_to_rest_response`.
    ``request`` references the caller's original request, mainly for
    diagnostics when ``response_status`` is not ``COMPLETED``.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    request: Optional[RestRequest] = None
    content_type: str = ""
    content_length: int = 0
    content_encoding: str = ""
    content: str = ""
    raw_bytes: bytes = b""
    status_code: int = 0
    status_description: str = ""
    response_uri: Optional[str] = None
    server: str = ""
    headers: list[Parameter] = Field(default_factory=list)
    cookies: list[RestResponseCookie] = Field(default_factory=list)
    response_status: ResponseStatus = ResponseStatus.NONE
    error_message: Optional[str] = None
    error_exception: Optional[BaseException] = None
    from_cache: bool = False
    cache_expired: bool = False

    @property
    def is_successful(self) -> bool:
        return (
            self.response_status == ResponseStatus.COMPLETED
            and 200 <= self.status_code < 300
        )

    def get_header(self, name: str) -> Optional[str]:
        """Return the first header value matching *name* case-insensitively."""
        lowered = name.lower()
        for header in self.headers:
            if header.name.lower() == lowered:
                return header.value_as_str()
        return None

    def raise_for_status(self) -> RestResponse:
        """Raise a typed exception for transport failures and 4xx/5xx answers.

        HTTP failures are not errors for the library itself; this helper is
        for callers that want exception-style control flow.

        Raises:
            ConnectionError_: When ``response_status`` is not ``COMPLETED``.
            AuthError: On 401 / 403.
            NotFoundError: On 404.
            ServerError: On any other status >= 400.
        """
        if self.response_status != ResponseStatus.COMPLETED:
            raise ConnectionError_(
                self.error_message or f"Request failed: {self.response_status.value}"
            )

        status = self.status_code
        if status < 400:
            return self

        detail = self.content[:200] if self.content else ""
        prefix = f"HTTP {status}"
        message = f"{prefix}: {detail}" if detail else prefix
        if status in (401, 403):
            raise AuthError(message)
        if status == 404:
            raise NotFoundError(message)
        raise ServerError(message)


# --- Client-wide configuration ---


class ClientConfig(BaseModel):
    """Client-wide settings passed explicitly into every request-building call.

    ``default_parameters`` are folded into each request unless the request
    already carries a parameter with the same ``(name, type)``.
    """

    model_config = ConfigDict(validate_assignment=True)

    base_url: str = Field(
        default="",
        description="Scheme and host (plus optional path prefix) combined with the request resource",
    )
    user_agent: Optional[str] = None
    timeout: float = Field(default=0, description="Timeout in seconds; 0 means transport default")
    default_parameters: list[Parameter] = Field(default_factory=list)
    follow_redirects: bool = True
    max_redirects: Optional[int] = None
    verify_ssl: bool = True

    @field_validator("base_url", mode="before")
    @classmethod
    def _strip_trailing_slash(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, str) and value.endswith("/"):
            return value[:-1]
        return value


# --- OAuth enumerations ---


class OAuthType(str, enum.Enum):
    """OAuth 1.0a flow a request is signed for.

    Selects which credentials participate in the signature and which extra
    protocol parameters are added.
    """

    REQUEST_TOKEN = "request_token"
    ACCESS_TOKEN = "access_token"
    PROTECTED_RESOURCE = "protected_resource"
    CLIENT_AUTHENTICATION = "client_authentication"


class OAuthSignatureMethod(str, enum.Enum):
    """Value of ``oauth_signature_method``."""

    HMAC_SHA1 = "HMAC-SHA1"
    HMAC_SHA256 = "HMAC-SHA256"
    PLAINTEXT = "PLAINTEXT"


class OAuthParameterHandling(str, enum.Enum):
    """Where the signed OAuth protocol parameters are attached."""

    HTTP_AUTHORIZATION_HEADER = "header"
    URL_OR_POST_PARAMETERS = "parameters"


# --- Persistent configuration ---


class AuthConfig(BaseModel):
    """Authentication configuration embedded in a :class:`Profile`.

    Secrets are never stored directly: every ``*_source`` field holds a
    credential source descriptor resolved by
    :func:`~simplerest.config.resolve_credential` (``env:VAR``,
    ``file:/path``, ``prompt``).

    Example::

        AuthConfig(
            type="oauth1",
            oauth_type="protected_resource",
            consumer_key_source="env:API_CONSUMER_KEY",
            consumer_secret_source="env:API_CONSUMER_SECRET",
            token_source="env:API_TOKEN",
            token_secret_source="env:API_TOKEN_SECRET",
        )
    """

    model_config = ConfigDict(extra="allow")

    type: str = Field(description="Auth type: oauth1, basic, header")
    source: str = Field(
        default="prompt",
        description="Credential source for basic (user:password) and header auth",
    )
    header: Optional[str] = Field(
        default=None, description="Header name for static header auth"
    )
    # OAuth 1.0a
    oauth_type: OAuthType = OAuthType.PROTECTED_RESOURCE
    parameter_handling: OAuthParameterHandling = (
        OAuthParameterHandling.HTTP_AUTHORIZATION_HEADER
    )
    signature_method: OAuthSignatureMethod = OAuthSignatureMethod.HMAC_SHA1
    consumer_key_source: Optional[str] = None
    consumer_secret_source: Optional[str] = None
    token_source: Optional[str] = None
    token_secret_source: Optional[str] = None
    verifier_source: Optional[str] = None
    username_source: Optional[str] = None
    password_source: Optional[str] = None
    callback: Optional[str] = None
    realm: Optional[str] = None


class RequestConfig(BaseModel):
    """Default HTTP request settings applied to every call made with a profile."""

    timeout: float = Field(default=30, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    follow_redirects: bool = True
    max_redirects: Optional[int] = None
    user_agent: Optional[str] = None


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class CacheConfig(BaseModel):
    """HTTP response cache settings stored in :class:`GlobalConfig`."""

    enabled: bool = Field(default=True, description="Enable response caching")
    ttl_seconds: int = Field(
        default=300, description="Age after which an entry must be revalidated"
    )
    max_stale_seconds: int = Field(
        default=86400, description="Age after which an entry is evicted"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/simplerest/config.json``."""

    default_profile: Optional[str] = None
    auto_select_single_profile: bool = True
    output: OutputConfig = Field(default_factory=OutputConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)


class Profile(BaseModel):
    """Per-API profile stored as JSON under the ``profiles/`` config directory.

    Bundles the base URL, authentication, request settings and default
    parameters needed to talk to one API.

    See Also:
        :func:`~simplerest.config.client_config_from_profile`: Turn a
        profile into a :class:`ClientConfig`.
    """

    model_config = ConfigDict(extra="allow")

    name: str
    base_url: Optional[str] = None
    auth: Optional[AuthConfig] = None
    request: RequestConfig = Field(default_factory=RequestConfig)
    default_parameters: list[Parameter] = Field(default_factory=list)
