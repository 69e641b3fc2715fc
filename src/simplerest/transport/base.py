"""Abstract transport object and transport interfaces.

The request pipeline never talks to the network itself.  It fills an
:class:`Http` object (URL, method, headers, cookies, form parameters, raw
body, timeout, user agent) and hands it to a :class:`Transport` or
:class:`AsyncTransport`, which returns an :class:`HttpResponse`.

Transports report network failures through
:attr:`HttpResponse.response_status` instead of raising, so a 404 and a
DNS failure reach the caller through the same return path.

See Also:
    :class:`~simplerest.transport.sync_transport.HttpxTransport` and
    :class:`~simplerest.transport.async_transport.AsyncHttpxTransport` for
    the default httpx-backed implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from simplerest.models import ResponseStatus


@dataclass
class HttpHeader:
    """Representation of an HTTP header."""

    name: str
    value: str


@dataclass
class HttpParameter:
    """A form field sent in a url-encoded body."""

    name: str
    value: str


@dataclass
class HttpCookie:
    """A cookie, either sent with a request or received with a response.

    Request cookies only use ``name`` and ``value``; the remaining
    attributes are populated for cookies the server set.
    """

    name: str
    value: str
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


@dataclass
class Http:
    """Mutable transport object populated by the request configurator.

    Attributes:
        url: Absolute request URL, query string included.
        method: HTTP method sent on the wire.
        headers: Request headers in insertion order.
        cookies: Request cookies (sent as a single ``Cookie`` header).
        parameters: Form fields; written to the body only when
            :attr:`body_style` is set and no :attr:`request_body` exists.
        request_body: Raw body content, if any.
        request_content_type: Content type of :attr:`request_body`.
        body_style: Whether form parameters belong in the body.
        timeout: Seconds; ``None`` leaves the transport default.
        user_agent: Value of the ``User-Agent`` header.
        follow_redirects: Follow 3xx answers.
        max_redirects: Redirect limit from the client configuration; transports
            apply it when they create their httpx client.
    """

    url: str = ""
    method: str = "GET"
    headers: list[HttpHeader] = field(default_factory=list)
    cookies: list[HttpCookie] = field(default_factory=list)
    parameters: list[HttpParameter] = field(default_factory=list)
    request_body: Optional[str] = None
    request_content_type: Optional[str] = None
    body_style: bool = False
    timeout: Optional[float] = None
    user_agent: Optional[str] = None
    follow_redirects: bool = True
    max_redirects: Optional[int] = None

    def sends_form(self) -> bool:
        return self.body_style and self.request_body is None and bool(self.parameters)


@dataclass
class HttpResponse:
    """Raw answer of a transport, before mapping to a ``RestResponse``."""

    content_type: str = ""
    content_length: int = 0
    content_encoding: str = ""
    content: str = ""
    raw_bytes: bytes = b""
    status_code: int = 0
    status_description: str = ""
    response_uri: Optional[str] = None
    server: str = ""
    headers: list[HttpHeader] = field(default_factory=list)
    cookies: list[HttpCookie] = field(default_factory=list)
    response_status: ResponseStatus = ResponseStatus.NONE
    error_message: Optional[str] = None
    error_exception: Optional[BaseException] = None
    from_cache: bool = False
    cache_expired: bool = False

    @classmethod
    def from_error(
        cls,
        exc: BaseException,
        status: ResponseStatus = ResponseStatus.ERROR,
    ) -> HttpResponse:
        """Build a response describing a transport failure."""
        return cls(
            response_status=status,
            error_message=str(exc) or exc.__class__.__name__,
            error_exception=exc,
        )


class Transport(ABC):
    """Blocking transport: executes an :class:`Http` object."""

    @abstractmethod
    def execute(self, http: Http) -> HttpResponse:
        """Send the request described by *http*.

        Implementations must not raise for network failures; they return
        an :class:`HttpResponse` whose ``response_status`` is ``ERROR`` or
        ``TIMED_OUT`` instead.
        """
        ...

    def close(self) -> None:
        """Release any resources held by the transport."""


class AsyncTransport(ABC):
    """Non-blocking transport: executes an :class:`Http` object."""

    @abstractmethod
    async def execute(self, http: Http) -> HttpResponse:
        """Send the request described by *http*; same contract as :meth:`Transport.execute`."""
        ...

    async def aclose(self) -> None:
        """Release any resources held by the transport."""
