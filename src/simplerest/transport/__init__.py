"""Transport layer for simplerest.

The request pipeline fills an :class:`Http` object and hands it to a
:class:`Transport` (blocking) or :class:`AsyncTransport` (non-blocking).
The httpx-backed implementations are the defaults used by the clients;
any object honouring the same contract can be injected instead.
"""

from simplerest.transport.async_transport import AsyncHttpxTransport
from simplerest.transport.base import (
    AsyncTransport,
    Http,
    HttpCookie,
    HttpHeader,
    HttpParameter,
    HttpResponse,
    Transport,
)
from simplerest.transport.sync_transport import HttpxTransport

__all__ = [
    "AsyncHttpxTransport",
    "AsyncTransport",
    "Http",
    "HttpCookie",
    "HttpHeader",
    "HttpParameter",
    "HttpResponse",
    "HttpxTransport",
    "Transport",
]
