"""Conversion between :class:`~simplerest.transport.base.Http` objects and httpx.

Shared by :class:`~simplerest.transport.sync_transport.HttpxTransport` and
:class:`~simplerest.transport.async_transport.AsyncHttpxTransport`:

- :func:`build_request_kwargs` turns an ``Http`` object into keyword
  arguments for ``httpx.Client.request``.
- :func:`convert_response` copies an :class:`httpx.Response` into an
  :class:`~simplerest.transport.base.HttpResponse`, including every cookie
  attribute exposed by the response's cookie jar.
"""

from __future__ import annotations

from datetime import datetime, timezone
from http.cookiejar import Cookie
from typing import Any
from urllib.parse import urlencode

import httpx

from simplerest.models import ResponseStatus
from simplerest.transport.base import Http, HttpCookie, HttpHeader, HttpResponse

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def _has_header(headers: list[tuple[str, str]], name: str) -> bool:
    lowered = name.lower()
    return any(key.lower() == lowered for key, _ in headers)


def build_request_kwargs(http: Http) -> dict[str, Any]:
    """Build ``httpx.Client.request`` keyword arguments from *http*.

    Explicit header parameters win over the computed ``User-Agent`` and
    ``Content-Type``.  Cookies are folded into a single ``Cookie`` header,
    appended to one the caller supplied.
    """
    headers: list[tuple[str, str]] = [(h.name, h.value) for h in http.headers]

    if http.user_agent and not _has_header(headers, "User-Agent"):
        headers.append(("User-Agent", http.user_agent))

    if http.cookies:
        cookie_str = "; ".join(f"{c.name}={c.value}" for c in http.cookies)
        existing = [v for k, v in headers if k.lower() == "cookie"]
        if existing:
            headers = [(k, v) for k, v in headers if k.lower() != "cookie"]
            cookie_str = f"{existing[0]}; {cookie_str}"
        headers.append(("Cookie", cookie_str))

    kwargs: dict[str, Any] = {
        "method": http.method,
        "url": http.url,
        "follow_redirects": http.follow_redirects,
    }

    if http.request_body is not None:
        kwargs["content"] = http.request_body.encode("utf-8")
        if http.request_content_type and not _has_header(headers, "Content-Type"):
            headers.append(("Content-Type", http.request_content_type))
    elif http.sends_form():
        kwargs["content"] = urlencode([(p.name, p.value) for p in http.parameters])
        if not _has_header(headers, "Content-Type"):
            headers.append(("Content-Type", FORM_CONTENT_TYPE))

    if http.timeout is not None:
        kwargs["timeout"] = http.timeout

    kwargs["headers"] = headers
    return kwargs


def _convert_cookie(cookie: Cookie, received_at: datetime) -> HttpCookie:
    expires = None
    if cookie.expires is not None:
        expires = datetime.fromtimestamp(cookie.expires, tz=timezone.utc)
    return HttpCookie(
        name=cookie.name,
        value=cookie.value or "",
        domain=cookie.domain or "",
        path=cookie.path or "",
        port=cookie.port or "",
        expires=expires,
        expired=cookie.is_expired(),
        secure=cookie.secure,
        http_only=(
            cookie.has_nonstandard_attr("HttpOnly")
            or cookie.has_nonstandard_attr("httponly")
        ),
        discard=cookie.discard,
        comment=cookie.comment or "",
        comment_uri=cookie.comment_url or "",
        version=cookie.version or 0,
        timestamp=received_at,
    )


def convert_response(response: httpx.Response) -> HttpResponse:
    """Copy an :class:`httpx.Response` into an :class:`HttpResponse`.

    The body must already be read (the default for non-streaming
    requests).
    """
    received_at = datetime.now(timezone.utc)
    raw = response.content
    headers = [
        HttpHeader(name=key.decode("latin-1"), value=value.decode("latin-1"))
        for key, value in response.headers.raw
    ]

    content_length_header = response.headers.get("content-length")
    try:
        content_length = int(content_length_header) if content_length_header else len(raw)
    except ValueError:
        content_length = len(raw)

    return HttpResponse(
        content_type=response.headers.get("content-type", ""),
        content_length=content_length,
        content_encoding=response.headers.get("content-encoding", ""),
        content=response.text,
        raw_bytes=raw,
        status_code=response.status_code,
        status_description=response.reason_phrase or "",
        response_uri=str(response.url),
        server=response.headers.get("server", ""),
        headers=headers,
        cookies=[_convert_cookie(c, received_at) for c in response.cookies.jar],
        response_status=ResponseStatus.COMPLETED,
    )


def convert_error(exc: httpx.RequestError) -> HttpResponse:
    """Map an httpx request failure to a failed :class:`HttpResponse`."""
    if isinstance(exc, httpx.TimeoutException):
        return HttpResponse.from_error(exc, ResponseStatus.TIMED_OUT)
    return HttpResponse.from_error(exc, ResponseStatus.ERROR)
