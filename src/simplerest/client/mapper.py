"""Map a transport :class:`~simplerest.transport.base.HttpResponse` to a :class:`~simplerest.models.RestResponse`.

A pure field-by-field copy.  Transport failures are already data on the
``HttpResponse`` (``response_status``, ``error_message``,
``error_exception``) and pass through unchanged.
"""

from __future__ import annotations

from simplerest.models import (
    Parameter,
    ParameterType,
    RestRequest,
    RestResponse,
    RestResponseCookie,
)
from simplerest.transport.base import HttpResponse


def convert_to_rest_response(request: RestRequest, http_response: HttpResponse) -> RestResponse:
    """Build the structured response for *request* from *http_response*."""
    headers = [
        Parameter(name=h.name, value=h.value, type=ParameterType.HTTP_HEADER)
        for h in http_response.headers
    ]
    cookies = [
        RestResponseCookie(
            comment=c.comment,
            comment_uri=c.comment_uri,
            discard=c.discard,
            domain=c.domain,
            expired=c.expired,
            expires=c.expires,
            http_only=c.http_only,
            name=c.name,
            path=c.path,
            port=c.port,
            secure=c.secure,
            timestamp=c.timestamp,
            value=c.value,
            version=c.version,
        )
        for c in http_response.cookies
    ]
    return RestResponse(
        request=request,
        content=http_response.content,
        content_encoding=http_response.content_encoding,
        content_length=http_response.content_length,
        content_type=http_response.content_type,
        error_exception=http_response.error_exception,
        error_message=http_response.error_message,
        raw_bytes=http_response.raw_bytes,
        response_status=http_response.response_status,
        response_uri=http_response.response_uri,
        server=http_response.server,
        status_code=http_response.status_code,
        status_description=http_response.status_description,
        from_cache=http_response.from_cache,
        cache_expired=http_response.cache_expired,
        headers=headers,
        cookies=cookies,
    )
