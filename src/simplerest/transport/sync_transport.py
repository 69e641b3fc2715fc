"""Blocking transport backed by :class:`httpx.Client`."""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from simplerest.transport.base import Http, HttpResponse, Transport
from simplerest.transport.conversion import (
    build_request_kwargs,
    convert_error,
    convert_response,
)

logger = logging.getLogger(__name__)


class HttpxTransport(Transport):
    """Execute :class:`~simplerest.transport.base.Http` objects with httpx.

    Args:
        client: An existing :class:`httpx.Client` to send through (tests pass
            one built on :class:`httpx.MockTransport`).  When omitted a client
            is created and closed by :meth:`close`.
        verify_ssl: Verify TLS certificates of a client created here.
        max_redirects: Redirect limit of a client created here.

    Example::

        transport = HttpxTransport()
        response = transport.execute(Http(url="https://api.example.com/users"))
        transport.close()
    """

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        verify_ssl: bool = True,
        max_redirects: Optional[int] = None,
    ) -> None:
        self._owns_client = client is None
        if client is None:
            client_kwargs: dict[str, Any] = {"verify": verify_ssl}
            if max_redirects is not None:
                client_kwargs["max_redirects"] = max_redirects
            client = httpx.Client(**client_kwargs)
        self._client = client

    def execute(self, http: Http) -> HttpResponse:
        kwargs = build_request_kwargs(http)
        try:
            response = self._client.request(**kwargs)
        except httpx.RequestError as exc:
            logger.debug("Transport failure for %s %s: %s", http.method, http.url, exc)
            return convert_error(exc)
        return convert_response(response)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()
