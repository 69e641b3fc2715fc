"""Non-blocking transport backed by :class:`httpx.AsyncClient`.

Mirrors :class:`~simplerest.transport.sync_transport.HttpxTransport`; see
there for the constructor arguments.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from simplerest.transport.base import AsyncTransport, Http, HttpResponse
from simplerest.transport.conversion import (
    build_request_kwargs,
    convert_error,
    convert_response,
)

logger = logging.getLogger(__name__)


class AsyncHttpxTransport(AsyncTransport):
    """Execute :class:`~simplerest.transport.base.Http` objects with ``httpx.AsyncClient``."""

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        verify_ssl: bool = True,
        max_redirects: Optional[int] = None,
    ) -> None:
        self._owns_client = client is None
        if client is None:
            client_kwargs: dict[str, Any] = {"verify": verify_ssl}
            if max_redirects is not None:
                client_kwargs["max_redirects"] = max_redirects
            client = httpx.AsyncClient(**client_kwargs)
        self._client = client

    async def execute(self, http: Http) -> HttpResponse:
        kwargs = build_request_kwargs(http)
        try:
            response = await self._client.request(**kwargs)
        except httpx.RequestError as exc:
            logger.debug("Transport failure for %s %s: %s", http.method, http.url, exc)
            return convert_error(exc)
        return convert_response(response)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
