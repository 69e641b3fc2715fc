"""Asynchronous REST client.

Provides :class:`AsyncRestClient`, the non-blocking counterpart of
:class:`~simplerest.client.sync_client.RestClient`.  Request preparation
(copy, merge, authenticate, configure) is identical; only the transport
call is awaited.

Example::

    async with AsyncRestClient(base_url="https://api.example.com") as client:
        response = await client.execute(RestRequest(resource="users"))
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from simplerest.auth.base import Authenticator
from simplerest.client.builder import build_uri
from simplerest.client.mapper import convert_to_rest_response
from simplerest.client.pipeline import prepare_http, working_copy
from simplerest.models import ClientConfig, Method, ResponseStatus, RestRequest, RestResponse
from simplerest.transport.async_transport import AsyncHttpxTransport
from simplerest.transport.base import AsyncTransport, Http, HttpResponse

logger = logging.getLogger(__name__)


class AsyncRestClient:
    """Non-blocking client; same arguments as :class:`~simplerest.client.sync_client.RestClient`.

    Independent calls may run concurrently on one instance: each works on
    its own copy of the request and its own :class:`Http` object.
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        authenticator: Optional[Authenticator] = None,
        transport: Optional[AsyncTransport] = None,
        base_url: Optional[str] = None,
    ) -> None:
        self.config = config.model_copy(deep=True) if config is not None else ClientConfig()
        if base_url is not None:
            self.config.base_url = base_url
        self.authenticator = authenticator
        self._owns_transport = transport is None
        if transport is None:
            transport = AsyncHttpxTransport(
                verify_ssl=self.config.verify_ssl,
                max_redirects=self.config.max_redirects,
            )
        self.transport = transport

    async def __aenter__(self) -> AsyncRestClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_transport:
            await self.transport.aclose()

    def build_uri(self, request: RestRequest, *, include_query: Optional[bool] = None) -> str:
        return build_uri(self.config, request, include_query=include_query)

    def prepare(
        self,
        request: RestRequest,
        http_method: Optional[Union[Method, str]] = None,
        *,
        body_style: Optional[bool] = None,
    ) -> Http:
        working = working_copy(self.config, request, http_method)
        if self.authenticator is not None:
            self.authenticator.authenticate(self, working)
        return prepare_http(self.config, working, body_style=body_style)

    async def execute(self, request: RestRequest) -> RestResponse:
        return await self._execute(request, None, None)

    async def execute_as_get(
        self, request: RestRequest, http_method: Union[Method, str]
    ) -> RestResponse:
        return await self._execute(request, http_method, False)

    async def execute_as_post(
        self, request: RestRequest, http_method: Union[Method, str]
    ) -> RestResponse:
        return await self._execute(request, http_method, True)

    async def _execute(
        self,
        request: RestRequest,
        http_method: Optional[Union[Method, str]],
        body_style: Optional[bool],
    ) -> RestResponse:
        http = self.prepare(request, http_method, body_style=body_style)
        logger.debug("Dispatching %s %s", http.method, http.url)
        try:
            http_response = await self.transport.execute(http)
        except Exception as exc:
            logger.warning("Transport raised for %s %s: %s", http.method, http.url, exc)
            http_response = HttpResponse.from_error(exc, ResponseStatus.ERROR)
        return convert_to_rest_response(request, http_response)
