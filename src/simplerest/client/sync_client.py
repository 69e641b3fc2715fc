"""Synchronous REST client.

This module provides :class:`RestClient`, the blocking entry point of the
library.  For every call it:

- **Copies** the caller's request, so the original is never modified.
- **Merges** the client's default parameters into the copy.
- **Authenticates** the copy with the configured
  :class:`~simplerest.auth.base.Authenticator`.
- **Configures** a fresh :class:`~simplerest.transport.base.Http` object.
- **Dispatches** it through the injected
  :class:`~simplerest.transport.base.Transport` and maps the answer to a
  :class:`~simplerest.models.RestResponse`.

Network failures never raise; they come back as a response whose
``response_status`` is ``ERROR`` or ``TIMED_OUT``.

See Also:
    :class:`~simplerest.client.async_client.AsyncRestClient` for the
    equivalent non-blocking implementation.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from simplerest.auth.base import Authenticator
from simplerest.client.builder import build_uri
from simplerest.client.mapper import convert_to_rest_response
from simplerest.client.pipeline import prepare_http, working_copy
from simplerest.models import ClientConfig, Method, ResponseStatus, RestRequest, RestResponse
from simplerest.transport.base import Http, HttpResponse, Transport
from simplerest.transport.sync_transport import HttpxTransport

logger = logging.getLogger(__name__)


class RestClient:
    """Blocking client that executes :class:`~simplerest.models.RestRequest` objects.

    Args:
        config: Client-wide settings.  A default :class:`ClientConfig` is
            used when omitted.
        authenticator: Optional authenticator applied to every request.
        transport: Transport to send through.  When omitted an
            :class:`~simplerest.transport.sync_transport.HttpxTransport` is
            created from ``config`` and closed with the client.
        base_url: Shortcut overriding ``config.base_url``.

    Example::

        with RestClient(base_url="https://api.example.com") as client:
            request = RestRequest(resource="users/{id}").add_url_segment("id", 42)
            response = client.execute(request)
            print(response.status_code, response.content)
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        authenticator: Optional[Authenticator] = None,
        transport: Optional[Transport] = None,
        base_url: Optional[str] = None,
    ) -> None:
        self.config = config.model_copy(deep=True) if config is not None else ClientConfig()
        if base_url is not None:
            self.config.base_url = base_url
        self.authenticator = authenticator
        self._owns_transport = transport is None
        if transport is None:
            transport = HttpxTransport(
                verify_ssl=self.config.verify_ssl,
                max_redirects=self.config.max_redirects,
            )
        self.transport = transport

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> RestClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the transport if this client created it."""
        if self._owns_transport:
            self.transport.close()

    # ------------------------------------------------------------------ #
    # Public operations
    # ------------------------------------------------------------------ #

    def build_uri(self, request: RestRequest, *, include_query: Optional[bool] = None) -> str:
        """Return the absolute URL *request* would be sent to.

        Raises:
            InvalidUrlError: If the assembled URL is malformed.
        """
        return build_uri(self.config, request, include_query=include_query)

    def prepare(
        self,
        request: RestRequest,
        http_method: Optional[Union[Method, str]] = None,
        *,
        body_style: Optional[bool] = None,
    ) -> Http:
        """Return the fully configured :class:`Http` object without sending it.

        Defaults are merged and the authenticator runs on a copy of
        *request*, exactly as :meth:`execute` does.

        Raises:
            AuthError: If the authenticator is missing credentials.
            InvalidUrlError: If the assembled URL is malformed.
            InvalidUsageError: If the request has more than one body or
                *http_method* is not a known verb.
        """
        working = working_copy(self.config, request, http_method)
        if self.authenticator is not None:
            self.authenticator.authenticate(self, working)
        return prepare_http(self.config, working, body_style=body_style)

    def execute(self, request: RestRequest) -> RestResponse:
        """Send *request* using its own method.

        Returns:
            The mapped :class:`RestResponse`; HTTP error statuses and
            network failures are reported on it rather than raised.
        """
        return self._execute(request, None, None)

    def execute_as_get(self, request: RestRequest, http_method: Union[Method, str]) -> RestResponse:
        """Send *request* with parameters in the query string but *http_method* on the wire."""
        return self._execute(request, http_method, False)

    def execute_as_post(self, request: RestRequest, http_method: Union[Method, str]) -> RestResponse:
        """Send *request* with parameters in a form body but *http_method* on the wire."""
        return self._execute(request, http_method, True)

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _execute(
        self,
        request: RestRequest,
        http_method: Optional[Union[Method, str]],
        body_style: Optional[bool],
    ) -> RestResponse:
        http = self.prepare(request, http_method, body_style=body_style)
        logger.debug("Dispatching %s %s", http.method, http.url)
        try:
            http_response = self.transport.execute(http)
        except Exception as exc:
            logger.warning("Transport raised for %s %s: %s", http.method, http.url, exc)
            http_response = HttpResponse.from_error(exc, ResponseStatus.ERROR)
        return convert_to_rest_response(request, http_response)
