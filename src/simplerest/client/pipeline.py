"""Request preparation steps shared by the sync and async clients."""

from __future__ import annotations

from typing import Optional, Union

from simplerest.client.builder import merge_parameters
from simplerest.client.configurator import configure_http
from simplerest.exceptions import InvalidUsageError
from simplerest.models import ClientConfig, Method, RestRequest
from simplerest.transport.base import Http


def working_copy(
    config: ClientConfig,
    request: RestRequest,
    http_method: Optional[Union[Method, str]] = None,
) -> RestRequest:
    """Return a deep copy of *request* with client defaults merged in.

    When *http_method* is given it replaces the copy's method, so an
    authenticator signs the method that is actually sent.

    Raises:
        InvalidUsageError: If *http_method* is not a supported HTTP verb.
    """
    working = request.model_copy(deep=True)
    if http_method is not None:
        verb = str(getattr(http_method, "value", http_method)).upper()
        try:
            working.method = Method(verb)
        except ValueError as exc:
            supported = ", ".join(m.value for m in Method)
            raise InvalidUsageError(
                f"Unsupported HTTP method '{verb}' (expected one of: {supported})"
            ) from exc
    working.parameters = merge_parameters(config.default_parameters, working.parameters)
    return working


def prepare_http(
    config: ClientConfig,
    working: RestRequest,
    *,
    body_style: Optional[bool] = None,
) -> Http:
    """Build a fresh :class:`Http` for an already authenticated working copy."""
    http = Http(method=working.method.value)
    return configure_http(config, working, http, body_style=body_style)
