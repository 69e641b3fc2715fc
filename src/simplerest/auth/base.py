"""Authenticator contract.

An authenticator is a pluggable unit the client invokes on its private
copy of each request, after client defaults have been merged and before
the URL is built.  It may add or replace parameters and headers.

To implement a new strategy, subclass :class:`Authenticator` and
implement :meth:`~Authenticator.authenticate`.

See Also:
    :mod:`simplerest.auth.oauth` for OAuth 1.0a request signing.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Protocol

from simplerest.models import ClientConfig, ParameterType, RestRequest


class UriBuildingClient(Protocol):
    """The part of a client an authenticator may use."""

    config: ClientConfig

    def build_uri(self, request: RestRequest, *, include_query: Optional[bool] = None) -> str:
        ...


class Authenticator(ABC):
    """Abstract base class for request authenticators."""

    @abstractmethod
    def authenticate(self, client: UriBuildingClient, request: RestRequest) -> None:
        """Add credentials to *request* in place.

        Args:
            client: The executing client; exposes ``config`` and
                ``build_uri``.
            request: The client's working copy of the request.

        Raises:
            AuthError: If required credentials are missing.
        """
        ...


def has_header(request: RestRequest, name: str) -> bool:
    lowered = name.lower()
    return any(
        p.type == ParameterType.HTTP_HEADER and p.name.lower() == lowered
        for p in request.parameters
    )


def replace_header(request: RestRequest, name: str, value: str) -> None:
    """Set header *name* on *request*, dropping any earlier header of that name."""
    lowered = name.lower()
    request.parameters = [
        p
        for p in request.parameters
        if not (p.type == ParameterType.HTTP_HEADER and p.name.lower() == lowered)
    ]
    request.add_header(name, value)
