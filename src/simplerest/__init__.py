"""simplerest -- declarative REST client with OAuth 1.0a request signing.

Callers describe a request as a resource path plus parameters tagged by
role (URL segment, query/form field, header, cookie, raw body).  The
client merges in its default parameters, runs the configured
authenticator, resolves the final URL, populates a transport object and
maps the transport's answer into a :class:`~simplerest.models.RestResponse`.

Typical usage::

    from simplerest import RestClient, RestRequest
    from simplerest.auth import OAuth1Authenticator

    auth = OAuth1Authenticator.for_protected_resource(
        "consumer-key", "consumer-secret", "token", "token-secret"
    )
    with RestClient(base_url="https://api.example.com", authenticator=auth) as client:
        request = RestRequest(resource="users/{id}").add_url_segment("id", 42)
        response = client.execute(request)

Modules:
    models: Pydantic models for requests, parameters, responses and config.
    client: Parameter merging, URL building, request configuration,
        response mapping, and the sync/async clients.
    auth: Authenticator contract and the OAuth 1.0a signer.
    transport: Abstract transport object and the httpx-backed transports.
    cache: Disk-backed caching transport.
    config: XDG-aware profile and credential configuration.
    app: Typer CLI entry point.
"""

__version__ = "0.3.0"

from simplerest.client import AsyncRestClient, RestClient  # noqa: E402
from simplerest.models import (  # noqa: E402
    ClientConfig,
    Method,
    Parameter,
    ParameterType,
    ResponseStatus,
    RestRequest,
    RestResponse,
)

__all__ = [
    "AsyncRestClient",
    "ClientConfig",
    "Method",
    "Parameter",
    "ParameterType",
    "ResponseStatus",
    "RestClient",
    "RestRequest",
    "RestResponse",
    "__version__",
]
