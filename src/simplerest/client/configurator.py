"""Copy a resolved request onto the abstract transport object."""

from __future__ import annotations

from typing import Optional

from simplerest.client.builder import build_uri
from simplerest.exceptions import InvalidUsageError
from simplerest.models import ClientConfig, Method, ParameterType, RestRequest
from simplerest.transport.base import Http, HttpCookie, HttpHeader, HttpParameter


def default_user_agent() -> str:
    from simplerest import __version__

    return f"simplerest/{__version__}"


def configure_http(
    config: ClientConfig,
    request: RestRequest,
    http: Http,
    *,
    body_style: Optional[bool] = None,
) -> Http:
    """Populate *http* from *request* (already merged and authenticated).

    The client-level user agent wins over one already present on *http*;
    without either, :func:`default_user_agent` is used.  The request
    timeout wins when positive, otherwise the client timeout when positive.

    Args:
        config: Client configuration.
        request: The effective request.
        http: Transport object to fill; ``http.method`` is sent as-is.
        body_style: Whether ``GET_OR_POST`` parameters travel in the body.
            Defaults to whether ``request.method`` carries a body.  A
            ``REQUEST_BODY`` leaves no room for form fields, so with one
            present they are moved to the query string instead.

    Returns:
        The same *http* instance.

    Raises:
        InvalidUrlError: If the assembled URL is malformed.
        InvalidUsageError: If the request carries more than one
            ``REQUEST_BODY`` parameter.
    """
    if body_style is None:
        body_style = request.method.carries_body
    url_method = Method.POST if body_style else Method.GET
    raw_body = bool(request.parameters_of(ParameterType.REQUEST_BODY))
    include_query = True if body_style and raw_body else None

    http.url = build_uri(config, request, method=url_method, include_query=include_query)
    http.body_style = body_style
    http.user_agent = config.user_agent or http.user_agent or default_user_agent()

    timeout = request.timeout if request.timeout > 0 else config.timeout
    if timeout > 0:
        http.timeout = timeout

    http.follow_redirects = config.follow_redirects
    http.max_redirects = config.max_redirects

    bodies = []
    for p in request.parameters:
        if p.type == ParameterType.HTTP_HEADER:
            http.headers.append(HttpHeader(name=p.name, value=p.value_as_str()))
        elif p.type == ParameterType.COOKIE:
            http.cookies.append(HttpCookie(name=p.name, value=p.value_as_str()))
        elif p.type == ParameterType.GET_OR_POST:
            if p.value is not None:
                http.parameters.append(HttpParameter(name=p.name, value=p.value_as_str()))
        elif p.type == ParameterType.REQUEST_BODY:
            bodies.append(p)
        elif p.type == ParameterType.URL_SEGMENT:
            continue
        else:  # pragma: no cover
            raise AssertionError(f"Unhandled parameter type: {p.type}")

    if len(bodies) > 1:
        raise InvalidUsageError(
            f"Request '{request.resource}' has {len(bodies)} request body parameters; "
            "at most one is allowed"
        )
    if bodies:
        http.request_body = bodies[0].value_as_str()
        http.request_content_type = bodies[0].name

    return http
