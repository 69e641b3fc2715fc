"""Parameter merging and URL assembly.

Both operations are pure functions over a :class:`~simplerest.models.ClientConfig`
and a :class:`~simplerest.models.RestRequest`; neither mutates its inputs.

- :func:`merge_parameters` folds client defaults into a request's
  parameters (the request wins on a ``(name, type)`` conflict).
- :func:`build_uri` substitutes URL segments, joins the base URL and the
  resource, and appends a query string for methods that do not carry a
  body.
"""

from __future__ import annotations

from typing import Iterable, Optional
from urllib.parse import quote

import httpx

from simplerest.exceptions import InvalidUrlError
from simplerest.models import ClientConfig, Method, Parameter, ParameterType, RestRequest


def url_encode(value: str) -> str:
    """Percent-encode *value* for a URL segment or query component (UTF-8, space as ``%20``)."""
    return quote(value, safe="")


def merge_parameters(
    defaults: Iterable[Parameter],
    parameters: Iterable[Parameter],
) -> list[Parameter]:
    """Return *parameters* followed by every default the request does not override.

    A default is skipped when the request already has a parameter with the
    same ``(name, type)``.  Defaults keep their original order.  Merging an
    already merged list again returns an equal list.
    """
    merged = list(parameters)
    present = {p.key for p in merged}
    for default in defaults:
        if default.key in present:
            continue
        merged.append(default)
        present.add(default.key)
    return merged


def encode_parameters(parameters: Iterable[Parameter]) -> str:
    """Encode ``GET_OR_POST`` parameters as ``name=value`` pairs joined by ``&``.

    Parameters whose value is ``None`` are left out, matching the form body
    written by the request configurator.
    """
    return "&".join(
        f"{url_encode(p.name)}={url_encode(p.value_as_str())}"
        for p in parameters
        if p.type == ParameterType.GET_OR_POST and p.value is not None
    )


def _substitute_segments(resource: str, parameters: Iterable[Parameter]) -> str:
    assembled = resource
    for p in parameters:
        if p.type == ParameterType.URL_SEGMENT:
            assembled = assembled.replace("{" + p.name + "}", url_encode(p.value_as_str()))
        elif p.type in (
            ParameterType.GET_OR_POST,
            ParameterType.HTTP_HEADER,
            ParameterType.COOKIE,
            ParameterType.REQUEST_BODY,
        ):
            continue
        else:  # pragma: no cover
            raise AssertionError(f"Unhandled parameter type: {p.type}")
    return assembled


def validate_url(assembled: str) -> str:
    """Check that *assembled* parses as an absolute URL and return it.

    Raises:
        InvalidUrlError: If httpx rejects the string or it lacks a scheme or host.
    """
    try:
        url = httpx.URL(assembled)
    except httpx.InvalidURL as exc:
        raise InvalidUrlError(f"Invalid request URL '{assembled}': {exc}") from exc
    if not url.scheme or not url.host:
        raise InvalidUrlError(
            f"Invalid request URL '{assembled}': an absolute URL with scheme and host "
            "is required (set base_url or use an absolute resource)"
        )
    return assembled


def build_uri(
    config: ClientConfig,
    request: RestRequest,
    *,
    method: Optional[Method] = None,
    include_query: Optional[bool] = None,
) -> str:
    """Assemble the final request URL.

    Args:
        config: Client configuration supplying ``base_url``.
        request: The request whose resource and parameters are used.
        method: Method deciding query-string placement; defaults to
            ``request.method``.
        include_query: Force (``True``) or suppress (``False``) the query
            string built from ``GET_OR_POST`` parameters regardless of the
            method.

    Returns:
        The absolute URL as a string.

    Raises:
        InvalidUrlError: If the result is not an absolute URL.
    """
    assembled = _substitute_segments(request.resource or "", request.parameters)

    if assembled.startswith("/"):
        assembled = assembled[1:]

    if config.base_url:
        if not assembled:
            assembled = config.base_url
        else:
            assembled = f"{config.base_url}/{assembled}"

    effective = method or request.method
    if include_query is None:
        include_query = not effective.carries_body

    if include_query and request.parameters_of(ParameterType.GET_OR_POST):
        if assembled.endswith("/"):
            assembled = assembled[:-1]
        data = encode_parameters(request.parameters)
        if data:
            separator = "&" if "?" in assembled else "?"
            assembled = f"{assembled}{separator}{data}"

    return validate_url(assembled)
