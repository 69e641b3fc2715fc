"""Request command -- build, sign and send a single request.

``simplerest request METHOD RESOURCE`` resolves the active profile, builds
a :class:`~simplerest.models.RestRequest` from the repeatable
``name=value`` options, and executes it with a
:class:`~simplerest.client.sync_client.RestClient` carrying the profile's
authenticator.

Example::

    simplerest -p twitter request POST 1.1/statuses/update.json -d status=hello
    simplerest request GET users/{id} -s id=42 --query fields=name --dry-run
"""

from __future__ import annotations

from typing import Optional

import typer

from simplerest.auth import create_default_manager
from simplerest.cache import CachingTransport
from simplerest.client.builder import url_encode
from simplerest.client.sync_client import RestClient
from simplerest.config import client_config_from_profile, get_cache_dir, resolve_config
from simplerest.exceptions import InvalidUsageError, SimpleRestError
from simplerest.exit_codes import EXIT_CONNECTION_ERROR
from simplerest.models import (
    ClientConfig,
    GlobalConfig,
    Method,
    ParameterType,
    ResponseStatus,
    RestRequest,
)
from simplerest.output import debug, error, get_output
from simplerest.transport.base import Transport
from simplerest.transport.sync_transport import HttpxTransport


def _parse_pair(raw: str, option: str) -> tuple[str, str]:
    """Split ``name=value``; the value may itself contain ``=``."""
    name, sep, value = raw.partition("=")
    if not sep or not name:
        raise InvalidUsageError(f"Expected name=value for {option}, got: {raw!r}")
    return name, value


def _build_transport(
    global_cfg: GlobalConfig, config: ClientConfig, use_cache: bool
) -> Transport:
    transport: Transport = HttpxTransport(
        verify_ssl=config.verify_ssl, max_redirects=config.max_redirects
    )
    if use_cache and global_cfg.cache.enabled:
        transport = CachingTransport(transport, get_cache_dir(), global_cfg.cache)
    return transport


def build_request(
    method: Method,
    resource: str,
    params: Optional[list[str]],
    query: Optional[list[str]],
    headers: Optional[list[str]],
    cookies: Optional[list[str]],
    segments: Optional[list[str]],
    body: Optional[str],
    content_type: str,
    timeout: float,
) -> RestRequest:
    """Translate CLI options into a :class:`RestRequest`.

    ``--query`` pairs are appended to the resource itself so they stay in
    the URL for every method.

    Raises:
        InvalidUsageError: If an option is not in ``name=value`` form.
    """
    if query:
        encoded = "&".join(
            f"{url_encode(n)}={url_encode(v)}"
            for n, v in (_parse_pair(q, "--query") for q in query)
        )
        resource = f"{resource}{'&' if '?' in resource else '?'}{encoded}"

    request = RestRequest(resource=resource, method=method, timeout=timeout)
    for raw in params or []:
        request.add_parameter(*_parse_pair(raw, "--param"), ParameterType.GET_OR_POST)
    for raw in headers or []:
        name, value = _parse_pair(raw, "--header")
        request.add_header(name, value)
    for raw in cookies or []:
        name, value = _parse_pair(raw, "--cookie")
        request.add_cookie(name, value)
    for raw in segments or []:
        name, value = _parse_pair(raw, "--segment")
        request.add_url_segment(name, value)
    if body is not None:
        request.add_body(body, content_type)
    return request


def request_command(
    ctx: typer.Context,
    method: Method = typer.Argument(..., case_sensitive=False, help="HTTP method."),
    resource: str = typer.Argument(
        ..., help="Resource path relative to the base URL, e.g. 'users/{id}'."
    ),
    params: Optional[list[str]] = typer.Option(
        None, "--param", "-d", help="Query or form field as name=value (repeatable)."
    ),
    query: Optional[list[str]] = typer.Option(
        None, "--query", help="Query-string field kept in the URL for any method."
    ),
    headers: Optional[list[str]] = typer.Option(
        None, "--header", "-H", help="Request header as name=value (repeatable)."
    ),
    cookies: Optional[list[str]] = typer.Option(
        None, "--cookie", "-c", help="Cookie as name=value (repeatable)."
    ),
    segments: Optional[list[str]] = typer.Option(
        None, "--segment", "-s", help="URL segment substituted into {name}."
    ),
    body: Optional[str] = typer.Option(None, "--body", help="Raw request body."),
    content_type: str = typer.Option(
        "application/json", "--content-type", help="Content type of --body."
    ),
    timeout: float = typer.Option(
        0, "--timeout", help="Timeout in seconds; 0 uses the profile value."
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-n", help="Print the signed request without sending it."
    ),
    fail: bool = typer.Option(
        False, "--fail", help="Exit non-zero on HTTP 4xx/5xx answers."
    ),
    no_cache: bool = typer.Option(False, "--no-cache", help="Bypass the response cache."),
) -> None:
    """Send one request using the active profile."""
    obj = ctx.obj or {}
    output = get_output()

    try:
        global_cfg, profile = resolve_config(obj.get("profile"), obj.get("base_url"))
        config = client_config_from_profile(profile)
        authenticator = create_default_manager().create_for_profile(profile)
        request = build_request(
            method, resource, params, query, headers, cookies, segments,
            body, content_type, timeout,
        )

        transport = _build_transport(global_cfg, config, use_cache=not (no_cache or dry_run))
        try:
            client = RestClient(config=config, authenticator=authenticator, transport=transport)
            if dry_run:
                output.format_http(client.prepare(request))
                return
            debug(f"Profile: {profile.name if profile else '(none)'}")
            response = client.execute(request)
        finally:
            transport.close()

        output.format_rest_response(response)
        if response.response_status != ResponseStatus.COMPLETED:
            raise typer.Exit(code=EXIT_CONNECTION_ERROR)
        if fail:
            response.raise_for_status()
    except SimpleRestError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
