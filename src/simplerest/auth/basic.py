"""HTTP Basic and static-header authenticators.

:class:`HttpBasicAuthenticator` sends ``Authorization: Basic <encoded>``
per :rfc:`7617`.  :class:`StaticHeaderAuthenticator` sends a fixed header,
for API keys or pre-issued tokens.  Neither performs any token exchange.
"""

from __future__ import annotations

import base64

from simplerest.auth.base import Authenticator, UriBuildingClient, has_header, replace_header
from simplerest.exceptions import AuthError
from simplerest.models import RestRequest


class HttpBasicAuthenticator(Authenticator):
    """Authenticate via HTTP Basic authentication.

    An ``Authorization`` header already present on the request is left
    untouched.
    """

    def __init__(self, username: str, password: str) -> None:
        if not username:
            raise AuthError("Basic auth requires a username")
        self._username = username
        self._password = password

    def authenticate(self, client: UriBuildingClient, request: RestRequest) -> None:
        if has_header(request, "Authorization"):
            return
        raw = f"{self._username}:{self._password}"
        encoded = base64.b64encode(raw.encode("utf-8")).decode("ascii")
        request.add_header("Authorization", f"Basic {encoded}")


class StaticHeaderAuthenticator(Authenticator):
    """Send the same header with every request, replacing a caller-supplied one."""

    def __init__(self, name: str, value: str) -> None:
        if not name:
            raise AuthError("Static header auth requires a header name")
        self._name = name
        self._value = value

    def authenticate(self, client: UriBuildingClient, request: RestRequest) -> None:
        replace_header(request, self._name, self._value)
