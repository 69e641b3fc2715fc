"""Exception hierarchy for simplerest.

All exceptions inherit from :class:`SimpleRestError`, which carries an
``exit_code`` attribute mapped to a constant from
:mod:`simplerest.exit_codes`.  Library callers can catch
``SimpleRestError``; the CLI entry point in :func:`simplerest.app.main`
turns it into the matching process exit code.

Transport failures are *not* raised by the clients: they are returned as
data on :class:`~simplerest.models.RestResponse` (``response_status``,
``error_message``).  :meth:`~simplerest.models.RestResponse.raise_for_status`
converts them into :class:`ConnectionError_` on request.

Subclass hierarchy::

    SimpleRestError (exit 1)
    +-- InvalidUsageError   (exit 2)
    |   +-- InvalidUrlError (exit 2)
    +-- AuthError           (exit 3)
    +-- NotFoundError       (exit 4)
    +-- ServerError         (exit 5)
    +-- ConnectionError_    (exit 6)
    +-- ConfigError         (exit 1)
"""

from simplerest.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SERVER_ERROR,
)


class SimpleRestError(Exception):
    """Base exception for all simplerest errors.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SimpleRestError):
    """Raised for inconsistent requests, e.g. two raw body parameters."""

    exit_code = EXIT_INVALID_USAGE


class InvalidUrlError(InvalidUsageError):
    """Raised when the assembled request URL cannot be parsed as an absolute URL."""


class AuthError(SimpleRestError):
    """Raised when signing is impossible (missing credential) or the API rejects credentials."""

    exit_code = EXIT_AUTH_FAILURE


class NotFoundError(SimpleRestError):
    """Raised by ``raise_for_status`` when the API returns HTTP 404."""

    exit_code = EXIT_NOT_FOUND


class ServerError(SimpleRestError):
    """Raised by ``raise_for_status`` for other 4xx and all 5xx responses."""

    exit_code = EXIT_SERVER_ERROR


class ConnectionError_(SimpleRestError):
    """Raised by ``raise_for_status`` when the transport failed (timeout, DNS, refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class ConfigError(SimpleRestError):
    """Raised for configuration problems (missing profiles, invalid JSON, bad credential sources)."""

    exit_code = EXIT_GENERIC_FAILURE
