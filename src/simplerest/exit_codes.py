"""Numeric process exit codes used by the ``simplerest`` CLI.

Each constant maps to an error category and is referenced by the
corresponding :class:`~simplerest.exceptions.SimpleRestError` subclass, so
shell scripts can branch on the failure class without parsing stderr.

Example::

    $ simplerest request GET users/42 --fail
    $ echo $?
    4   # EXIT_NOT_FOUND -- the API answered 404
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""Invalid arguments, a malformed URL, or an inconsistent request."""

EXIT_AUTH_FAILURE = 3
"""Signing failed (missing credential) or the API answered 401/403."""

EXIT_NOT_FOUND = 4
"""The API answered HTTP 404."""

EXIT_SERVER_ERROR = 5
"""The API answered another 4xx or a 5xx status."""

EXIT_CONNECTION_ERROR = 6
"""The transport failed (timeout, DNS failure, connection refused)."""
