"""CLI output with strict stdout/stderr separation.

* **stdout** -- response bodies and listings only, so they can be piped.
* **stderr** -- status lines, warnings, errors and debug messages.
* **TTY detection** -- Rich formatting when stdout is an interactive
  terminal, plain text otherwise.
* **Colour control** -- respects ``NO_COLOR``, ``TERM=dumb`` and the
  ``--no-color`` flag.

:class:`OutputManager` holds the format preferences; it is created once in
:func:`~simplerest.app.main_callback` and installed with :func:`set_output`.
The module-level helpers (:func:`info`, :func:`error`, ...) delegate to the
installed instance.

Library modules never import this one; they log through :mod:`logging`.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from simplerest.models import ResponseStatus, RestResponse
from simplerest.transport.base import Http


class OutputFormat(str, Enum):
    """Supported output formats.

    ``AUTO`` resolves to ``RICH`` on an interactive TTY with colour enabled,
    ``PLAIN`` otherwise.
    """

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Route CLI output to stdout (data) or stderr (diagnostics).

    Args:
        format: Desired output format; ``AUTO`` resolves by TTY detection.
        no_color: Disable colour and Rich markup.
        quiet: Suppress informational messages on stderr.
        verbose: Show debug messages on stderr.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        if format == OutputFormat.AUTO:
            self._format = (
                OutputFormat.RICH if _is_tty() and not self._no_color else OutputFormat.PLAIN
            )
        else:
            self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(self._format == OutputFormat.RICH),
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def is_quiet(self) -> bool:
        return self._quiet

    @property
    def is_verbose(self) -> bool:
        return self._verbose

    # ------------------------------------------------------------------ #
    # Data output (stdout)
    # ------------------------------------------------------------------ #

    def format_response(self, data: Any) -> None:
        """Render *data* (dict, list or string) to stdout in the active format."""
        if self._format == OutputFormat.JSON:
            self.print_data(_to_json(data))
        elif self._format == OutputFormat.PLAIN:
            self._print_plain(data)
        else:
            self._print_rich(data)

    def format_rest_response(self, response: RestResponse) -> None:
        """Print a :class:`RestResponse`: status line to stderr, body to stdout.

        In JSON mode the whole response (status, headers, cookies, body) is
        printed as one object.
        """
        if response.response_status != ResponseStatus.COMPLETED:
            self.error(
                f"Request {response.response_status.value}: {response.error_message or 'no response'}"
            )
            return

        cache_note = ""
        if response.from_cache:
            cache_note = " (cache, revalidated)" if response.cache_expired else " (cache)"
        self.info(f"HTTP {response.status_code} {response.status_description}{cache_note}")

        if self._format == OutputFormat.JSON:
            self.print_data(_to_json(_response_summary(response)))
            return
        if response.content:
            self.format_response(response.content)

    def format_http(self, http: Http) -> None:
        """Print a configured request without sending it (``--dry-run``)."""
        if self._format == OutputFormat.JSON:
            self.print_data(_to_json(_http_summary(http)))
            return
        self.print_data(f"{http.method} {http.url}")
        for h in http.headers:
            self.print_data(f"{h.name}: {h.value}")
        if http.user_agent:
            self.print_data(f"User-Agent: {http.user_agent}")
        if http.cookies:
            self.print_data("Cookie: " + "; ".join(f"{c.name}={c.value}" for c in http.cookies))
        if http.request_body is not None:
            self.print_data(f"Content-Type: {http.request_content_type}")
            self.print_data("")
            self.print_data(http.request_body)
        elif http.sends_form():
            self.print_data("")
            self.print_data("&".join(f"{p.name}={p.value}" for p in http.parameters))

    def print_data(self, text: str) -> None:
        print(text, file=sys.stdout, flush=True)

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Print rows as a Rich table, a JSON array of objects, or TSV."""
        if self._format == OutputFormat.JSON:
            self.print_data(_to_json([dict(zip(headers, row)) for row in rows]))
        elif self._format == OutputFormat.PLAIN:
            self.print_data("\t".join(headers))
            for row in rows:
                self.print_data("\t".join(row))
        else:
            table = Table(title=title, show_header=True, header_style="bold cyan")
            for h in headers:
                table.add_column(h)
            for row in rows:
                table.add_row(*row)
            self._stdout.print(table)

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        """Informational message; suppressed by ``--quiet``."""
        if self._quiet:
            return
        if self._no_color:
            print(message, file=sys.stderr, flush=True)
        else:
            self._stderr.print(message)

    def success(self, message: str) -> None:
        if self._quiet:
            return
        if self._no_color:
            print(message, file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[green]{message}[/green]")

    def warning(self, message: str) -> None:
        """Warning; never suppressed."""
        if self._no_color:
            print(f"Warning: {message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[yellow]Warning:[/yellow] {message}")

    def error(self, message: str) -> None:
        """Error; never suppressed."""
        if self._no_color:
            print(f"Error: {message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[bold red]Error:[/bold red] {message}")

    def debug(self, message: str) -> None:
        """Debug message; only shown with ``--verbose``."""
        if not self._verbose:
            return
        if self._no_color:
            print(f"[debug] {message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[dim][debug] {message}[/dim]")

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _print_plain(self, data: Any) -> None:
        if isinstance(data, dict):
            for key, value in data.items():
                self.print_data(f"{key}\t{value}")
        elif isinstance(data, list):
            for item in data:
                if isinstance(item, dict):
                    self.print_data("\t".join(str(v) for v in item.values()))
                else:
                    self.print_data(str(item))
        else:
            self.print_data(str(data))

    def _print_rich(self, data: Any) -> None:
        parsed = _maybe_json(data)
        if isinstance(parsed, (dict, list)):
            syntax = Syntax(_to_json(parsed), "json", theme="monokai", word_wrap=True)
            self._stdout.print(syntax)
        else:
            self._stdout.print(str(data), markup=False)


def _maybe_json(data: Any) -> Any:
    if isinstance(data, str):
        try:
            return json.loads(data)
        except (json.JSONDecodeError, TypeError):
            return data
    return data


def _to_json(data: Any) -> str:
    return json.dumps(_maybe_json(data), indent=2, ensure_ascii=False, default=str)


def _response_summary(response: RestResponse) -> dict[str, Any]:
    return {
        "status_code": response.status_code,
        "status_description": response.status_description,
        "response_uri": response.response_uri,
        "from_cache": response.from_cache,
        "cache_expired": response.cache_expired,
        "headers": [[h.name, h.value_as_str()] for h in response.headers],
        "cookies": [c.model_dump(mode="json") for c in response.cookies],
        "body": _maybe_json(response.content),
    }


def _http_summary(http: Http) -> dict[str, Any]:
    return {
        "method": http.method,
        "url": http.url,
        "headers": [[h.name, h.value] for h in http.headers],
        "user_agent": http.user_agent,
        "cookies": [[c.name, c.value] for c in http.cookies],
        "form": [[p.name, p.value] for p in http.parameters] if http.sends_form() else [],
        "body": http.request_body,
        "content_type": http.request_content_type,
        "timeout": http.timeout,
    }


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set (any value) or ``TERM=dumb``."""
    if os.environ.get("NO_COLOR") is not None:
        return True
    return os.environ.get("TERM") == "dumb"


# ------------------------------------------------------------------ #
# Global output instance (set during app startup)
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one lazily."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Drop the installed instance; used by the test suite between tests."""
    global _output
    _output = None


def format_response(data: Any) -> None:
    get_output().format_response(data)


def print_table(headers: list[str], rows: list[list[str]], title: Optional[str] = None) -> None:
    get_output().print_table(headers, rows, title)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)
