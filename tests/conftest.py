"""Shared test fixtures for simplerest.

Provides isolated config directories, output state management, profile
fixtures and a CLI runner.  These fixtures are discovered by pytest and
available to every test module without explicit imports.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from simplerest.models import AuthConfig, Parameter, ParameterType, Profile, RequestConfig
from simplerest.output import OutputFormat, OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams and the
    test finishes, the cached references become stale.  Resetting forces a
    fresh manager on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG_CONFIG_HOME, XDG_CACHE_HOME and XDG_DATA_HOME at tmp_path.

    Clears all SIMPLEREST_* environment variables so tests never see the
    developer's real configuration.

    Returns:
        The tmp_path root directory.
    """
    monkeypatch.setattr("simplerest.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in ["SIMPLEREST_PROFILE", "SIMPLEREST_BASE_URL"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Profile fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_profile() -> Profile:
    """A profile with OAuth 1.0a protected-resource auth read from env vars."""
    return Profile(
        name="test-api",
        base_url="https://api.example.com/v1",
        auth=AuthConfig(
            type="oauth1",
            oauth_type="protected_resource",
            consumer_key_source="env:TEST_CONSUMER_KEY",
            consumer_secret_source="env:TEST_CONSUMER_SECRET",
            token_source="env:TEST_TOKEN",
            token_secret_source="env:TEST_TOKEN_SECRET",
        ),
        request=RequestConfig(timeout=5, user_agent="test-agent/1.0"),
        default_parameters=[
            Parameter(name="format", value="json", type=ParameterType.GET_OR_POST),
        ],
    )


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager for the duration of a test."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
