"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for simplerest:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.simplerest/`` on macOS and Windows. See :func:`get_config_dir`,
  :func:`get_cache_dir`, :func:`get_data_dir`, :func:`get_profiles_dir`.
* **Global config** -- A single :class:`~simplerest.models.GlobalConfig`
  JSON file storing defaults (active profile, output format, cache).
* **Profiles** -- One JSON file per API, each deserialised into a
  :class:`~simplerest.models.Profile`.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables and the global config into the active profile.
* **Credential resolution** -- :func:`resolve_credential` reads secrets
  from env vars, files, or interactive prompts.
* **Client config** -- :func:`client_config_from_profile` turns a profile
  into the :class:`~simplerest.models.ClientConfig` the clients consume.

All file writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`).
"""

from __future__ import annotations

import getpass
import json
import os
import platform
import sys
import tempfile
from pathlib import Path
from typing import Optional

from simplerest.exceptions import ConfigError
from simplerest.models import ClientConfig, GlobalConfig, Profile

_APP_NAME = "simplerest"
_CONFIG_FILENAME = "config.json"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True on Linux and the BSDs, where XDG base directories apply."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """``~/.simplerest``, the single root used on macOS and Windows."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from *env_var*, else ``$HOME`` plus *default_segments*."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the directory holding ``config.json`` and the profiles.

    On Linux/BSD: ``$XDG_CONFIG_HOME/simplerest/`` (default ``~/.config/simplerest/``).
    On macOS/Windows: ``~/.simplerest/``.

    Returns:
        The directory, created on first use.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_cache_dir() -> Path:
    """Return the root of the on-disk response cache.

    :class:`~simplerest.cache.CachingTransport` keeps its ``diskcache``
    store below this directory; removing it only costs refetches.

    On Linux/BSD: ``$XDG_CACHE_HOME/simplerest/`` (default ``~/.cache/simplerest/``).
    On macOS/Windows: ``~/.simplerest/cache/``.

    Returns:
        The directory, created on first use.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CACHE_HOME", (".cache",)) / _APP_NAME
    else:
        path = _fallback_base_dir() / "cache"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the directory for crash logs written by the CLI.

    On Linux/BSD: ``$XDG_DATA_HOME/simplerest/`` (default ``~/.local/share/simplerest/``).
    On macOS/Windows: ``~/.simplerest/logs/``.

    Returns:
        The directory, created on first use.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_profiles_dir() -> Path:
    """Return ``<config_dir>/profiles/``, one ``<name>.json`` per API.

    Returns:
        The directory, created on first use.
    """
    path = get_config_dir() / "profiles"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Replace *path* with *data* without ever leaving a half-written file.

    The text goes to a hidden temp file next to *path*, is fsynced, and is
    then moved over *path* with ``os.replace``.  Any failure, including
    ``KeyboardInterrupt``, removes the temp file and re-raises.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


def _read_json(path: Path, what: str) -> object:
    """Parse *path* as JSON, naming *what* in the error message."""
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid {what} at {path}: {exc}") from exc


# --- Global config ---


def _global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load ``config.json`` from the configuration directory.

    Returns:
        The parsed :class:`~simplerest.models.GlobalConfig`, or one with
        every default when no file has been written yet.

    Raises:
        ConfigError: If the file is not JSON or does not validate.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    data = _read_json(path, "global config")
    try:
        return GlobalConfig.model_validate(data)
    except ValueError as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Write *config* to ``config.json`` atomically.

    Args:
        config: Settings to persist, serialised in JSON mode.
    """
    data = config.model_dump(mode="json")
    _atomic_write(_global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Profiles ---


def _profile_path(name: str) -> Path:
    return get_profiles_dir() / f"{name}.json"


def list_profiles() -> list[str]:
    """Return the names of all stored profiles.

    Returns:
        File stems of ``profiles/*.json``, sorted alphabetically.
    """
    profiles_dir = get_profiles_dir()
    return sorted(p.stem for p in profiles_dir.glob("*.json") if p.is_file())


def load_profile(name: str) -> Profile:
    """Load and validate the profile stored as ``<name>.json``.

    Args:
        name: Profile name as shown by ``simplerest profile list``.

    Returns:
        The parsed :class:`~simplerest.models.Profile`.

    Raises:
        ConfigError: If the profile is missing, not JSON, or fails validation.
    """
    path = _profile_path(name)
    if not path.is_file():
        raise ConfigError(f"Profile '{name}' not found at {path}")
    data = _read_json(path, f"profile '{name}'")
    try:
        return Profile.model_validate(data)
    except ValueError as exc:
        raise ConfigError(f"Invalid profile '{name}' at {path}: {exc}") from exc


def save_profile(profile: Profile) -> None:
    """Write *profile* atomically, overwriting any profile of the same name.

    Only credential *sources* are stored; secrets never touch the file.

    Args:
        profile: The profile to save; ``profile.name`` picks the file.
    """
    data = profile.model_dump(mode="json")
    _atomic_write(_profile_path(profile.name), json.dumps(data, indent=2) + "\n")


def profile_exists(name: str) -> bool:
    """Return ``True`` if ``<name>.json`` exists in the profiles directory."""
    return _profile_path(name).is_file()


def delete_profile(name: str) -> None:
    """Remove a stored profile.

    Args:
        name: Profile to delete.

    Raises:
        ConfigError: If the profile does not exist.
    """
    path = _profile_path(name)
    if not path.is_file():
        raise ConfigError(f"Profile '{name}' not found at {path}")
    path.unlink()


# --- Precedence resolution ---


def resolve_config(
    cli_profile: Optional[str] = None,
    cli_base_url: Optional[str] = None,
) -> tuple[GlobalConfig, Optional[Profile]]:
    """Resolve the global config and the active profile.

    Profile name precedence (high to low):
        1. ``cli_profile``
        2. ``SIMPLEREST_PROFILE``
        3. ``default_profile`` in the global config
        4. The only profile on disk, when ``auto_select_single_profile`` is set

    The profile's ``base_url`` is overridden by ``cli_base_url``, then by
    ``SIMPLEREST_BASE_URL``.  Either override without any profile yields an
    unsaved ``adhoc`` profile carrying just that base URL.

    Args:
        cli_profile: Value of ``--profile``, if given.
        cli_base_url: Value of ``--base-url``, if given.

    Returns:
        A tuple of ``(global_config, active_profile_or_None)``.

    Raises:
        ConfigError: If the chosen profile or the global config cannot be loaded.
    """
    global_cfg = load_global_config()

    # 3. Global default, overridden by 2. env and 1. CLI
    resolved_name: Optional[str] = global_cfg.default_profile
    env_profile = os.environ.get("SIMPLEREST_PROFILE")
    if env_profile:
        resolved_name = env_profile
    if cli_profile is not None:
        resolved_name = cli_profile

    # 4. Single stored profile
    if resolved_name is None and global_cfg.auto_select_single_profile:
        profiles = list_profiles()
        if len(profiles) == 1:
            resolved_name = profiles[0]

    profile: Optional[Profile] = None
    if resolved_name is not None:
        profile = load_profile(resolved_name)

    env_base_url = os.environ.get("SIMPLEREST_BASE_URL")
    if cli_base_url is not None or env_base_url:
        if profile is None:
            profile = Profile(name="adhoc")
        profile.base_url = cli_base_url if cli_base_url is not None else env_base_url

    return global_cfg, profile


def client_config_from_profile(profile: Optional[Profile]) -> ClientConfig:
    """Build the :class:`~simplerest.models.ClientConfig` for *profile* (defaults when ``None``)."""
    if profile is None:
        return ClientConfig()
    request = profile.request
    return ClientConfig(
        base_url=profile.base_url or "",
        user_agent=request.user_agent,
        timeout=request.timeout,
        default_parameters=list(profile.default_parameters),
        follow_redirects=request.follow_redirects,
        max_redirects=request.max_redirects,
        verify_ssl=request.verify_ssl,
    )


# --- Credential source resolution ---


def resolve_credential(source: str) -> str:
    """Resolve a credential from its source descriptor.

    Supported formats:
        - ``"env:VAR_NAME"`` -- reads ``os.environ["VAR_NAME"]``
        - ``"file:/path/to/file"`` -- reads file content, stripped of whitespace
        - ``"prompt"`` -- asks on the terminal without echo (requires a TTY)

    Args:
        source: Descriptor from a profile's ``*_source`` field.

    Returns:
        The secret itself.

    Raises:
        ConfigError: If the variable is unset, the file is unreadable, stdin
            is not a TTY, or the format is unknown.
    """
    if source.startswith("env:"):
        var_name = source[4:]
        value = os.environ.get(var_name)
        if value is None:
            raise ConfigError(
                f"Environment variable '{var_name}' is not set (source: {source})"
            )
        return value

    if source.startswith("file:"):
        path = Path(source[5:]).expanduser()
        if not path.is_file():
            raise ConfigError(f"Credential file not found: {path} (source: {source})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc

    if source == "prompt":
        if not sys.stdin.isatty():
            raise ConfigError(
                "Cannot prompt for credentials: stdin is not a TTY (source: prompt)"
            )
        return getpass.getpass("Enter credential: ")

    raise ConfigError(f"Unknown credential source format: {source}")


def resolve_optional_credential(source: Optional[str]) -> Optional[str]:
    """Like :func:`resolve_credential`, but ``None`` for an unset source."""
    if not source:
        return None
    return resolve_credential(source)
