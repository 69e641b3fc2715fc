"""Profile commands -- list, show and delete stored API profiles.

Profiles are JSON files under ``<config_dir>/profiles/``; see
:mod:`simplerest.config`.  They are written by hand or by library code via
:func:`~simplerest.config.save_profile`.
"""

from __future__ import annotations

import typer

from simplerest.config import (
    delete_profile,
    get_profiles_dir,
    list_profiles,
    load_global_config,
    load_profile,
    profile_exists,
)
from simplerest.exceptions import ConfigError
from simplerest.exit_codes import EXIT_NOT_FOUND
from simplerest.output import error, format_response, info, print_table, success

profile_app = typer.Typer(no_args_is_help=True)


@profile_app.command("list")
def profile_list() -> None:
    """List stored profiles, marking the default one."""
    names = list_profiles()
    if not names:
        info(f"No profiles found in {get_profiles_dir()}")
        return

    default = load_global_config().default_profile
    rows = []
    for name in names:
        try:
            profile = load_profile(name)
        except ConfigError as exc:
            error(str(exc))
            continue
        auth_type = profile.auth.type if profile.auth else "-"
        rows.append(
            [
                name,
                profile.base_url or "-",
                auth_type,
                "*" if name == default else "",
            ]
        )
    print_table(["Name", "Base URL", "Auth", "Default"], rows, title="Profiles")


@profile_app.command("show")
def profile_show(name: str = typer.Argument(help="Profile name.")) -> None:
    """Show a profile's configuration.

    Credential sources are shown as stored (``env:VAR``, ``file:/path``);
    secrets are never resolved here.
    """
    if not profile_exists(name):
        error(f"Profile '{name}' not found")
        raise typer.Exit(code=EXIT_NOT_FOUND)
    try:
        profile = load_profile(name)
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    format_response(profile.model_dump(mode="json"))


@profile_app.command("delete")
def profile_delete(
    name: str = typer.Argument(help="Profile name."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
) -> None:
    """Delete a stored profile."""
    if not profile_exists(name):
        error(f"Profile '{name}' not found")
        raise typer.Exit(code=EXIT_NOT_FOUND)
    if not yes and not typer.confirm(f"Delete profile '{name}'?"):
        raise typer.Exit()
    delete_profile(name)
    success(f"Deleted profile '{name}'")
