"""``toolwire config``: inspect and initialise profile configuration."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from toolwire.cli_commands._output import console, print_settings_table
from toolwire.config.profiles import PROFILES


@click.group("config")
def config_group() -> None:
    """Inspect and initialise profile configuration."""


@config_group.command("show")
@click.argument("profile", type=click.Choice(sorted(PROFILES)))
@click.option("--config", "config_path", default=None, help="Path to a config file.")
def show(profile: str, config_path: str | None) -> None:
    """Print the settings PROFILE would use right now."""
    from toolwire.config.models import SettingsOverrides
    from toolwire.config.resolver import SettingsResolver
    from toolwire.protocols.errors import ConfigError

    server = PROFILES[profile]
    resolver = SettingsResolver(server, SettingsOverrides(config_path=config_path))
    try:
        settings = resolver.resolve()
    except ConfigError as exc:
        console.print(f"[red]Config error:[/red] {exc}")
        sys.exit(1)

    print_settings_table(server, settings)


@config_group.command("init")
@click.argument("profile", type=click.Choice(sorted(PROFILES)))
def init(profile: str) -> None:
    """Write the default config file for PROFILE if none exists."""
    from toolwire.config.loader import (
        candidate_paths,
        default_global_path,
        ensure_default_config_file,
    )

    server = PROFILES[profile]
    cwd, home = Path.cwd(), Path.home()
    target = default_global_path(server, home=home)
    existing = candidate_paths(server, cwd=cwd, home=home)

    if ensure_default_config_file(server, existing, target):
        console.print(f"[green]Wrote[/green] {target}")
        return

    found = next((path for path in [*existing, target] if path.exists()), None)
    if found is None:
        console.print(f"[red]Could not write[/red] {target}")
        sys.exit(1)
    console.print(f"[yellow]Config already present:[/yellow] {found}")
