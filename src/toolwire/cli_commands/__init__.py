"""CLI subcommand registration."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all subcommands on the CLI group."""
    from toolwire.cli_commands.call import call
    from toolwire.cli_commands.config import config_group

    cli.add_command(call)
    cli.add_command(config_group)
