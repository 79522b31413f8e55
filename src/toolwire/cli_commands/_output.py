"""Shared CLI output formatters."""

from __future__ import annotations

import json

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from toolwire.config.models import ResolvedSettings, ServerProfile  # noqa: TC001
from toolwire.integrations.provider import ToolOutcome  # noqa: TC001

console = Console()


def print_outcome(outcome: ToolOutcome, *, as_json: bool = False) -> None:
    """Print a tool outcome: plain text, or the whole outcome as JSON."""
    if as_json:
        console.print_json(outcome.model_dump_json())
        return

    if outcome.is_error:
        console.print(f"[red]{escape(outcome.text)}[/red]")
        return

    # Tool output is arbitrary text; keep rich from interpreting it.
    console.print(outcome.text, markup=False, highlight=False)

    temp_file = outcome.details.get("temp_file")
    if temp_file:
        console.print(f"\n[dim]Full output: {temp_file}[/dim]")


def print_settings_table(profile: ServerProfile, settings: ResolvedSettings) -> None:
    """Pretty-print resolved settings with secrets redacted."""
    table = Table(title=f"{profile.label} MCP settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row("endpoint", settings.redacted_endpoint())
    table.add_row("timeout_ms", _number(settings.timeout_ms))
    table.add_row("protocol_version", settings.protocol_version)
    table.add_row("api_key", "(set)" if settings.api_key else "-")
    table.add_row("tools", ", ".join(settings.tools) if settings.tools else "(all)")
    table.add_row("headers", json.dumps(settings.redacted_headers()) if settings.headers else "-")
    table.add_row("max_bytes", str(settings.max_bytes))
    table.add_row("max_lines", str(settings.max_lines))

    console.print(table)


def _number(value: float) -> str:
    return str(int(value)) if value == int(value) else str(value)
