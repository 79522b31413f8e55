"""``toolwire call``: run one remote tool and print its bounded output."""

from __future__ import annotations

import asyncio
import json
import sys
from typing import Any

import click

from toolwire.cli_commands._output import console, print_outcome
from toolwire.config.profiles import PROFILES


def parse_arguments(pairs: tuple[str, ...], args_json: str | None) -> dict[str, Any]:
    """Build tool arguments from ``--args-json`` and ``key=value`` pairs.

    Pair values are read as JSON when they parse (numbers, booleans, lists)
    and kept as plain strings otherwise. Pairs override keys from the JSON.
    """
    arguments: dict[str, Any] = {}
    if args_json:
        try:
            loaded = json.loads(args_json)
        except ValueError as exc:
            raise click.BadParameter(str(exc), param_hint="--args-json") from exc
        if not isinstance(loaded, dict):
            raise click.BadParameter("expected a JSON object", param_hint="--args-json")
        arguments.update(loaded)

    for pair in pairs:
        key, sep, raw = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got {pair!r}", param_hint="--arg")
        try:
            arguments[key] = json.loads(raw)
        except ValueError:
            arguments[key] = raw
    return arguments


@click.command()
@click.argument("profile", type=click.Choice(sorted(PROFILES)))
@click.argument("tool")
@click.option("--arg", "-a", "pairs", multiple=True, metavar="KEY=VALUE", help="Tool argument.")
@click.option("--args-json", default=None, help="Tool arguments as a JSON object.")
@click.option("--url", default=None, help="Override the MCP endpoint.")
@click.option("--api-key", default=None, help="API key for the remote service.")
@click.option("--timeout-ms", default=None, help="Per-request timeout in milliseconds.")
@click.option("--protocol", "protocol_version", default=None, help="MCP protocol version.")
@click.option("--config", "config_path", default=None, help="Path to a config file.")
@click.option("--tools", default=None, help="Comma-separated list of enabled tools.")
@click.option("--max-bytes", default=None, help="Max bytes kept from tool output.")
@click.option("--max-lines", default=None, help="Max lines kept from tool output.")
@click.option("--json", "as_json", is_flag=True, help="Print the outcome as JSON.")
@click.option("--telemetry", is_flag=True, help="Export trace spans to the console.")
def call(
    profile: str,
    tool: str,
    pairs: tuple[str, ...],
    args_json: str | None,
    url: str | None,
    api_key: str | None,
    timeout_ms: str | None,
    protocol_version: str | None,
    config_path: str | None,
    tools: str | None,
    max_bytes: str | None,
    max_lines: str | None,
    as_json: bool,
    telemetry: bool,
) -> None:
    """Call TOOL on the PROFILE MCP server."""
    from toolwire.config.models import SettingsOverrides
    from toolwire.config.resolver import SettingsResolver
    from toolwire.integrations.provider import RemoteToolProvider, ToolOutcome

    arguments = parse_arguments(pairs, args_json)
    server = PROFILES[profile]
    overrides = SettingsOverrides(
        url=url,
        api_key=api_key,
        tools=tools,
        timeout_ms=timeout_ms,
        protocol_version=protocol_version,
        config_path=config_path,
        max_bytes=max_bytes,
        max_lines=max_lines,
    )

    if telemetry:
        from toolwire.utils.telemetry import configure_telemetry

        try:
            configure_telemetry(export_to_console=True)
        except ImportError as exc:
            console.print(f"[yellow]Telemetry disabled:[/yellow] {exc}")

    async def _call() -> ToolOutcome:
        resolver = SettingsResolver(server, overrides)
        async with RemoteToolProvider(server, resolver) as provider:
            return await provider.execute_tool(tool, arguments)

    outcome = asyncio.run(_call())
    print_outcome(outcome, as_json=as_json)
    if outcome.is_error:
        sys.exit(1)
