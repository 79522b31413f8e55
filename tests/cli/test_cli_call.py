"""Tests for ``toolwire call``."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import click
import pytest
from click.testing import CliRunner

from toolwire.cli import main
from toolwire.cli_commands.call import parse_arguments
from toolwire.integrations.provider import ToolOutcome


def _patched_provider(outcome: ToolOutcome) -> tuple[Any, MagicMock, MagicMock]:
    patcher = patch("toolwire.integrations.provider.RemoteToolProvider")
    mock_cls = patcher.start()
    instance = mock_cls.return_value
    instance.__aenter__ = AsyncMock(return_value=instance)
    instance.__aexit__ = AsyncMock(return_value=False)
    instance.execute_tool = AsyncMock(return_value=outcome)
    return patcher, mock_cls, instance


class TestParseArguments:
    def test_pairs_are_json_when_possible(self) -> None:
        args = parse_arguments(("query=httpx", "numResults=5", "live=true", "tags=[1,2]"), None)
        assert args == {"query": "httpx", "numResults": 5, "live": True, "tags": [1, 2]}

    def test_pairs_override_json(self) -> None:
        args = parse_arguments(("query=b",), '{"query": "a", "limit": 3}')
        assert args == {"query": "b", "limit": 3}

    def test_bad_pair(self) -> None:
        with pytest.raises(click.BadParameter):
            parse_arguments(("novalue",), None)

    def test_json_must_be_object(self) -> None:
        with pytest.raises(click.BadParameter):
            parse_arguments((), "[1, 2]")


class TestCallCommand:
    def test_prints_output(self) -> None:
        outcome = ToolOutcome(text="search results", details={"tool": "web_search_exa"})
        patcher, mock_cls, instance = _patched_provider(outcome)
        try:
            result = CliRunner().invoke(
                main,
                ["call", "exa", "web_search_exa", "-a", "query=httpx", "--api-key", "k"],
            )
        finally:
            patcher.stop()

        assert result.exit_code == 0, result.output
        assert "search results" in result.output
        instance.execute_tool.assert_awaited_once_with("web_search_exa", {"query": "httpx"})
        resolver = mock_cls.call_args.args[1]
        assert resolver.profile.name == "exa"

    def test_error_exits_nonzero(self) -> None:
        outcome = ToolOutcome(text="Exa MCP error: Request timed out", is_error=True)
        patcher, _, _ = _patched_provider(outcome)
        try:
            result = CliRunner().invoke(main, ["call", "exa", "web_search_exa"])
        finally:
            patcher.stop()

        assert result.exit_code == 1
        assert "Request timed out" in result.output

    def test_json_output(self) -> None:
        outcome = ToolOutcome(text="[not markup]", details={"truncated": False})
        patcher, _, _ = _patched_provider(outcome)
        try:
            result = CliRunner().invoke(main, ["call", "firecrawl", "firecrawl_map", "--json"])
        finally:
            patcher.stop()

        assert result.exit_code == 0, result.output
        payload = json.loads(result.output)
        assert payload["text"] == "[not markup]"
        assert payload["is_error"] is False

    def test_unknown_profile(self) -> None:
        result = CliRunner().invoke(main, ["call", "nope", "tool"])
        assert result.exit_code == 2

    def test_invalid_args_json(self) -> None:
        result = CliRunner().invoke(main, ["call", "exa", "t", "--args-json", "{"])
        assert result.exit_code == 2
        assert "--args-json" in result.output
