"""Tests for ``toolwire config``."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from toolwire.cli import main


@pytest.fixture
def isolated(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    for name in ("EXA_API_KEY", "EXA_MCP_API_KEY", "EXA_MCP_URL", "EXA_MCP_CONFIG", "FIRECRAWL_API_KEY"):
        monkeypatch.delenv(name, raising=False)
    return home


class TestConfigInit:
    def test_writes_then_reports_existing(self, isolated: Path) -> None:
        runner = CliRunner()
        first = runner.invoke(main, ["config", "init", "exa"])
        assert first.exit_code == 0, first.output
        assert "Wrote" in first.output
        assert (isolated / ".toolwire" / "exa-mcp.yaml").is_file()

        second = runner.invoke(main, ["config", "init", "exa"])
        assert second.exit_code == 0
        assert "already present" in second.output


class TestConfigShow:
    def test_shows_redacted_settings(self, isolated: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EXA_API_KEY", "super-secret")
        result = CliRunner().invoke(main, ["config", "show", "exa"])
        assert result.exit_code == 0, result.output
        assert "super-secret" not in result.output
        assert "(set)" in result.output
        assert "protocol_version" in result.output

    def test_invalid_config_file(self, isolated: Path, tmp_path: Path) -> None:
        bad = tmp_path / "bad.json"
        bad.write_text("{oops")
        result = CliRunner().invoke(main, ["config", "show", "exa", "--config", str(bad)])
        assert result.exit_code == 1
        assert "Config error" in result.output
