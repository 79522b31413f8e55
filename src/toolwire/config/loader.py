"""Config file discovery, parsing, and first-run defaults.

Lookup order for a profile named ``exa``:

1. an explicit path (``--config`` or ``EXA_MCP_CONFIG``);
2. ``./.toolwire/exa-mcp.{yaml,yml,json}``;
3. ``~/.toolwire/exa-mcp.{yaml,yml,json}``.

YAML files are read with PyYAML, JSON files with :mod:`json`.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from toolwire.config.models import FileSettings, ServerProfile
from toolwire.output.bounding import DEFAULT_MAX_BYTES, DEFAULT_MAX_LINES
from toolwire.protocols.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_DIR = ".toolwire"
_SUFFIXES = (".yaml", ".yml", ".json")


def default_config_document(profile: ServerProfile) -> dict[str, Any]:
    """The document written on first run."""
    return {
        "url": profile.default_endpoint,
        "apiKey": None,
        "tools": list(profile.default_tools),
        "timeoutMs": profile.default_timeout_ms,
        "protocolVersion": profile.default_protocol_version,
        "maxBytes": DEFAULT_MAX_BYTES,
        "maxLines": DEFAULT_MAX_LINES,
    }


def resolve_config_path(raw: str, *, cwd: Path | None = None) -> Path:
    """Expand ``~`` and anchor relative paths at *cwd*."""
    path = Path(raw.strip()).expanduser()
    if path.is_absolute():
        return path
    return (cwd or Path.cwd()) / path


def candidate_paths(profile: ServerProfile, *, cwd: Path, home: Path) -> list[Path]:
    stem = f"{profile.name}-mcp"
    project = [cwd / CONFIG_DIR / f"{stem}{suffix}" for suffix in _SUFFIXES]
    global_ = [home / CONFIG_DIR / f"{stem}{suffix}" for suffix in _SUFFIXES]
    return project + global_


def default_global_path(profile: ServerProfile, *, home: Path) -> Path:
    return home / CONFIG_DIR / f"{profile.name}-mcp.yaml"


def parse_config(raw: str, path: Path) -> FileSettings:
    """Parse a config document; a non-mapping document is a :class:`ConfigError`."""
    try:
        data = json.loads(raw) if path.suffix == ".json" else yaml.safe_load(raw)
    except (ValueError, yaml.YAMLError) as exc:
        raise ConfigError(str(path), str(exc)) from exc

    if not isinstance(data, dict):
        raise ConfigError(str(path), "expected an object")
    try:
        return FileSettings.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(str(path), str(exc)) from exc


def load_config(
    profile: ServerProfile,
    explicit_path: str | None = None,
    *,
    cwd: Path | None = None,
    home: Path | None = None,
) -> FileSettings | None:
    """Return the first config file found, or ``None`` when there is none."""
    cwd = cwd or Path.cwd()
    home = home or Path.home()

    if explicit_path:
        candidates = [resolve_config_path(explicit_path, cwd=cwd)]
    else:
        candidates = candidate_paths(profile, cwd=cwd, home=home)
        ensure_default_config_file(profile, candidates, default_global_path(profile, home=home))

    for candidate in candidates:
        if not candidate.is_file():
            continue
        return parse_config(candidate.read_text(encoding="utf-8"), candidate)
    return None


def ensure_default_config_file(
    profile: ServerProfile,
    existing: list[Path],
    target: Path,
) -> bool:
    """Write the default config to *target* unless any of *existing* is present.

    Returns ``True`` when a file was written. Failures are logged, not raised.
    """
    if any(path.exists() for path in existing) or target.exists():
        return False
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(
            yaml.safe_dump(default_config_document(profile), sort_keys=False),
            encoding="utf-8",
        )
    except OSError as exc:
        logger.warning("Failed to write %s: %s", target, exc)
        return False
    logger.debug("Wrote default %s config to %s", profile.name, target)
    return True
