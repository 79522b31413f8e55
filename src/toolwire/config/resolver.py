"""SettingsResolver: merge flags, environment, config file, and defaults.

Precedence for every setting: explicit override (CLI flag) > environment
variable > config file > profile default. Nothing is cached; each
:meth:`SettingsResolver.resolve` call re-reads the environment and the
config file, so the endpoint may change between two calls.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import httpx

from toolwire.config.endpoints import build_headers, resolve_endpoint
from toolwire.config.loader import load_config
from toolwire.config.models import FileSettings, ResolvedSettings, ServerProfile, SettingsOverrides
from toolwire.config.normalize import (
    normalize_number,
    normalize_string,
    normalize_tools,
    parse_timeout_ms,
)
from toolwire.output.bounding import DEFAULT_MAX_BYTES, DEFAULT_MAX_LINES
from toolwire.protocols.errors import ConfigError


def _first(*values: Any) -> Any:
    for value in values:
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


def _positive_int(value: Any, fallback: int) -> int:
    number = normalize_number(value)
    if number is None or number < 1:
        return fallback
    return int(number)


class SettingsResolver:
    """Resolves :class:`ResolvedSettings` for one :class:`ServerProfile`."""

    def __init__(
        self,
        profile: ServerProfile,
        overrides: SettingsOverrides | None = None,
        *,
        environ: Mapping[str, str] | None = None,
        cwd: Path | None = None,
        home: Path | None = None,
    ) -> None:
        self._profile = profile
        self._overrides = overrides or SettingsOverrides()
        self._environ = environ
        self._cwd = cwd
        self._home = home

    @property
    def profile(self) -> ServerProfile:
        return self._profile

    def _env(self, suffix: str) -> str | None:
        environ = self._environ if self._environ is not None else os.environ
        return environ.get(self._profile.env(suffix))

    def _env_any(self, names: list[str]) -> str | None:
        environ = self._environ if self._environ is not None else os.environ
        return _first(*(environ.get(name) for name in names))

    def load_file(self) -> FileSettings | None:
        explicit = _first(self._overrides.config_path, self._env("CONFIG"))
        return load_config(self._profile, explicit, cwd=self._cwd, home=self._home)

    def resolve(self) -> ResolvedSettings:
        profile = self._profile
        flags = self._overrides
        config = self.load_file() or FileSettings()

        api_key = normalize_string(
            _first(flags.api_key, self._env_any(profile.api_key_envs), config.api_key)
        )
        base_url = _first(flags.url, self._env("URL"), config.url) or profile.default_endpoint

        raw_tools = _first(flags.tools, self._env("TOOLS"))
        tools = normalize_tools(raw_tools) if raw_tools is not None else config.tools

        timeout_ms = parse_timeout_ms(
            _first(flags.timeout_ms, self._env("TIMEOUT_MS"), config.timeout_ms),
            profile.default_timeout_ms,
        )
        protocol_version = (
            normalize_string(
                _first(flags.protocol_version, self._env("PROTOCOL_VERSION"), config.protocol_version)
            )
            or profile.default_protocol_version
        )
        max_bytes = _positive_int(
            _first(flags.max_bytes, self._env("MAX_BYTES"), config.max_bytes), DEFAULT_MAX_BYTES
        )
        max_lines = _positive_int(
            _first(flags.max_lines, self._env("MAX_LINES"), config.max_lines), DEFAULT_MAX_LINES
        )

        try:
            endpoint = resolve_endpoint(profile, base_url, tools, api_key)
            httpx.URL(endpoint)
        except httpx.InvalidURL as exc:
            raise ConfigError("url", str(exc)) from exc

        if profile.auth == "bearer":
            headers = build_headers(api_key, config.headers)
        else:
            headers = dict(config.headers or {})

        return ResolvedSettings(
            endpoint=endpoint,
            base_url=base_url,
            headers=headers,
            timeout_ms=timeout_ms,
            protocol_version=protocol_version,
            api_key=api_key,
            api_key_param=profile.api_key_param if profile.auth == "query" else None,
            tools=tools,
            max_bytes=max_bytes,
            max_lines=max_lines,
        )
