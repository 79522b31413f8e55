"""Configuration models: server profiles, file settings, resolved settings."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from toolwire.config.endpoints import redact_endpoint
from toolwire.config.normalize import (
    normalize_headers,
    normalize_number,
    normalize_string,
    normalize_tools,
)

if TYPE_CHECKING:
    from toolwire.output.limits import OutputLimits


class ServerProfile(BaseModel):
    """Static description of one remote MCP service.

    ``auth`` selects how the API key reaches the server: ``"query"`` adds it
    as the ``api_key_param`` query parameter, ``"bearer"`` fills the
    ``api_key_placeholder`` in the URL and sends an ``Authorization`` header.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    label: str
    env_prefix: str
    client_name: str
    client_version: str = "1.0.0"
    default_endpoint: str
    default_timeout_ms: int = 30_000
    default_protocol_version: str = "2025-06-18"
    default_tools: list[str] = Field(default_factory=list)
    auth: Literal["query", "bearer"] = "query"
    api_key_param: str | None = None
    api_key_placeholder: str | None = None
    api_key_envs: list[str] = Field(default_factory=list)

    @property
    def id_prefix(self) -> str:
        return f"{self.name}-mcp"

    def env(self, suffix: str) -> str:
        return f"{self.env_prefix}_{suffix}"


class FileSettings(BaseModel):
    """Contents of a profile config file. Every key is optional."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    url: str | None = None
    api_key: str | None = Field(default=None, alias="apiKey")
    headers: dict[str, str] | None = None
    tools: list[str] | None = None
    timeout_ms: float | None = Field(default=None, alias="timeoutMs")
    protocol_version: str | None = Field(default=None, alias="protocolVersion")
    max_bytes: float | None = Field(default=None, alias="maxBytes")
    max_lines: float | None = Field(default=None, alias="maxLines")

    @field_validator("url", "api_key", "protocol_version", mode="before")
    @classmethod
    def _strings(cls, value: Any) -> str | None:
        return normalize_string(value)

    @field_validator("tools", mode="before")
    @classmethod
    def _tools(cls, value: Any) -> list[str] | None:
        return normalize_tools(value)

    @field_validator("headers", mode="before")
    @classmethod
    def _headers(cls, value: Any) -> dict[str, str] | None:
        return normalize_headers(value)

    @field_validator("timeout_ms", "max_bytes", "max_lines", mode="before")
    @classmethod
    def _numbers(cls, value: Any) -> float | None:
        return normalize_number(value)


class SettingsOverrides(BaseModel):
    """Values passed explicitly (CLI flags); they win over everything else."""

    url: str | None = None
    api_key: str | None = None
    tools: str | None = None
    timeout_ms: str | None = None
    protocol_version: str | None = None
    config_path: str | None = None
    max_bytes: str | None = None
    max_lines: str | None = None


class ResolvedSettings(BaseModel):
    """Effective settings for one request, after merging every source."""

    endpoint: str
    base_url: str
    headers: dict[str, str] = Field(default_factory=dict)
    timeout_ms: float
    protocol_version: str
    api_key: str | None = None
    api_key_param: str | None = None
    tools: list[str] | None = None
    max_bytes: int
    max_lines: int

    @property
    def limits(self) -> OutputLimits:
        from toolwire.output.limits import OutputLimits

        return OutputLimits(max_bytes=self.max_bytes, max_lines=self.max_lines)

    def redacted_endpoint(self) -> str:
        return redact_endpoint(self.endpoint, self.api_key, self.api_key_param)

    def redacted_headers(self) -> dict[str, str]:
        if not self.api_key:
            return dict(self.headers)
        return {k: v.replace(self.api_key, "REDACTED") for k, v in self.headers.items()}
