"""RemoteToolProvider: executes a profile's remote tools for the agent runtime.

Wraps an :class:`MCPClient` configured from a :class:`SettingsResolver` and
turns every call into a :class:`ToolOutcome`: bounded text plus details.
Failures never escape :meth:`RemoteToolProvider.execute_tool`; they come
back as outcomes with ``is_error`` set.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

from toolwire.config.endpoints import parse_tools_from_url
from toolwire.config.resolver import SettingsResolver
from toolwire.output.formatting import format_tool_output
from toolwire.output.limits import resolve_effective_limits, split_params
from toolwire.protocols.errors import CallCancelledError, MCPError
from toolwire.protocols.mcp.client import MCPClient
from toolwire.protocols.mcp.models import ClientInfo
from toolwire.utils.telemetry import (
    ATTR_OUTPUT_TRUNCATED,
    ATTR_PROFILE,
    ATTR_TOOL_IS_ERROR,
    ATTR_TOOL_NAME,
    get_tracer,
)

if TYPE_CHECKING:
    from toolwire.config.models import ResolvedSettings, ServerProfile
    from toolwire.protocols.mcp.cancellation import CancelToken
    from toolwire.protocols.mcp.transport import MCPTransport

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

CANCELLED_TEXT = "Cancelled."


class ToolOutcome(BaseModel):
    """What the agent runtime receives for one tool execution."""

    text: str
    details: dict[str, Any] = Field(default_factory=dict)
    is_error: bool = False

    @classmethod
    def cancelled(cls) -> ToolOutcome:
        return cls(text=CANCELLED_TEXT, details={"cancelled": True})


class RemoteToolProvider:
    """Executes tools on the MCP server described by *profile*.

    Settings are resolved once per :meth:`execute_tool` call; the client's
    configuration callables read that snapshot, so one tool call sees one
    consistent endpoint, timeout, protocol version and header set.

    Usage::

        async with RemoteToolProvider(EXA) as provider:
            outcome = await provider.execute_tool("web_search_exa", {"query": "httpx"})
    """

    def __init__(
        self,
        profile: ServerProfile,
        resolver: SettingsResolver | None = None,
        *,
        transport: MCPTransport | None = None,
    ) -> None:
        self._profile = profile
        self._resolver = resolver or SettingsResolver(profile)
        self._snapshot: ResolvedSettings | None = None
        self._client = MCPClient(
            lambda: self._settings().endpoint,
            client_info=ClientInfo(name=profile.client_name, version=profile.client_version),
            get_timeout_ms=lambda: self._settings().timeout_ms,
            get_protocol_version=lambda: self._settings().protocol_version,
            get_headers=lambda: self._settings().headers,
            transport=transport,
            id_prefix=profile.id_prefix,
        )

    async def __aenter__(self) -> RemoteToolProvider:
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.close()

    @property
    def client(self) -> MCPClient:
        return self._client

    def refresh(self) -> ResolvedSettings:
        """Re-resolve settings and make them the snapshot the client reads."""
        self._snapshot = self._resolver.resolve()
        return self._snapshot

    def _settings(self) -> ResolvedSettings:
        if self._snapshot is None:
            return self.refresh()
        return self._snapshot

    def allowed_tools(self, settings: ResolvedSettings | None = None) -> list[str] | None:
        """Tools this profile may run; ``None`` means no restriction.

        A ``tools`` query parameter already present in the configured URL
        narrows the configured list; if the two share nothing, the URL wins.
        """
        settings = settings or self.refresh()
        configured = settings.tools
        url_tools = parse_tools_from_url(settings.base_url)
        if configured and url_tools:
            intersection = [tool for tool in configured if tool in url_tools]
            return intersection or url_tools
        return configured or url_tools

    async def execute_tool(
        self,
        name: str,
        params: dict[str, Any],
        signal: CancelToken | None = None,
    ) -> ToolOutcome:
        """Call *name* remotely and return its bounded, formatted output."""
        if signal is not None and signal.cancelled:
            return ToolOutcome.cancelled()

        endpoint = self._profile.default_endpoint
        with _tracer.start_as_current_span("toolwire.tool.execute") as span:
            span.set_attribute(ATTR_PROFILE, self._profile.name)
            span.set_attribute(ATTR_TOOL_NAME, name)
            try:
                settings = self.refresh()
                endpoint = settings.redacted_endpoint()
                allowed = self.allowed_tools(settings)
                if allowed is not None and name not in allowed:
                    msg = f"Tool not enabled for {self._profile.name}: {name}"
                    return self._error(name, endpoint, msg)

                tool_args, requested = split_params(params)
                limits = resolve_effective_limits(requested, settings.limits)
                result = await self._client.call_tool(name, tool_args, signal)
                formatted = format_tool_output(
                    name,
                    endpoint,
                    result,
                    limits,
                    spill_prefix=f"toolwire-{self._profile.name}-mcp",
                )
            except CallCancelledError as exc:
                if exc.is_timeout:
                    return self._error(name, endpoint, str(exc))
                return ToolOutcome.cancelled()
            except MCPError as exc:
                logger.info("%s tool %s failed: %s", self._profile.label, name, exc)
                return self._error(name, endpoint, str(exc))
            except OSError as exc:
                logger.warning("Could not save %s output: %s", name, exc)
                return self._error(name, endpoint, f"Could not save full output: {exc}")

            is_error = result.get("isError") is True
            span.set_attribute(ATTR_OUTPUT_TRUNCATED, formatted.details.truncated)
            span.set_attribute(ATTR_TOOL_IS_ERROR, is_error)

        return ToolOutcome(
            text=formatted.text,
            details=formatted.details.model_dump(),
            is_error=is_error,
        )

    def _error(self, name: str, endpoint: str, message: str) -> ToolOutcome:
        return ToolOutcome(
            text=f"{self._profile.label} MCP error: {message}",
            details={"tool": name, "endpoint": endpoint, "error": message},
            is_error=True,
        )
