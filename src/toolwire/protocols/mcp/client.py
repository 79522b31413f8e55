"""MCPClient: calls tools on a remote MCP server over streamable HTTP.

Implements the ``initialize`` handshake and tool execution (``tools/call``)
over an :class:`MCPTransport`. The endpoint, timeout, protocol version, and
extra headers are read through callables on every request, so configuration
changes take effect without rebuilding the client.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from typing import Any

from toolwire.protocols.errors import RemoteToolError
from toolwire.protocols.mcp.cancellation import CancelToken, merged_cancellation
from toolwire.protocols.mcp.models import (
    ClientInfo,
    InitializeParams,
    JsonRpcNotification,
    JsonRpcRequest,
)
from toolwire.protocols.mcp.session import SessionManager, SessionState
from toolwire.protocols.mcp.transport import HttpTransport, MCPTransport
from toolwire.utils.telemetry import (
    ATTR_MCP_PROTOCOL_VERSION,
    ATTR_TOOL_NAME,
    get_tracer,
)

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

DEFAULT_TIMEOUT_MS = 30_000
DEFAULT_PROTOCOL_VERSION = "2025-06-18"


class MCPClient:
    """Async client for one remote MCP server.

    Usage::

        client = MCPClient(
            lambda: "https://mcp.example.com/mcp",
            client_info=ClientInfo(name="toolwire", version="0.1.0"),
        )
        async with client:
            result = await client.call_tool("search", {"query": "httpx"})
    """

    def __init__(
        self,
        resolve_endpoint: Callable[[], str],
        *,
        client_info: ClientInfo,
        get_timeout_ms: Callable[[], float] = lambda: DEFAULT_TIMEOUT_MS,
        get_protocol_version: Callable[[], str] = lambda: DEFAULT_PROTOCOL_VERSION,
        get_headers: Callable[[], Mapping[str, str]] | None = None,
        transport: MCPTransport | None = None,
        id_prefix: str = "mcp",
    ) -> None:
        self._resolve_endpoint = resolve_endpoint
        self._client_info = client_info
        self._get_timeout_ms = get_timeout_ms
        self._get_protocol_version = get_protocol_version
        self._get_headers = get_headers
        self._transport: MCPTransport = transport or HttpTransport()
        self._id_prefix = id_prefix
        self._request_counter = 0
        self._session = SessionManager(self._initialize)

    async def __aenter__(self) -> MCPClient:
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying transport."""
        await self._transport.aclose()

    @property
    def session_state(self) -> SessionState:
        return self._session.state

    def current_endpoint(self) -> str:
        return self._resolve_endpoint()

    async def ensure_ready(self, signal: CancelToken | None = None) -> None:
        """Run the handshake for the current endpoint unless it already succeeded."""
        await self._session.ensure_ready(self._resolve_endpoint(), signal)

    async def call_tool(
        self,
        name: str,
        arguments: dict[str, Any],
        signal: CancelToken | None = None,
    ) -> dict[str, Any]:
        """Send ``tools/call`` and return the raw ``result`` payload.

        Raises:
            CallCancelledError: *signal* was already cancelled, fired
                mid-flight, or the request timed out.
            RemoteToolError: the server answered with a JSON-RPC error.
            TransportError, ProtocolError: the exchange itself failed.
        """
        if signal is not None:
            signal.raise_if_cancelled()

        with _tracer.start_as_current_span("toolwire.mcp.call_tool") as span:
            span.set_attribute(ATTR_TOOL_NAME, name)
            endpoint = self._resolve_endpoint()
            await self._session.ensure_ready(endpoint, signal)
            result = await self._send_request(
                "tools/call",
                {"name": name, "arguments": arguments},
                signal,
                endpoint=endpoint,
            )

        if isinstance(result, dict):
            return result
        return {"content": [{"type": "text", "text": _to_text(result)}]}

    def _next_id(self) -> str:
        self._request_counter += 1
        return f"{self._id_prefix}-{self._request_counter}"

    async def _initialize(self, endpoint: str, signal: CancelToken | None) -> None:
        """Perform the MCP initialize handshake against *endpoint*."""
        protocol_version = self._get_protocol_version()
        with _tracer.start_as_current_span("toolwire.mcp.handshake") as span:
            span.set_attribute(ATTR_MCP_PROTOCOL_VERSION, protocol_version)
            params = InitializeParams(
                protocol_version=protocol_version,
                client_info=self._client_info,
            )
            await self._send_request(
                "initialize",
                params.model_dump(by_alias=True),
                signal,
                endpoint=endpoint,
            )
            await self._send_notification(
                "notifications/initialized",
                {},
                signal,
                endpoint=endpoint,
            )

    async def _send_request(
        self,
        method: str,
        params: dict[str, Any],
        signal: CancelToken | None,
        *,
        endpoint: str | None = None,
    ) -> Any:
        """Send a JSON-RPC request and return its ``result``."""
        request = JsonRpcRequest(id=self._next_id(), method=method, params=params)
        target = endpoint or self._resolve_endpoint()
        logger.debug("MCP request %s (%s)", request.id, method)

        with merged_cancellation(signal, self._get_timeout_ms()) as token:
            response = await self._transport.request(
                target,
                request,
                headers=self._headers(),
                token=token,
            )

        if response.error is not None:
            raise RemoteToolError(
                response.error.code,
                response.error.message,
                response.error.data,
            )
        return response.result

    async def _send_notification(
        self,
        method: str,
        params: dict[str, Any],
        signal: CancelToken | None,
        *,
        endpoint: str | None = None,
    ) -> None:
        notification = JsonRpcNotification(method=method, params=params)
        target = endpoint or self._resolve_endpoint()
        logger.debug("MCP notification %s", method)
        with merged_cancellation(signal, self._get_timeout_ms()) as token:
            await self._transport.notify(
                target,
                notification,
                headers=self._headers(),
                token=token,
            )

    def _headers(self) -> dict[str, str]:
        if self._get_headers is None:
            return {}
        return dict(self._get_headers())


def _to_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value, indent=2)
    except (TypeError, ValueError):
        return str(value)
