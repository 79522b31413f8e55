"""Protocol layer: MCP over streamable HTTP."""

from toolwire.protocols.errors import (
    CallCancelledError,
    ConfigError,
    MCPError,
    ProtocolError,
    RemoteToolError,
    TransportError,
)

__all__ = [
    "CallCancelledError",
    "ConfigError",
    "MCPError",
    "ProtocolError",
    "RemoteToolError",
    "TransportError",
]
