"""MCP protocol: Model Context Protocol client over streamable HTTP."""

from toolwire.protocols.mcp.cancellation import CancelToken, merged_cancellation
from toolwire.protocols.mcp.client import MCPClient
from toolwire.protocols.mcp.models import (
    ClientInfo,
    JsonRpcError,
    JsonRpcNotification,
    JsonRpcRequest,
    JsonRpcResponse,
)
from toolwire.protocols.mcp.session import Initializing, Ready, SessionManager, Uninitialized
from toolwire.protocols.mcp.transport import HttpTransport, MCPTransport

__all__ = [
    "CancelToken",
    "ClientInfo",
    "HttpTransport",
    "Initializing",
    "JsonRpcError",
    "JsonRpcNotification",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "MCPClient",
    "MCPTransport",
    "Ready",
    "SessionManager",
    "Uninitialized",
    "merged_cancellation",
]
