"""Shared error types for the protocol layer."""

from __future__ import annotations

from typing import Any


class MCPError(Exception):
    """Base error for all remote tool-call failures."""


class TransportError(MCPError):
    """Network failure, non-2xx status, or an unexpected content type."""

    def __init__(
        self,
        detail: str,
        *,
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        self.detail = detail
        self.status_code = status_code
        self.body = body
        super().__init__(detail)


class ProtocolError(MCPError):
    """The remote answered, but not with a usable JSON-RPC response."""


class RemoteToolError(MCPError):
    """The response carried a JSON-RPC ``error`` member."""

    def __init__(self, code: int, message: str, data: Any = None) -> None:
        self.code = code
        self.message = message
        self.data = data
        super().__init__(f"MCP error {code}: {message}")


class CallCancelledError(MCPError):
    """The call was aborted by the caller or by its timeout."""

    def __init__(self, reason: str = "cancelled") -> None:
        self.reason = reason
        super().__init__("Request timed out" if reason == "timeout" else "Request cancelled")

    @property
    def is_timeout(self) -> bool:
        return self.reason == "timeout"


class ConfigError(MCPError):
    """A configuration file could not be used."""

    def __init__(self, path: str, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Invalid config at {path}: {detail}")
