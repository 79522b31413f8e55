"""MCP models: JSON-RPC 2.0 messages exchanged with a remote tool server.

Only the shapes this client sends or reads are modelled: ``initialize`` and
``tools/call`` requests, the ``notifications/initialized`` notification, and
the responses that answer the two requests.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, model_validator

# ---------------------------------------------------------------------------
# JSON-RPC 2.0 envelope
# ---------------------------------------------------------------------------


class JsonRpcRequest(BaseModel):
    """A JSON-RPC 2.0 request message."""

    jsonrpc: Literal["2.0"] = "2.0"
    id: str
    method: str
    params: dict[str, Any] = Field(default_factory=dict)


class JsonRpcNotification(BaseModel):
    """A JSON-RPC 2.0 notification: no ``id``, no response expected."""

    jsonrpc: Literal["2.0"] = "2.0"
    method: str
    params: dict[str, Any] = Field(default_factory=dict)


class JsonRpcError(BaseModel):
    """A JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None


class JsonRpcResponse(BaseModel):
    """A JSON-RPC 2.0 response message."""

    jsonrpc: Literal["2.0"] = "2.0"
    id: str | int | None = None
    result: Any = None
    error: JsonRpcError | None = None

    @model_validator(mode="after")
    def _result_or_error(self) -> JsonRpcResponse:
        # A null "result" is still a result; only its absence counts.
        has_result = "result" in self.model_fields_set
        if self.error is not None and self.result is not None:
            raise ValueError("response carries both result and error")
        if self.error is None and not has_result:
            raise ValueError("response carries neither result nor error")
        return self


# ---------------------------------------------------------------------------
# MCP-specific payloads
# ---------------------------------------------------------------------------


class ClientInfo(BaseModel):
    """Identity sent in the ``initialize`` handshake."""

    name: str
    version: str


class InitializeParams(BaseModel):
    """Parameters of the ``initialize`` request."""

    model_config = {"populate_by_name": True}

    protocol_version: str = Field(alias="protocolVersion")
    capabilities: dict[str, Any] = Field(default_factory=dict)
    client_info: ClientInfo = Field(alias="clientInfo")
