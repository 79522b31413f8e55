"""Shared fixtures: an in-memory MCP server behind ``httpx.MockTransport``."""

from __future__ import annotations

import asyncio
import json
from typing import Any

import httpx
import pytest

from toolwire.protocols.mcp.transport import HttpTransport


class FakeMCPServer:
    """Answers ``initialize`` / ``tools/call`` like a streamable-HTTP MCP server.

    Every received message is recorded; knobs on the instance change how
    the next messages are answered.
    """

    def __init__(self) -> None:
        self.messages: list[dict[str, Any]] = []
        self.urls: list[str] = []
        self.headers: list[httpx.Headers] = []
        self.sse = False
        self.initialize_gate: asyncio.Event | None = None
        self.initialize_status: int | None = None
        self.initialize_error: dict[str, Any] | None = None
        self.tool_gate: asyncio.Event | None = None
        self.tool_results: dict[str, Any] = {}
        self.tool_errors: dict[str, dict[str, Any]] = {}

    def methods(self) -> list[str]:
        return [m["method"] for m in self.messages]

    def count(self, method: str) -> int:
        return self.methods().count(method)

    def transport(self) -> HttpTransport:
        return HttpTransport(httpx.AsyncClient(transport=httpx.MockTransport(self.handler)))

    async def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.messages.append(body)
        self.urls.append(str(request.url))
        self.headers.append(request.headers)

        if "id" not in body:
            return httpx.Response(202)

        method = body["method"]
        if method == "initialize":
            if self.initialize_gate is not None:
                await self.initialize_gate.wait()
            if self.initialize_status is not None:
                return httpx.Response(self.initialize_status, text="server exploded")
            if self.initialize_error is not None:
                return self._reply(body["id"], error=self.initialize_error)
            return self._reply(
                body["id"],
                result={
                    "protocolVersion": body["params"]["protocolVersion"],
                    "capabilities": {"tools": {}},
                    "serverInfo": {"name": "fake", "version": "0.0.1"},
                },
            )

        if method == "tools/call":
            if self.tool_gate is not None:
                await self.tool_gate.wait()
            name = body["params"]["name"]
            if name in self.tool_errors:
                return self._reply(body["id"], error=self.tool_errors[name])
            default = {"content": [{"type": "text", "text": f"{name} ok"}]}
            return self._reply(body["id"], result=self.tool_results.get(name, default))

        return self._reply(body["id"], error={"code": -32601, "message": "Method not found"})

    def _reply(self, request_id: str, **payload: Any) -> httpx.Response:
        message = {"jsonrpc": "2.0", "id": request_id, **payload}
        if not self.sse:
            return httpx.Response(200, json=message)
        progress = {"jsonrpc": "2.0", "method": "notifications/progress", "params": {}}
        frames = (
            "event: message\n"
            f"data: {json.dumps(progress)}\n\n"
            f"data: {json.dumps(message)}\n\n"
        )
        return httpx.Response(
            200,
            headers={"content-type": "text/event-stream"},
            content=frames.encode(),
        )


@pytest.fixture
def fake_server() -> FakeMCPServer:
    return FakeMCPServer()
