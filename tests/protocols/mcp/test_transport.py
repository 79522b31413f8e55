"""Tests for HttpTransport against httpx.MockTransport."""

from __future__ import annotations

import json
from collections.abc import Callable

import httpx
import pytest

from toolwire.protocols.errors import CallCancelledError, ProtocolError, TransportError
from toolwire.protocols.mcp.cancellation import CancelToken
from toolwire.protocols.mcp.models import JsonRpcNotification, JsonRpcRequest
from toolwire.protocols.mcp.transport import HttpTransport, MCPTransport

ENDPOINT = "https://mcp.example.com/mcp"


def _transport(handler: Callable[[httpx.Request], httpx.Response]) -> HttpTransport:
    return HttpTransport(httpx.AsyncClient(transport=httpx.MockTransport(handler)))


def _request(request_id: str = "t-1") -> JsonRpcRequest:
    return JsonRpcRequest(id=request_id, method="tools/call", params={"name": "x"})


class TestHttpTransport:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(HttpTransport(), MCPTransport)

    async def test_posts_json_with_merged_headers(self) -> None:
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": "t-1", "result": {}})

        transport = _transport(handler)
        await transport.request(
            ENDPOINT,
            _request(),
            headers={"authorization": "Bearer k"},
            token=CancelToken(),
        )

        sent = captured[0]
        assert sent.method == "POST"
        assert sent.headers["content-type"] == "application/json"
        assert sent.headers["accept"] == "application/json, text/event-stream"
        assert sent.headers["authorization"] == "Bearer k"
        assert json.loads(sent.content)["id"] == "t-1"

    async def test_sse_response(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            frame = json.dumps({"jsonrpc": "2.0", "id": "t-1", "result": {"ok": 1}})
            return httpx.Response(
                200,
                headers={"content-type": "text/event-stream; charset=utf-8"},
                content=f"data: {frame}\n\n".encode(),
            )

        response = await _transport(handler).request(
            ENDPOINT, _request(), headers={}, token=CancelToken()
        )
        assert response.result == {"ok": 1}

    async def test_non_success_status_raises_with_body(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, text="bad key")

        with pytest.raises(TransportError, match="MCP HTTP 401: bad key") as exc_info:
            await _transport(handler).request(ENDPOINT, _request(), headers={}, token=CancelToken())
        assert exc_info.value.status_code == 401
        assert exc_info.value.body == "bad key"

    async def test_non_success_without_body_uses_reason(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503)

        with pytest.raises(TransportError, match="Service Unavailable"):
            await _transport(handler).request(ENDPOINT, _request(), headers={}, token=CancelToken())

    async def test_unexpected_content_type(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, headers={"content-type": "text/html"}, content=b"<html/>")

        with pytest.raises(TransportError, match="Unexpected MCP response content-type: text/html"):
            await _transport(handler).request(ENDPOINT, _request(), headers={}, token=CancelToken())

    async def test_request_with_accepted_status_has_no_body(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(202)

        with pytest.raises(TransportError, match="no body"):
            await _transport(handler).request(ENDPOINT, _request(), headers={}, token=CancelToken())

    @pytest.mark.parametrize("status", [200, 202, 204])
    async def test_notify_accepts_success(self, status: int) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status, text="ignored")

        await _transport(handler).notify(
            ENDPOINT,
            JsonRpcNotification(method="notifications/initialized"),
            headers={},
            token=CancelToken(),
        )

    async def test_mismatched_json_id_in_batch(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=[{"jsonrpc": "2.0", "id": "other", "result": 1}])

        with pytest.raises(ProtocolError):
            await _transport(handler).request(ENDPOINT, _request(), headers={}, token=CancelToken())

    async def test_network_error_is_wrapped(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(TransportError, match="connection refused"):
            await _transport(handler).request(ENDPOINT, _request(), headers={}, token=CancelToken())

    async def test_invalid_url_is_a_transport_error(self) -> None:
        transport = _transport(lambda request: httpx.Response(202))
        with pytest.raises(TransportError):
            await transport.request(
                "http://mcp.example.com:notaport/mcp", _request(), headers={}, token=CancelToken()
            )

    async def test_cancelled_token_short_circuits(self) -> None:
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": "t-1", "result": {}})

        token = CancelToken()
        token.cancel()
        with pytest.raises(CallCancelledError):
            await _transport(handler).request(ENDPOINT, _request(), headers={}, token=token)
        assert calls == []

    async def test_aclose_leaves_injected_client_open(self) -> None:
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(202)))
        await HttpTransport(client).aclose()
        assert not client.is_closed
        await client.aclose()
