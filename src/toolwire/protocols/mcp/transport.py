"""MCP transport: JSON-RPC over streamable HTTP.

Every message is a ``POST`` to the endpoint. The server answers with either
one JSON document or an event stream; :class:`HttpTransport` hides the
difference and hands back the decoded :class:`JsonRpcResponse`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Protocol, runtime_checkable

import httpx

from toolwire.protocols.errors import TransportError
from toolwire.protocols.mcp.cancellation import CancelToken, run_cancellable
from toolwire.protocols.mcp.codec import (
    JSON_CONTENT_TYPE,
    SSE_CONTENT_TYPE,
    decode_json_body,
    decode_sse_stream,
    encode,
)
from toolwire.protocols.mcp.models import JsonRpcNotification, JsonRpcRequest, JsonRpcResponse

logger = logging.getLogger(__name__)

BASE_HEADERS = {
    "content-type": JSON_CONTENT_TYPE,
    "accept": f"{JSON_CONTENT_TYPE}, {SSE_CONTENT_TYPE}",
}

_NO_CONTENT = (202, 204)


@runtime_checkable
class MCPTransport(Protocol):
    """Abstract transport for MCP JSON-RPC communication."""

    async def request(
        self,
        endpoint: str,
        message: JsonRpcRequest,
        *,
        headers: Mapping[str, str],
        token: CancelToken,
    ) -> JsonRpcResponse: ...

    async def notify(
        self,
        endpoint: str,
        message: JsonRpcNotification,
        *,
        headers: Mapping[str, str],
        token: CancelToken,
    ) -> None: ...

    async def aclose(self) -> None: ...


class HttpTransport:
    """Posts JSON-RPC messages with :mod:`httpx`.

    A caller-supplied :class:`httpx.AsyncClient` is used as-is and left open;
    otherwise a client is created on first use and closed by :meth:`aclose`.
    """

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        self._client = client
        self._owns_client = client is None

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            # Timeouts come from the cancellation token, not from httpx.
            self._client = httpx.AsyncClient(timeout=None)
        return self._client

    async def request(
        self,
        endpoint: str,
        message: JsonRpcRequest,
        *,
        headers: Mapping[str, str],
        token: CancelToken,
    ) -> JsonRpcResponse:
        """Send *message* and return the response carrying its id."""
        response = await run_cancellable(self._exchange(endpoint, message, headers), token)
        if response is None:
            msg = f"MCP server sent no body for request {message.id}"
            raise TransportError(msg)
        return response

    async def notify(
        self,
        endpoint: str,
        message: JsonRpcNotification,
        *,
        headers: Mapping[str, str],
        token: CancelToken,
    ) -> None:
        """Send *message*; any successful status is accepted and the body ignored."""
        await run_cancellable(self._exchange(endpoint, message, headers), token)

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def _exchange(
        self,
        endpoint: str,
        message: JsonRpcRequest | JsonRpcNotification,
        headers: Mapping[str, str],
    ) -> JsonRpcResponse | None:
        request_id = message.id if isinstance(message, JsonRpcRequest) else None
        try:
            async with self._http().stream(
                "POST",
                endpoint,
                content=encode(message),
                headers={**BASE_HEADERS, **headers},
            ) as response:
                if response.status_code in _NO_CONTENT:
                    return None

                if not response.is_success:
                    body = (await response.aread()).decode("utf-8", errors="replace")
                    msg = f"MCP HTTP {response.status_code}: {body or response.reason_phrase}"
                    raise TransportError(msg, status_code=response.status_code, body=body)

                if request_id is None:
                    return None

                content_type = response.headers.get("content-type", "")
                if JSON_CONTENT_TYPE in content_type:
                    return decode_json_body(await response.aread(), request_id)
                if SSE_CONTENT_TYPE in content_type:
                    return await decode_sse_stream(response.aiter_bytes(), request_id)

                text = (await response.aread()).decode("utf-8", errors="replace")
                msg = (
                    f"Unexpected MCP response content-type: {content_type or 'unknown'}"
                    f" ({text[:200]})"
                )
                raise TransportError(msg, status_code=response.status_code, body=text)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.debug("HTTP failure for %s: %r", message.method, exc)
            raise TransportError(str(exc) or type(exc).__name__) from exc
