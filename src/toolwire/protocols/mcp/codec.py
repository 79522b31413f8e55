"""Wire codec: JSON-RPC bodies in, JSON-RPC bodies out.

Two response transports are understood:

* a single ``application/json`` document (one response or a batch array);
* a ``text/event-stream`` body of ``data: <json>`` frames, read incrementally
  until the frame answering our request id shows up.
"""

from __future__ import annotations

import codecs
import json
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from toolwire.protocols.errors import ProtocolError
from toolwire.protocols.mcp.models import JsonRpcNotification, JsonRpcRequest, JsonRpcResponse

if TYPE_CHECKING:
    from collections.abc import AsyncIterable

JSON_CONTENT_TYPE = "application/json"
SSE_CONTENT_TYPE = "text/event-stream"

_DATA_MARKER = "data:"
_STREAM_SENTINEL = "[DONE]"


def encode(message: JsonRpcRequest | JsonRpcNotification) -> bytes:
    """Serialize a request or notification as one JSON document."""
    return message.model_dump_json().encode("utf-8")


def is_json_rpc_response(value: Any) -> bool:
    return isinstance(value, dict) and value.get("jsonrpc") == "2.0"


def decode_json_body(body: bytes | str, request_id: str) -> JsonRpcResponse:
    """Decode a single-document body into the response for *request_id*.

    A batch array must contain an element answering *request_id*; a lone
    document only has to be JSON-RPC shaped.
    """
    try:
        payload = json.loads(body)
    except ValueError as exc:
        raise ProtocolError(f"MCP response is not valid JSON: {exc}") from exc

    if isinstance(payload, list):
        for item in payload:
            if is_json_rpc_response(item) and item.get("id") == request_id:
                return _validate(item)
        raise ProtocolError("MCP response did not include matching request id.")

    if is_json_rpc_response(payload):
        return _validate(payload)

    raise ProtocolError("Invalid MCP response payload.")


async def decode_sse_stream(chunks: AsyncIterable[bytes], request_id: str) -> JsonRpcResponse:
    """Read ``data:`` frames from *chunks* until one answers *request_id*.

    Frames that are not JSON, or that answer some other id, are skipped.
    Reading stops at the first match, so later frames are never pulled
    from the stream.
    """
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    buffer = ""

    async for chunk in chunks:
        buffer += decoder.decode(chunk)
        while "\n" in buffer:
            line, buffer = buffer.split("\n", 1)
            match = _match_frame(line, request_id)
            if match is not None:
                return match

    buffer += decoder.decode(b"", final=True)
    if buffer:
        match = _match_frame(buffer, request_id)
        if match is not None:
            return match

    raise ProtocolError("MCP SSE response ended without a matching result.")


def _match_frame(line: str, request_id: str) -> JsonRpcResponse | None:
    line = line.rstrip()
    if not line.startswith(_DATA_MARKER):
        return None

    data = line[len(_DATA_MARKER) :].strip()
    if not data or data == _STREAM_SENTINEL:
        return None

    try:
        parsed = json.loads(data)
    except ValueError:
        # Malformed frame
        return None

    if isinstance(parsed, dict) and parsed.get("id") == request_id:
        return _validate(parsed)
    return None


def _validate(raw: dict[str, Any]) -> JsonRpcResponse:
    try:
        return JsonRpcResponse.model_validate(raw)
    except ValidationError as exc:
        raise ProtocolError(f"Malformed JSON-RPC response: {exc.error_count()} error(s)") from exc
