"""Per-call output limits requested through tool arguments."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from toolwire.config.normalize import normalize_number

MAX_BYTES_PARAM = "piMaxBytes"
MAX_LINES_PARAM = "piMaxLines"


class OutputLimits(BaseModel):
    max_bytes: int
    max_lines: int


class RequestedLimits(BaseModel):
    max_bytes: int | None = None
    max_lines: int | None = None


def _as_int(value: Any) -> int | None:
    number = normalize_number(value)
    return int(number) if number is not None else None


def split_params(params: dict[str, Any]) -> tuple[dict[str, Any], RequestedLimits]:
    """Separate the client-side limit overrides from the remote tool arguments."""
    tool_args = {k: v for k, v in params.items() if k not in (MAX_BYTES_PARAM, MAX_LINES_PARAM)}
    requested = RequestedLimits(
        max_bytes=_as_int(params.get(MAX_BYTES_PARAM)),
        max_lines=_as_int(params.get(MAX_LINES_PARAM)),
    )
    return tool_args, requested


def resolve_effective_limits(requested: RequestedLimits, allowed: OutputLimits) -> OutputLimits:
    """Clamp requested limits to the configured maximum."""
    max_bytes = requested.max_bytes if requested.max_bytes is not None else allowed.max_bytes
    max_lines = requested.max_lines if requested.max_lines is not None else allowed.max_lines
    return OutputLimits(
        max_bytes=max(1, min(max_bytes, allowed.max_bytes)),
        max_lines=max(1, min(max_lines, allowed.max_lines)),
    )
