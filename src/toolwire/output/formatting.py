"""Render a ``tools/call`` result as bounded text for the agent."""

from __future__ import annotations

import json
from typing import Any, Literal

from pydantic import BaseModel

from toolwire.output.bounding import DEFAULT_MAX_BYTES, DEFAULT_MAX_LINES, bound
from toolwire.output.limits import OutputLimits
from toolwire.output.overflow import spill


class TruncationStats(BaseModel):
    truncated_by: Literal["lines", "bytes"] | None = None
    total_lines: int
    total_bytes: int
    output_lines: int
    output_bytes: int
    max_lines: int
    max_bytes: int


class ToolOutputDetails(BaseModel):
    """Structured details reported alongside the rendered text."""

    tool: str
    endpoint: str
    truncated: bool
    truncation: TruncationStats
    temp_file: str | None = None


class FormattedOutput(BaseModel):
    text: str
    details: ToolOutputDetails


def format_size(num_bytes: int) -> str:
    """Human-readable size: ``512B``, ``1.5KB``, ``2.0MB``."""
    if num_bytes < 1024:
        return f"{num_bytes}B"
    if num_bytes < 1024 * 1024:
        return f"{num_bytes / 1024:.1f}KB"
    return f"{num_bytes / (1024 * 1024):.1f}MB"


def to_json_string(value: Any) -> str:
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value, indent=2, ensure_ascii=False)
    except (TypeError, ValueError):
        return str(value)


def render_result_text(result: dict[str, Any]) -> str:
    """Join the result's content blocks into one text blob.

    Text blocks contribute their text; other blocks (images, resources)
    are shown as JSON. A result without blocks is shown whole.
    """
    blocks = result.get("content")
    if not isinstance(blocks, list) or not blocks:
        return to_json_string(result)

    rendered: list[str] = []
    for block in blocks:
        if isinstance(block, dict) and block.get("type") == "text" and isinstance(block.get("text"), str):
            rendered.append(block["text"])
        else:
            rendered.append(to_json_string(block))
    return "\n".join(rendered)


def format_tool_output(
    tool_name: str,
    endpoint: str,
    result: dict[str, Any],
    limits: OutputLimits | None = None,
    *,
    spill_prefix: str = "toolwire",
) -> FormattedOutput:
    """Bound the rendered result and spill the full text when it was cut."""
    raw_text = render_result_text(result)
    bounded = bound(
        raw_text,
        max_lines=limits.max_lines if limits else DEFAULT_MAX_LINES,
        max_bytes=limits.max_bytes if limits else DEFAULT_MAX_BYTES,
    )

    text = bounded.content
    temp_file: str | None = None

    if bounded.truncated:
        temp_file = str(spill(tool_name, raw_text, prefix=spill_prefix))
        text += (
            f"\n\n[Output truncated: {bounded.output_lines} of {bounded.total_lines} lines "
            f"({format_size(bounded.output_bytes)} of {format_size(bounded.total_bytes)}). "
            f"Full output saved to: {temp_file}]"
        )

    if bounded.first_line_exceeds_limit and raw_text:
        text = (
            f"[First line exceeded {format_size(bounded.max_bytes)} limit. "
            f"Full output saved to: {temp_file or 'N/A'}]\n" + text
        )

    stats = TruncationStats.model_validate(bounded.model_dump(exclude={"content", "truncated"}))
    return FormattedOutput(
        text=text,
        details=ToolOutputDetails(
            tool=tool_name,
            endpoint=endpoint,
            truncated=bounded.truncated,
            truncation=stats,
            temp_file=temp_file,
        ),
    )
