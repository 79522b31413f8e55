"""Head truncation of text by line count and UTF-8 byte count."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

DEFAULT_MAX_BYTES = 50 * 1024
DEFAULT_MAX_LINES = 2000


class BoundingResult(BaseModel):
    """Outcome of :func:`bound`.

    When ``truncated`` is set, ``output_lines <= max_lines`` and
    ``output_bytes <= max_bytes`` always hold.
    """

    content: str
    truncated: bool
    truncated_by: Literal["lines", "bytes"] | None = None
    total_lines: int
    total_bytes: int
    output_lines: int
    output_bytes: int
    max_lines: int
    max_bytes: int
    first_line_exceeds_limit: bool = False


def bound(
    text: str,
    max_lines: int = DEFAULT_MAX_LINES,
    max_bytes: int = DEFAULT_MAX_BYTES,
) -> BoundingResult:
    """Keep the head of *text* within *max_lines* and *max_bytes*.

    Whole lines are kept up to the line budget; if those still exceed the
    byte budget the text is cut at the last complete UTF-8 character that
    fits, which may land inside a line.
    """
    if max_lines < 1 or max_bytes < 1:
        msg = f"Limits must be positive (max_lines={max_lines}, max_bytes={max_bytes})"
        raise ValueError(msg)

    lines = text.split("\n")
    total_lines = len(lines)
    total_bytes = len(text.encode("utf-8"))

    if total_lines <= max_lines and total_bytes <= max_bytes:
        return BoundingResult(
            content=text,
            truncated=False,
            total_lines=total_lines,
            total_bytes=total_bytes,
            output_lines=total_lines,
            output_bytes=total_bytes,
            max_lines=max_lines,
            max_bytes=max_bytes,
        )

    head = "\n".join(lines[:max_lines])
    encoded = head.encode("utf-8")
    if len(encoded) > max_bytes:
        truncated_by: Literal["lines", "bytes"] = "bytes"
        content = encoded[:max_bytes].decode("utf-8", errors="ignore")
    else:
        truncated_by = "lines"
        content = head

    return BoundingResult(
        content=content,
        truncated=True,
        truncated_by=truncated_by,
        total_lines=total_lines,
        total_bytes=total_bytes,
        output_lines=content.count("\n") + 1,
        output_bytes=len(content.encode("utf-8")),
        max_lines=max_lines,
        max_bytes=max_bytes,
        first_line_exceeds_limit=len(lines[0].encode("utf-8")) > max_bytes,
    )
