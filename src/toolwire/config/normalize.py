"""Lenient coercion of values read from flags, environment and config files."""

from __future__ import annotations

import math
from typing import Any

__all__ = [
    "normalize_headers",
    "normalize_number",
    "normalize_string",
    "normalize_tools",
    "parse_timeout_ms",
]


def normalize_number(value: Any) -> float | None:
    """Accept finite numbers and numeric strings; anything else is ``None``."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return float(value) if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError:
            return None
        return parsed if math.isfinite(parsed) else None
    return None


def normalize_string(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    return trimmed or None


def normalize_tools(value: Any) -> list[str] | None:
    """Tools from a comma-separated string or a list; blanks and non-strings dropped."""
    if isinstance(value, str):
        items = [tool.strip() for tool in value.split(",")]
    elif isinstance(value, list):
        items = [tool.strip() if isinstance(tool, str) else "" for tool in value]
    else:
        return None
    tools = [tool for tool in items if tool]
    return tools or None


def normalize_headers(value: Any) -> dict[str, str] | None:
    """Keep only string-valued headers."""
    if not isinstance(value, dict):
        return None
    headers = {str(k): v for k, v in value.items() if isinstance(v, str)}
    return headers or None


def parse_timeout_ms(value: Any, fallback: float) -> float:
    """Positive numeric timeout, or *fallback* for anything else."""
    parsed = normalize_number(value)
    if parsed is None or parsed <= 0:
        return fallback
    return parsed
