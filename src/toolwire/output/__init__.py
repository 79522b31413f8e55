"""Output bounding: cap tool results and spill the overflow to disk."""

from toolwire.output.bounding import DEFAULT_MAX_BYTES, DEFAULT_MAX_LINES, BoundingResult, bound
from toolwire.output.formatting import FormattedOutput, format_size, format_tool_output
from toolwire.output.overflow import spill

__all__ = [
    "DEFAULT_MAX_BYTES",
    "DEFAULT_MAX_LINES",
    "BoundingResult",
    "FormattedOutput",
    "bound",
    "format_size",
    "format_tool_output",
    "spill",
]
