"""toolwire: remote MCP tool calls with bounded output for agent runtimes."""

from __future__ import annotations

from typing import TYPE_CHECKING

__version__ = "0.1.0"

if TYPE_CHECKING:
    from toolwire.integrations.provider import RemoteToolProvider as RemoteToolProvider
    from toolwire.output.bounding import bound as bound
    from toolwire.output.overflow import spill as spill
    from toolwire.protocols.mcp.client import MCPClient as MCPClient

_LAZY_EXPORTS = {
    "MCPClient": "toolwire.protocols.mcp.client",
    "RemoteToolProvider": "toolwire.integrations.provider",
    "bound": "toolwire.output.bounding",
    "spill": "toolwire.output.overflow",
}


def __getattr__(name: str) -> object:
    module_path = _LAZY_EXPORTS.get(name)
    if module_path is not None:
        import importlib

        mod = importlib.import_module(module_path)
        return getattr(mod, name)
    raise AttributeError(f"module 'toolwire' has no attribute {name!r}")
