"""Integrations: remote tool execution for the host agent runtime."""

from toolwire.integrations.provider import RemoteToolProvider, ToolOutcome

__all__ = ["RemoteToolProvider", "ToolOutcome"]
