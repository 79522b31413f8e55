"""OpenTelemetry tracing for tool calls.

Code paths take a tracer from :func:`get_tracer` and open spans
unconditionally; until :func:`configure_telemetry` installs an SDK provider
the API hands back no-op spans, so the ``otel`` extra stays optional::

    _tracer = get_tracer(__name__)

    with _tracer.start_as_current_span("toolwire.mcp.call_tool") as span:
        span.set_attribute(ATTR_TOOL_NAME, "web_search_exa")
"""

from __future__ import annotations

import os
from typing import Any

from opentelemetry import trace

# ---------------------------------------------------------------------------
# Span attribute keys
# ---------------------------------------------------------------------------

ATTR_PROFILE = "toolwire.profile"
ATTR_TOOL_NAME = "toolwire.tool.name"
ATTR_TOOL_IS_ERROR = "toolwire.tool.is_error"
ATTR_MCP_PROTOCOL_VERSION = "toolwire.mcp.protocol_version"
ATTR_OUTPUT_TRUNCATED = "toolwire.output.truncated"

OTLP_ENDPOINT_ENV = "TOOLWIRE_OTLP_ENDPOINT"

_INSTRUMENTATION_NAME = "toolwire"


def get_tracer(name: str | None = None) -> trace.Tracer:
    return trace.get_tracer(name or _INSTRUMENTATION_NAME)


def configure_telemetry(
    *,
    service_name: str = "toolwire",
    export_to_console: bool = True,
    otlp_endpoint: str | None = None,
) -> None:
    """Install an SDK tracer provider (requires ``toolwire[otel]``).

    Spans go to stdout when *export_to_console* is set, and over OTLP/gRPC
    to *otlp_endpoint*, which defaults to ``$TOOLWIRE_OTLP_ENDPOINT``.

    Raises:
        ImportError: ``opentelemetry-sdk`` (or, for OTLP export,
            ``opentelemetry-exporter-otlp``) is not installed.
    """
    try:
        from opentelemetry.sdk.resources import Resource
        from opentelemetry.sdk.trace import TracerProvider
        from opentelemetry.sdk.trace.export import BatchSpanProcessor, SimpleSpanProcessor
    except ImportError as exc:
        msg = (
            "opentelemetry-sdk is required for configure_telemetry(). "
            "Install it with: pip install toolwire[otel]"
        )
        raise ImportError(msg) from exc

    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))

    if export_to_console:
        from opentelemetry.sdk.trace.export import ConsoleSpanExporter

        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))

    endpoint = otlp_endpoint or os.environ.get(OTLP_ENDPOINT_ENV)
    if endpoint:
        provider.add_span_processor(BatchSpanProcessor(_otlp_exporter(endpoint)))

    trace.set_tracer_provider(provider)


def _otlp_exporter(endpoint: str) -> Any:
    try:
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
    except ImportError as exc:
        msg = (
            "opentelemetry-exporter-otlp is required for OTLP export. "
            "Install it with: pip install toolwire[otel]"
        )
        raise ImportError(msg) from exc
    return OTLPSpanExporter(endpoint=endpoint)
