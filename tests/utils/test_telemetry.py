"""Tests for the tracing helpers."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from opentelemetry import trace

from toolwire.utils.telemetry import (
    _INSTRUMENTATION_NAME,
    ATTR_PROFILE,
    ATTR_TOOL_NAME,
    configure_telemetry,
    get_tracer,
)


class TestGetTracer:
    def test_returns_tracer(self) -> None:
        assert isinstance(get_tracer("toolwire.test"), trace.Tracer)
        assert isinstance(get_tracer(), trace.Tracer)

    def test_spans_work_without_sdk(self) -> None:
        with get_tracer("toolwire.noop").start_as_current_span("call") as span:
            span.set_attribute(ATTR_TOOL_NAME, "web_search_exa")


class TestConfigureTelemetry:
    def test_raises_without_sdk(self) -> None:
        with patch.dict("sys.modules", {"opentelemetry.sdk.resources": None}):
            with pytest.raises(ImportError, match="toolwire\\[otel\\]"):
                configure_telemetry()

    def test_otlp_from_env_needs_exporter(self, monkeypatch: pytest.MonkeyPatch) -> None:
        pytest.importorskip("opentelemetry.sdk.trace")
        monkeypatch.setenv("TOOLWIRE_OTLP_ENDPOINT", "http://localhost:4317")
        with patch.dict(
            "sys.modules",
            {"opentelemetry.exporter.otlp.proto.grpc.trace_exporter": None},
        ):
            with pytest.raises(ImportError, match="opentelemetry-exporter-otlp"):
                configure_telemetry(export_to_console=False)


class TestAttributeConstants:
    def test_namespaced(self) -> None:
        assert ATTR_PROFILE.startswith("toolwire.")
        assert ATTR_TOOL_NAME.startswith("toolwire.")
        assert _INSTRUMENTATION_NAME == "toolwire"
