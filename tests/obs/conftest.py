"""In-memory OpenTelemetry span capture for tracing tests."""

from __future__ import annotations

from functools import cache
from typing import Any

import pytest
from opentelemetry import trace


@cache
def _span_exporter() -> Any:
    pytest.importorskip("opentelemetry.sdk")
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import SimpleSpanProcessor
    from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

    exporter = InMemorySpanExporter()
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    trace.set_tracer_provider(provider)
    return exporter


@pytest.fixture
def span_exporter() -> Any:
    """Return the process-wide in-memory exporter, cleared for this test.

    Returns
    -------
    InMemorySpanExporter
        Exporter collecting finished spans.
    """
    exporter = _span_exporter()
    exporter.clear()
    return exporter
