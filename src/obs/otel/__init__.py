"""OpenTelemetry helpers for git-history-rows."""

from obs.otel.attributes import normalize_attributes
from obs.otel.scopes import SCOPE_CLI, SCOPE_REFS, SCOPE_SCAN, ScopeName
from obs.otel.tracing import get_tracer, record_exception, set_span_attributes, stage_span

__all__ = [
    "SCOPE_CLI",
    "SCOPE_REFS",
    "SCOPE_SCAN",
    "ScopeName",
    "get_tracer",
    "normalize_attributes",
    "record_exception",
    "set_span_attributes",
    "stage_span",
]
