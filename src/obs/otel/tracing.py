"""Tracing helpers for git-history-rows instrumentation."""

from __future__ import annotations

import time
from collections.abc import Iterator, Mapping
from contextlib import contextmanager

from opentelemetry import trace
from opentelemetry.trace import Span, Status, StatusCode

from obs.otel.attributes import normalize_attributes

_SLOW_THRESHOLD_S = 5.0


def get_tracer(scope_name: str) -> trace.Tracer:
    """Return a tracer for the given instrumentation scope.

    Parameters
    ----------
    scope_name
        Instrumentation scope name.

    Returns
    -------
    opentelemetry.trace.Tracer
        Tracer bound to the requested scope.
    """
    return trace.get_tracer(scope_name)


def set_span_attributes(span: Span, attrs: Mapping[str, object] | None) -> None:
    """Attach normalized attributes to a span."""
    for key, value in normalize_attributes(attrs).items():
        span.set_attribute(key, value)


def record_exception(span: Span, exc: Exception) -> None:
    """Record an exception on a span and mark it as error.

    Parameters
    ----------
    span
        Span to annotate.
    exc
        Exception to record.
    """
    span.record_exception(exc)
    span.set_status(Status(StatusCode.ERROR))


@contextmanager
def stage_span(
    name: str,
    *,
    stage: str,
    scope_name: str,
    attributes: Mapping[str, object] | None = None,
) -> Iterator[Span]:
    """Start a stage span and record its duration and status.

    Parameters
    ----------
    name
        Span name.
    stage
        Stage name for attributes.
    scope_name
        Instrumentation scope name.
    attributes
        Optional span attributes.

    Yields
    ------
    Span
        The started span.
    """
    base_attrs: dict[str, object] = {"git_history.stage": stage}
    if attributes:
        base_attrs.update(attributes)
    tracer = get_tracer(scope_name)
    start = time.monotonic()
    status = "ok"
    with tracer.start_as_current_span(
        name,
        attributes=normalize_attributes(base_attrs),
        record_exception=False,
        set_status_on_exception=False,
    ) as span:
        span.add_event("stage.start", attributes=normalize_attributes({"stage": stage}))
        try:
            yield span
        except Exception as exc:
            status = "error"
            record_exception(span, exc)
            raise
        finally:
            duration_s = time.monotonic() - start
            slow_attrs: dict[str, object] = {}
            if duration_s >= _SLOW_THRESHOLD_S:
                slow_attrs = {
                    "git_history.slow": True,
                    "git_history.slow_threshold_s": _SLOW_THRESHOLD_S,
                }
            set_span_attributes(span, {"duration_s": duration_s, "status": status, **slow_attrs})
            span.add_event(
                "stage.end",
                attributes=normalize_attributes(
                    {"stage": stage, "status": status, "duration_s": duration_s}
                ),
            )


__all__ = ["get_tracer", "record_exception", "set_span_attributes", "stage_span"]
