#!/usr/bin/env python3
"""Thin OpenTelemetry wrapper - the API is a no-op until an SDK is configured."""

import contextlib
import time
from collections.abc import Generator
from typing import Any

from opentelemetry import metrics, trace

from .constants import (
    INSTRUMENTATION_NAME,
    METRIC_DECISIONS,
    SPAN_PRUNE,
    VERDICT_ALLOWED,
    VERDICT_ATTRIBUTE,
    VERDICT_DENIED,
)

_tracer = trace.get_tracer(INSTRUMENTATION_NAME)
_meter = metrics.get_meter(INSTRUMENTATION_NAME)

_decision_counter = _meter.create_counter(
    METRIC_DECISIONS,
    unit="1",
    description="Admission decisions by verdict",
)

_ALLOWED_ATTRIBUTES = {VERDICT_ATTRIBUTE: VERDICT_ALLOWED}
_DENIED_ATTRIBUTES = {VERDICT_ATTRIBUTE: VERDICT_DENIED}


def record_decision(allowed: bool) -> None:
    """Count one admission decision.

    Client ids are deliberately not attached; they are unbounded.
    """
    _decision_counter.add(1, _ALLOWED_ATTRIBUTES if allowed else _DENIED_ATTRIBUTES)


@contextlib.contextmanager
def trace_prune(max_idle: float) -> Generator[dict[str, Any], None, None]:
    """Context manager that traces a prune pass.

    Usage:
        with trace_prune(600.0) as ctx:
            ctx["removed"] = remove_idle_buckets()
    """
    ctx: dict[str, Any] = {"max_idle": max_idle, "start_time": time.monotonic()}

    with _tracer.start_as_current_span(SPAN_PRUNE, attributes={"prune.max_idle": max_idle}) as span:
        try:
            yield ctx
        except Exception as e:
            span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
            raise
        finally:
            ctx["duration"] = time.monotonic() - ctx["start_time"]
            span.set_attribute("prune.duration_ms", ctx["duration"] * 1000)
            if "removed" in ctx:
                span.set_attribute("prune.removed", ctx["removed"])
