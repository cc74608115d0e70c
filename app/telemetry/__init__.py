"""Telemetry helpers and metrics."""

from .metrics import (
    ANALYSIS_OUTCOMES,
    ERROR_COUNTER,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    observe_analysis_outcome,
    observe_request,
)

__all__ = [
    "ANALYSIS_OUTCOMES",
    "ERROR_COUNTER",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "observe_analysis_outcome",
    "observe_request",
]
