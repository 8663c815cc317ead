"""Telemetry helpers and metrics."""

from .metrics import (
    ERROR_COUNTER,
    LIBRARY_OPERATIONS,
    PIPELINE_FAILURES,
    PIPELINE_STAGE_LATENCY,
    PLAYBACK_TRANSITIONS,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    REQUESTS_IN_FLIGHT,
    observe_request,
    observe_stage,
    record_library_operation,
    record_playback_transition,
)

__all__ = [
    "ERROR_COUNTER",
    "LIBRARY_OPERATIONS",
    "PIPELINE_FAILURES",
    "PIPELINE_STAGE_LATENCY",
    "PLAYBACK_TRANSITIONS",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "REQUESTS_IN_FLIGHT",
    "observe_request",
    "observe_stage",
    "record_library_operation",
    "record_playback_transition",
]
