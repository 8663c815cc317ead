"""Prometheus metrics definitions and helpers."""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests processed",
    ("method", "route", "status"),
)

REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ("method", "route"),
    buckets=(
        0.005,
        0.01,
        0.025,
        0.05,
        0.1,
        0.25,
        0.5,
        1.0,
        2.5,
        5.0,
        10.0,
    ),
)

REQUESTS_IN_FLIGHT = Gauge(
    "http_requests_in_flight",
    "HTTP requests currently being served",
    ("method",),
)

ERROR_COUNTER = Counter(
    "http_server_errors_total",
    "Number of requests ending in internal server error responses",
    ("method", "route"),
)

PIPELINE_STAGE_LATENCY = Histogram(
    "briefing_pipeline_stage_duration_seconds",
    "Duration of each briefing pipeline stage in seconds",
    ("stage",),
    buckets=(0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0, 180.0),
)

PIPELINE_FAILURES = Counter(
    "briefing_pipeline_failures_total",
    "Number of briefing pipeline runs aborted, by failing stage",
    ("stage",),
)

LIBRARY_OPERATIONS = Counter(
    "briefing_library_operations_total",
    "Briefing library operations by kind and outcome",
    ("operation", "outcome"),
)

PLAYBACK_TRANSITIONS = Counter(
    "playback_transitions_total",
    "Playback engine state changes by target state",
    ("state",),
)


def observe_request(
    method: str,
    route: str,
    status_code: int,
    duration_seconds: float,
) -> None:
    """Record metrics for a completed HTTP request."""

    safe_route = route or "unknown"
    safe_method = method or "UNKNOWN"
    status_label = str(status_code)
    observed_duration = duration_seconds if duration_seconds >= 0 else 0

    REQUEST_COUNT.labels(
        method=safe_method,
        route=safe_route,
        status=status_label,
    ).inc()
    REQUEST_LATENCY.labels(
        method=safe_method,
        route=safe_route,
    ).observe(observed_duration)

    if status_code >= 500:
        ERROR_COUNTER.labels(
            method=safe_method,
            route=safe_route,
        ).inc()


def observe_stage(stage: str, duration_seconds: float, *, failed: bool = False) -> None:
    """Record the latency of one pipeline stage and count it if it failed."""

    PIPELINE_STAGE_LATENCY.labels(stage=stage).observe(max(0.0, duration_seconds))
    if failed:
        PIPELINE_FAILURES.labels(stage=stage).inc()


def record_library_operation(operation: str, outcome: str) -> None:
    """Count a library add/delete/load by its outcome."""

    LIBRARY_OPERATIONS.labels(operation=operation, outcome=outcome).inc()


def record_playback_transition(state: str) -> None:
    PLAYBACK_TRANSITIONS.labels(state=state).inc()
