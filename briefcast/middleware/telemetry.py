"""Prometheus request metrics keyed by route template."""

from __future__ import annotations

import time
from typing import Any, Iterable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

from briefcast.telemetry import REQUESTS_IN_FLIGHT, observe_request

UNMATCHED_ROUTE = "unmatched"
DEFAULT_EXCLUDED_PATHS = ("/metrics", "/health")


def route_template(request: Request) -> str:
    """``/library/{briefing_id}/play`` rather than the concrete id."""

    route: Any = request.scope.get("route")
    return getattr(route, "path", None) or UNMATCHED_ROUTE


class TelemetryMiddleware(BaseHTTPMiddleware):
    """Time briefing, playback and library requests.

    Scrape and liveness polling is not recorded. Requests that match no route
    share one label, so stray URLs cannot grow the series count.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        excluded_paths: Iterable[str] = DEFAULT_EXCLUDED_PATHS,
    ) -> None:
        super().__init__(app)
        self._excluded = frozenset(excluded_paths)

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        if request.url.path in self._excluded:
            return await call_next(request)

        status_code = 500
        started = time.perf_counter()
        with REQUESTS_IN_FLIGHT.labels(method=request.method).track_inprogress():
            try:
                response = await call_next(request)
                status_code = response.status_code
                return response
            finally:
                observe_request(
                    request.method,
                    route_template(request),
                    status_code,
                    time.perf_counter() - started,
                )
