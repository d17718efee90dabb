# api/app/middleware/metrics.py
"""
In-process request counters for the health endpoint.
"""
from __future__ import annotations

import time
from collections import deque

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

RESPONSE_TIME_WINDOW = 1000


class RequestMetrics:
    def __init__(self) -> None:
        self.started = time.monotonic()
        self.requests = 0
        self.errors = 0
        self.response_times_ms: deque[float] = deque(maxlen=RESPONSE_TIME_WINDOW)

    def record(self, status_code: int, elapsed_ms: float) -> None:
        self.requests += 1
        if status_code >= 400:
            self.errors += 1
        self.response_times_ms.append(elapsed_ms)

    def snapshot(self) -> dict:
        times = self.response_times_ms
        avg = sum(times) / len(times) if times else 0.0
        return {
            "requests": self.requests,
            "errors": self.errors,
            "avg_response_time_ms": round(avg),
            "uptime_seconds": round(time.monotonic() - self.started, 1),
        }


class RequestMetricsMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, metrics: RequestMetrics) -> None:
        super().__init__(app)
        self.metrics = metrics

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        t0 = time.monotonic()
        try:
            response = await call_next(request)
        except Exception:
            self.metrics.record(500, (time.monotonic() - t0) * 1000)
            raise
        self.metrics.record(response.status_code, (time.monotonic() - t0) * 1000)
        return response
