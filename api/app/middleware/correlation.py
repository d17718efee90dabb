# api/app/middleware/correlation.py
"""
Accepts a caller-supplied correlation id header or mints one, exposes it as
`request.state.correlation_id`, and echoes it on the response.
"""
from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from services.correlation import correlation_scope

DEFAULT_HEADER = "X-Correlation-ID"


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, header_name: str = DEFAULT_HEADER) -> None:
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        supplied = (request.headers.get(self.header_name) or "").strip()
        with correlation_scope(supplied or None) as cid:
            request.state.correlation_id = cid
            response = await call_next(request)
        response.headers[self.header_name] = cid
        return response
