# api/app/main.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from starlette.exceptions import HTTPException

from api.app.config import Settings, get_settings
from api.app.log_config import configure_logging
from api.app.middleware.correlation import CorrelationIdMiddleware
from api.app.middleware.metrics import RequestMetrics, RequestMetricsMiddleware
from api.app.middleware.request_logging import RequestLoggingMiddleware
from api.app.routes import events, health, watchlists
from db.session import get_session_factory
from jobs.dispatcher import AnalysisDispatcher
from services.analysis_engine import AnalysisEngine
from services.observability import AnalysisSink
from services.result_writer import ResultWriter

logger = logging.getLogger(__name__)

SHUTDOWN_DRAIN_SECONDS = 5.0


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # best effort: whatever is still running after the grace period is dropped
    await app.state.dispatcher.drain(timeout=SHUTDOWN_DRAIN_SECONDS)


def _correlation_id(request: Request) -> str | None:
    return getattr(request.state, "correlation_id", None)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.detail, "correlation_id": _correlation_id(request)},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error on %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
        extra={"correlation_id": _correlation_id(request)},
    )
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": "Internal server error", "correlation_id": _correlation_id(request)},
    )


def create_app(
    settings: Settings | None = None,
    session_factory: async_sessionmaker[AsyncSession] | None = None,
    analysis_engine: AnalysisEngine | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    session_factory = session_factory or get_session_factory()
    analysis_engine = analysis_engine or AnalysisEngine.from_settings(settings)

    app = FastAPI(
        title="Signal Watcher API",
        description="Security event watchlists with asynchronous AI enrichment",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.session_factory = session_factory
    app.state.analysis_engine = analysis_engine
    app.state.dispatcher = AnalysisDispatcher(
        engine=analysis_engine,
        writer=ResultWriter(session_factory),
        sink=AnalysisSink(),
    )
    app.state.request_metrics = RequestMetrics() if settings.enable_metrics else None

    # last added runs first: correlation wraps everything below it
    app.add_middleware(RequestLoggingMiddleware)
    if app.state.request_metrics is not None:
        app.add_middleware(RequestMetricsMiddleware, metrics=app.state.request_metrics)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.cors_origin],
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[settings.correlation_header],
    )
    app.add_middleware(CorrelationIdMiddleware, header_name=settings.correlation_header)

    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(health.router)
    app.include_router(watchlists.router, prefix="/api")
    app.include_router(events.router, prefix="/api")
    return app


configure_logging(get_settings().log_level)
app = create_app()


def main() -> None:
    settings = get_settings()
    uvicorn.run("api.app.main:app", host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    main()
