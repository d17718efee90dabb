# api/app/dependencies.py
from __future__ import annotations

from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from db.session import get_db
from jobs.dispatcher import AnalysisDispatcher
from services.correlation import get_correlation_id, new_correlation_id


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    async for session in get_db(request.app.state.session_factory):
        yield session


def get_dispatcher(request: Request) -> AnalysisDispatcher:
    return request.app.state.dispatcher


def get_request_correlation_id(request: Request) -> str:
    """The id set by CorrelationIdMiddleware (or a fresh one outside it)."""
    return getattr(request.state, "correlation_id", None) or get_correlation_id() or new_correlation_id()
