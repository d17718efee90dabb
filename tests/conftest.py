# tests/conftest.py
from __future__ import annotations

import asyncio
import uuid

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine

from ai.keyword_analyzer import analyze_keywords
from db.session import build_session_factory
from jobs.dispatcher import AnalysisDispatcher
from models import Base, Event, Watchlist
from services.analysis_engine import AnalysisEngine
from services.observability import AnalysisSink
from services.result_writer import ResultWriter


class GatedEngine:
    """Keyword analysis that waits for `gate` so tests can act mid-task."""

    mode = "fallback"

    def __init__(self) -> None:
        self.gate = asyncio.Event()
        self.calls = 0

    async def analyze(self, event_type, description, metadata, watchlist_terms):
        self.calls += 1
        await self.gate.wait()
        return analyze_keywords(event_type, description, watchlist_terms)


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'signal_watcher.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return build_session_factory(db_engine)


@pytest_asyncio.fixture
async def watchlist(session_factory) -> Watchlist:
    async with session_factory() as db:
        w = Watchlist(name="Malware watch", description="test", terms=["malware", "phishing"])
        db.add(w)
        await db.commit()
    return w


@pytest.fixture
def make_event(session_factory):
    async def _make(watchlist_id: uuid.UUID, **kwargs) -> Event:
        defaults = dict(
            type="malware_detection",
            description="Malware signature detected",
            metadata_={"source_ip": "10.0.0.5"},
        )
        defaults.update(kwargs)
        async with session_factory() as db:
            event = Event(watchlist_id=watchlist_id, **defaults)
            db.add(event)
            await db.commit()
        return event

    return _make


@pytest.fixture
def sink() -> AnalysisSink:
    return AnalysisSink()


@pytest.fixture
def dispatcher(session_factory, sink) -> AnalysisDispatcher:
    return AnalysisDispatcher(AnalysisEngine(), ResultWriter(session_factory), sink)


@pytest.fixture
def gated_engine() -> GatedEngine:
    return GatedEngine()
