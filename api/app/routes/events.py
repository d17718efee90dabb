# api/app/routes/events.py
from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from api.app.dependencies import get_dispatcher, get_request_correlation_id, get_session
from api.app.schemas.envelope import Envelope
from api.app.schemas.event import EventCreate, EventDetail, EventSimulate
from jobs.dispatcher import AnalysisDispatcher
from models.event import Event, Severity
from services.event_service import WatchlistNotFoundError, create_event, simulate_events

router = APIRouter(tags=["events"])

LIST_LIMIT = 50


@router.get("/events", response_model=Envelope[list[EventDetail]])
async def list_events(
    watchlist_id: uuid.UUID | None = None,
    severity: Severity | None = None,
    db: AsyncSession = Depends(get_session),
    correlation_id: str = Depends(get_request_correlation_id),
):
    """Newest events first, optionally filtered by watchlist and severity."""
    stmt = select(Event).order_by(Event.created_at.desc()).limit(LIST_LIMIT)
    if watchlist_id is not None:
        stmt = stmt.where(Event.watchlist_id == watchlist_id)
    if severity is not None:
        stmt = stmt.where(Event.ai_severity == severity.value)

    events = (await db.execute(stmt)).scalars().all()
    return Envelope(
        data=[EventDetail.model_validate(e) for e in events],
        correlation_id=correlation_id,
    )


@router.post("/events", status_code=status.HTTP_201_CREATED, response_model=Envelope[EventDetail])
async def create_event_route(
    body: EventCreate,
    db: AsyncSession = Depends(get_session),
    dispatcher: AnalysisDispatcher = Depends(get_dispatcher),
    correlation_id: str = Depends(get_request_correlation_id),
):
    """Create an event; its analysis runs after this response is returned."""
    try:
        event = await create_event(
            db,
            dispatcher,
            event_type=body.type,
            description=body.description,
            metadata=body.metadata,
            watchlist_id=body.watchlist_id,
            correlation_id=correlation_id,
        )
    except WatchlistNotFoundError:
        raise HTTPException(status_code=404, detail="Watchlist not found")

    return Envelope(
        data=EventDetail.model_validate(event),
        message="Event created, AI analysis in progress",
        correlation_id=correlation_id,
    )


@router.post("/events/simulate", status_code=status.HTTP_201_CREATED, response_model=Envelope[list[EventDetail]])
async def simulate_events_route(
    body: EventSimulate,
    db: AsyncSession = Depends(get_session),
    dispatcher: AnalysisDispatcher = Depends(get_dispatcher),
    correlation_id: str = Depends(get_request_correlation_id),
):
    try:
        events = await simulate_events(
            db,
            dispatcher,
            watchlist_id=body.watchlist_id,
            count=body.count,
            correlation_id=correlation_id,
        )
    except WatchlistNotFoundError:
        raise HTTPException(status_code=404, detail="Watchlist not found")

    return Envelope(
        data=[EventDetail.model_validate(e) for e in events],
        message=f"{len(events)} events simulated successfully",
        correlation_id=correlation_id,
    )


@router.get("/events/{event_id}", response_model=Envelope[EventDetail])
async def get_event(
    event_id: uuid.UUID,
    db: AsyncSession = Depends(get_session),
    correlation_id: str = Depends(get_request_correlation_id),
):
    """Poll one event; analysis fields stay null until enrichment lands."""
    event = await db.get(Event, event_id)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return Envelope(data=EventDetail.model_validate(event), correlation_id=correlation_id)
