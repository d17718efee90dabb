# api/app/routes/watchlists.py
from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from api.app.dependencies import get_request_correlation_id, get_session
from api.app.schemas.envelope import Envelope
from api.app.schemas.event import EventDetail
from api.app.schemas.watchlist import (
    WatchlistCreate,
    WatchlistDetail,
    WatchlistResponse,
    WatchlistUpdate,
)
from models.event import Event
from models.watchlist import Watchlist
from services.observability import log_event

router = APIRouter(tags=["watchlists"])

RECENT_EVENTS = 10


async def _get_watchlist(db: AsyncSession, watchlist_id: uuid.UUID) -> Watchlist:
    watchlist = await db.get(Watchlist, watchlist_id)
    if watchlist is None:
        raise HTTPException(status_code=404, detail="Watchlist not found")
    return watchlist


@router.get("/watchlists", response_model=Envelope[list[WatchlistResponse]])
async def list_watchlists(
    db: AsyncSession = Depends(get_session),
    correlation_id: str = Depends(get_request_correlation_id),
):
    counts = (
        select(Event.watchlist_id, func.count(Event.id).label("n"))
        .group_by(Event.watchlist_id)
        .subquery()
    )
    stmt = (
        select(Watchlist, func.coalesce(counts.c.n, 0))
        .outerjoin(counts, counts.c.watchlist_id == Watchlist.id)
        .order_by(Watchlist.created_at.desc())
    )
    rows = (await db.execute(stmt)).all()
    data = [
        WatchlistResponse.model_validate(w).model_copy(update={"event_count": n})
        for w, n in rows
    ]
    return Envelope(data=data, correlation_id=correlation_id)


@router.post("/watchlists", status_code=status.HTTP_201_CREATED, response_model=Envelope[WatchlistResponse])
async def create_watchlist(
    body: WatchlistCreate,
    db: AsyncSession = Depends(get_session),
    correlation_id: str = Depends(get_request_correlation_id),
):
    watchlist = Watchlist(
        name=body.name,
        description=body.description,
        terms=body.terms,
    )
    db.add(watchlist)
    await db.flush()

    log_event("watchlist_created", "info", source="api", metadata={
        "watchlist_id": str(watchlist.id),
        "name": watchlist.name,
    })

    return Envelope(data=WatchlistResponse.model_validate(watchlist), correlation_id=correlation_id)


@router.get("/watchlists/{watchlist_id}", response_model=Envelope[WatchlistDetail])
async def get_watchlist(
    watchlist_id: uuid.UUID,
    db: AsyncSession = Depends(get_session),
    correlation_id: str = Depends(get_request_correlation_id),
):
    watchlist = await _get_watchlist(db, watchlist_id)
    stmt = (
        select(Event)
        .where(Event.watchlist_id == watchlist_id)
        .order_by(Event.created_at.desc())
        .limit(RECENT_EVENTS)
    )
    events = (await db.execute(stmt)).scalars().all()

    detail = WatchlistDetail(
        **WatchlistResponse.model_validate(watchlist).model_dump(),
        events=[EventDetail.model_validate(e) for e in events],
    )
    return Envelope(data=detail, correlation_id=correlation_id)


@router.put("/watchlists/{watchlist_id}", response_model=Envelope[WatchlistResponse])
async def update_watchlist(
    watchlist_id: uuid.UUID,
    body: WatchlistUpdate,
    db: AsyncSession = Depends(get_session),
    correlation_id: str = Depends(get_request_correlation_id),
):
    watchlist = await _get_watchlist(db, watchlist_id)

    update_data = body.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if field in ("name", "terms", "is_active") and value is None:
            continue
        setattr(watchlist, field, value)

    await db.flush()
    await db.refresh(watchlist)

    log_event("watchlist_updated", "info", source="api", metadata={
        "watchlist_id": str(watchlist.id),
        "fields": list(update_data.keys()),
    })

    return Envelope(data=WatchlistResponse.model_validate(watchlist), correlation_id=correlation_id)


@router.delete("/watchlists/{watchlist_id}", response_model=Envelope[None])
async def delete_watchlist(
    watchlist_id: uuid.UUID,
    db: AsyncSession = Depends(get_session),
    correlation_id: str = Depends(get_request_correlation_id),
):
    """Delete a watchlist and every event that belongs to it."""
    watchlist = await _get_watchlist(db, watchlist_id)

    # explicit so the cascade holds on backends without FK enforcement
    await db.execute(delete(Event).where(Event.watchlist_id == watchlist_id))
    await db.delete(watchlist)
    await db.flush()

    log_event("watchlist_deleted", "info", source="api", metadata={"watchlist_id": str(watchlist_id)})

    return Envelope(message="Watchlist deleted successfully", correlation_id=correlation_id)
