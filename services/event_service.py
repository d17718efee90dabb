# services/event_service.py
"""
Event creation: the only path that schedules analysis.

The event row is committed before dispatch so the detached task always
finds it; a missing watchlist raises before anything is written or scheduled.
"""
from __future__ import annotations

import logging
import uuid
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from jobs.dispatcher import AnalysisDispatcher
from models.event import Event
from models.watchlist import Watchlist
from services.observability import log_event

logger = logging.getLogger(__name__)


class WatchlistNotFoundError(LookupError):
    def __init__(self, watchlist_id: uuid.UUID | str) -> None:
        super().__init__(f"Watchlist not found: {watchlist_id}")
        self.watchlist_id = watchlist_id


SIMULATED_EVENTS: list[dict[str, Any]] = [
    {
        "type": "suspicious_domain",
        "description": "New suspicious domain detected: malicious-example.com",
        "metadata": {
            "domain": "malicious-example.com",
            "ip": "192.168.1.100",
            "registrar": "unknown",
        },
    },
    {
        "type": "phishing_attempt",
        "description": "Phishing email detected with suspicious links",
        "metadata": {
            "sender": "attacker@fake-bank.com",
            "recipients": 5,
            "blocked": True,
        },
    },
    {
        "type": "malware_detection",
        "description": "Malware signature detected in network traffic",
        "metadata": {
            "signature": "Trojan.Generic.KD.123456",
            "severity": "high",
            "source_ip": "10.0.0.5",
        },
    },
    {
        "type": "unusual_activity",
        "description": "Unusual login activity detected from foreign IP",
        "metadata": {
            "user": "admin@company.com",
            "ip": "203.0.113.1",
            "country": "Unknown",
            "time": "02:30 AM",
        },
    },
    {
        "type": "data_exfiltration",
        "description": "Large data transfer detected to external server",
        "metadata": {
            "bytes": 500000000,
            "destination": "198.51.100.5",
            "protocol": "HTTPS",
        },
    },
]


async def get_watchlist_or_raise(db: AsyncSession, watchlist_id: uuid.UUID) -> Watchlist:
    watchlist = await db.get(Watchlist, watchlist_id)
    if watchlist is None:
        raise WatchlistNotFoundError(watchlist_id)
    return watchlist


async def create_event(
    db: AsyncSession,
    dispatcher: AnalysisDispatcher,
    *,
    event_type: str,
    description: str,
    metadata: dict[str, Any] | None,
    watchlist_id: uuid.UUID,
    correlation_id: str,
) -> Event:
    """Create an unprocessed event and schedule its analysis."""
    watchlist = await get_watchlist_or_raise(db, watchlist_id)

    event = Event(
        type=event_type,
        description=description,
        metadata_=dict(metadata or {}),
        watchlist_id=watchlist.id,
    )
    db.add(event)
    await db.flush()
    # durable before the task can look for it
    await db.commit()

    dispatcher.dispatch(event, list(watchlist.terms or []), correlation_id)

    log_event(
        "event_created",
        "info",
        source="api",
        metadata={"event_id": str(event.id), "type": event_type, "watchlist_id": str(watchlist.id)},
        correlation_id=correlation_id,
    )
    return event


async def simulate_events(
    db: AsyncSession,
    dispatcher: AnalysisDispatcher,
    *,
    watchlist_id: uuid.UUID,
    count: int,
    correlation_id: str,
) -> list[Event]:
    """Create up to len(SIMULATED_EVENTS) canned events, one analysis task each."""
    watchlist = await get_watchlist_or_raise(db, watchlist_id)
    terms = list(watchlist.terms or [])

    created: list[Event] = []
    for data in SIMULATED_EVENTS[: max(0, min(count, len(SIMULATED_EVENTS)))]:
        event = Event(
            type=data["type"],
            description=data["description"],
            metadata_=dict(data["metadata"]),
            watchlist_id=watchlist.id,
        )
        db.add(event)
        await db.flush()
        await db.commit()
        dispatcher.dispatch(event, terms, correlation_id)
        created.append(event)

    log_event(
        "events_simulated",
        "info",
        source="api",
        metadata={"count": len(created), "watchlist_id": str(watchlist.id)},
        correlation_id=correlation_id,
    )
    return created
