# services/result_writer.py
"""
Applies an analysis onto its stored event.

One UPDATE sets all four analysis columns, guarded by `ai_processed_at IS
NULL`, so readers never see a partial analysis and a repeated apply leaves
the row untouched.
"""
from __future__ import annotations

import logging
import uuid

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ai.analysis import Analysis
from models.base import utcnow
from models.event import Event

logger = logging.getLogger(__name__)


class EventNotFoundError(LookupError):
    def __init__(self, event_id: uuid.UUID | str) -> None:
        super().__init__(f"Event not found: {event_id}")
        self.event_id = event_id


class ResultWriter:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def apply(self, event_id: uuid.UUID, analysis: Analysis) -> None:
        """
        Persist the analysis. Raises EventNotFoundError when the event was
        deleted after dispatch; a second apply on a processed event is a no-op.
        """
        stmt = (
            update(Event)
            .where(Event.id == event_id, Event.ai_processed_at.is_(None))
            .values(
                ai_summary=analysis.summary,
                ai_severity=analysis.severity.value,
                ai_suggested_action=analysis.suggested_action,
                ai_processed_at=utcnow(),
            )
            .execution_options(synchronize_session=False)
        )

        async with self.session_factory() as db:
            result = await db.execute(stmt)
            if result.rowcount == 1:
                await db.commit()
                logger.info("Event %s updated with analysis severity=%s", event_id, analysis.severity.value)
                return

            await db.rollback()
            exists = (await db.execute(select(Event.id).where(Event.id == event_id))).scalar_one_or_none()

        if exists is None:
            raise EventNotFoundError(event_id)
        logger.info("Event %s already processed, skipping write", event_id)
