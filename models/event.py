# models/event.py
from __future__ import annotations

import enum
import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base, JSONType, TimestampMixin, UUIDPrimaryKey


class Severity(str, enum.Enum):
    LOW = "LOW"
    MED = "MED"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"

    @classmethod
    def coerce(cls, value: object, default: Severity | None = None) -> Severity | None:
        """Return the matching rank, or `default` when value is outside the domain."""
        try:
            return cls(value)
        except ValueError:
            return default


class Event(Base, UUIDPrimaryKey, TimestampMixin):
    __tablename__ = "events"
    __table_args__ = (
        CheckConstraint(
            "ai_severity IS NULL OR ai_severity IN ('LOW', 'MED', 'HIGH', 'CRITICAL')",
            name="ck_events_ai_severity",
        ),
        CheckConstraint(
            "(ai_summary IS NULL AND ai_severity IS NULL"
            " AND ai_suggested_action IS NULL AND ai_processed_at IS NULL)"
            " OR (ai_summary IS NOT NULL AND ai_severity IS NOT NULL"
            " AND ai_suggested_action IS NOT NULL AND ai_processed_at IS NOT NULL)",
            name="ck_events_analysis_all_or_none",
        ),
    )

    type: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    metadata_: Mapped[dict] = mapped_column("metadata", JSONType, nullable=False, default=dict)
    watchlist_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("watchlists.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Analysis: all null until the result writer sets them together
    ai_summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    ai_severity: Mapped[str | None] = mapped_column(String(16), nullable=True, index=True)
    ai_suggested_action: Mapped[str | None] = mapped_column(Text, nullable=True)
    ai_processed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    watchlist = relationship("Watchlist", back_populates="events")
