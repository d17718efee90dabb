# models/watchlist.py
from __future__ import annotations

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base, JSONType, TimestampMixin, UUIDPrimaryKey


class Watchlist(Base, UUIDPrimaryKey, TimestampMixin):
    __tablename__ = "watchlists"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    # ordered, matched case-insensitively
    terms: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    events = relationship(
        "Event",
        back_populates="watchlist",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
