# api/app/schemas/event.py
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, Field

from models.event import Severity


class EventCreate(BaseModel):
    type: str = Field(..., min_length=1, max_length=128)
    description: str = Field(..., min_length=1)
    metadata: dict[str, Any] = Field(default_factory=dict)
    watchlist_id: uuid.UUID


class EventSimulate(BaseModel):
    watchlist_id: uuid.UUID
    count: int = Field(3, ge=1, le=10)


class EventDetail(BaseModel):
    id: uuid.UUID
    type: str
    description: str
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("metadata_", "metadata"),
    )
    watchlist_id: uuid.UUID
    ai_summary: str | None = None
    ai_severity: Severity | None = None
    ai_suggested_action: str | None = None
    ai_processed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
