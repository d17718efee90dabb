# api/app/schemas/watchlist.py
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from api.app.schemas.event import EventDetail


def _clean_terms(terms: list[str] | None) -> list[str] | None:
    if terms is None:
        return None
    cleaned = [t.strip() for t in terms]
    if any(not t for t in cleaned):
        raise ValueError("terms must be non-empty strings")
    return cleaned


class WatchlistCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    terms: list[str] = Field(..., min_length=1)

    @field_validator("terms")
    @classmethod
    def terms_not_blank(cls, v: list[str]) -> list[str]:
        return _clean_terms(v)


class WatchlistUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = None
    terms: list[str] | None = Field(None, min_length=1)
    is_active: bool | None = None

    @field_validator("terms")
    @classmethod
    def terms_not_blank(cls, v: list[str] | None) -> list[str] | None:
        return _clean_terms(v)


class WatchlistResponse(BaseModel):
    id: uuid.UUID
    name: str
    description: str | None = None
    terms: list[str]
    is_active: bool
    created_at: datetime
    updated_at: datetime
    event_count: int | None = None

    class Config:
        from_attributes = True


class WatchlistDetail(WatchlistResponse):
    events: list[EventDetail] = []
