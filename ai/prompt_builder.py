# ai/prompt_builder.py
"""
Assembles the analyst prompt from the event fields, its metadata,
and the owning watchlist's terms.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from ai.prompts import CLOSING_INSTRUCTION, RESPONSE_SHAPE, SEVERITY_GUIDELINES


@dataclass
class PromptContext:
    event_type: str
    description: str
    metadata: dict[str, Any] = field(default_factory=dict)
    watchlist_terms: list[str] = field(default_factory=list)


def _serialize_metadata(metadata: dict[str, Any]) -> str:
    # default=str keeps odd values (datetimes, UUIDs) from breaking the prompt
    return json.dumps(metadata or {}, indent=2, default=str)


def build_analysis_prompt(ctx: PromptContext) -> str:
    """Build the user prompt for one event."""
    details = "\n".join(
        [
            "Event Details:",
            f"- Type: {ctx.event_type}",
            f"- Description: {ctx.description}",
            f"- Metadata: {_serialize_metadata(ctx.metadata)}",
            f"- Watchlist Terms: {', '.join(ctx.watchlist_terms)}",
        ]
    )
    return "\n\n".join([RESPONSE_SHAPE, details, SEVERITY_GUIDELINES, CLOSING_INSTRUCTION])
