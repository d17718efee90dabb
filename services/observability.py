# services/observability.py
"""
Structured event logging.

Records are plain log lines carrying `log_event`, `fields` and
`correlation_id` attributes; nothing is persisted. `AnalysisSink` adds the
three analysis-task records and a running tally of outcomes.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any

from services.correlation import get_correlation_id

logger = logging.getLogger(__name__)


def log_event(
    event_type: str,
    level: str = "info",
    source: str | None = None,
    message: str | None = None,
    metadata: dict[str, Any] | None = None,
    correlation_id: str | None = None,
) -> None:
    """Emit a structured event log entry."""
    fields = dict(metadata or {})
    if source:
        fields.setdefault("source", source)
    logger.log(
        getattr(logging, level.upper(), logging.INFO),
        "[%s] %s — %s",
        event_type,
        message or "",
        fields,
        extra={
            "log_event": event_type,
            "fields": fields,
            "correlation_id": correlation_id or get_correlation_id(),
        },
    )


@dataclass(frozen=True)
class AnalysisStats:
    dispatched: int = 0
    succeeded: int = 0
    failed: int = 0
    fallback_used: int = 0

    @property
    def in_progress(self) -> int:
        return self.dispatched - self.succeeded - self.failed

    def as_dict(self) -> dict[str, int]:
        return {**asdict(self), "in_progress": self.in_progress}


class AnalysisSink:
    """Dispatch/success/failure records for analysis tasks."""

    def __init__(self) -> None:
        self._counts = {"dispatched": 0, "succeeded": 0, "failed": 0, "fallback_used": 0}

    def _bump(self, *keys: str) -> None:
        for k in keys:
            self._counts[k] += 1

    @property
    def stats(self) -> AnalysisStats:
        return AnalysisStats(**self._counts)

    def dispatched(self, event_id: str, event_type: str, watchlist_id: str, correlation_id: str) -> None:
        self._bump("dispatched")
        log_event(
            "analysis_dispatched",
            "info",
            source="dispatcher",
            metadata={"event_id": event_id, "type": event_type, "watchlist_id": watchlist_id},
            correlation_id=correlation_id,
        )

    def succeeded(self, event_id: str, severity: str, source: str, correlation_id: str) -> None:
        keys = ("succeeded", "fallback_used") if source == "fallback" else ("succeeded",)
        self._bump(*keys)
        log_event(
            "analysis_succeeded",
            "info",
            source="analysis",
            metadata={"event_id": event_id, "severity": severity, "strategy": source},
            correlation_id=correlation_id,
        )

    def failed(self, event_id: str, error: str, correlation_id: str) -> None:
        self._bump("failed")
        log_event(
            "analysis_failed",
            "error",
            source="analysis",
            metadata={"event_id": event_id, "error": error},
            correlation_id=correlation_id,
        )
