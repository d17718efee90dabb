# jobs/handlers.py
"""
Analysis task handler.
Hardened for:
- correlation id on every log line
- its own error boundary (nothing reaches the creating request)
- one write per event
"""
from __future__ import annotations

import copy
import enum
import logging
import time
import uuid
from dataclasses import dataclass
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from models.event import Event
from services.analysis_engine import AnalysisEngine
from services.correlation import correlation_scope
from services.observability import AnalysisSink
from services.result_writer import EventNotFoundError, ResultWriter

logger = logging.getLogger(__name__)


class TaskState(str, enum.Enum):
    SCHEDULED = "scheduled"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class AnalysisJob:
    """Everything one task needs, copied out of the request's objects."""

    event_id: uuid.UUID
    event_type: str
    description: str
    metadata: dict[str, Any]
    watchlist_id: uuid.UUID
    watchlist_terms: tuple[str, ...]
    correlation_id: str

    @classmethod
    def from_event(cls, event: Event, terms: list[str], correlation_id: str) -> AnalysisJob:
        return cls(
            event_id=event.id,
            event_type=event.type,
            description=event.description,
            metadata=copy.deepcopy(event.metadata_ or {}),
            watchlist_id=event.watchlist_id,
            watchlist_terms=tuple(terms or ()),
            correlation_id=correlation_id,
        )


@dataclass
class AnalysisTask:
    job: AnalysisJob
    state: TaskState = TaskState.SCHEDULED
    severity: str | None = None
    error: str | None = None
    latency_ms: int | None = None

    @property
    def done(self) -> bool:
        return self.state in (TaskState.SUCCEEDED, TaskState.FAILED)


async def handle_analyze_event(
    task: AnalysisTask,
    engine: AnalysisEngine,
    writer: ResultWriter,
    sink: AnalysisSink,
) -> AnalysisTask:
    """Analyze, write, log. Always ends SUCCEEDED or FAILED; never raises."""
    job = task.job
    event_id = str(job.event_id)

    with correlation_scope(job.correlation_id):
        task.state = TaskState.RUNNING
        t0 = time.monotonic()
        logger.info("start ANALYZE_EVENT event=%s type=%s", event_id, job.event_type)

        try:
            analysis = await engine.analyze(
                job.event_type,
                job.description,
                job.metadata,
                list(job.watchlist_terms),
            )
            await writer.apply(job.event_id, analysis)
        except EventNotFoundError as exc:
            task.state = TaskState.FAILED
            task.error = str(exc)
        except SQLAlchemyError as exc:
            task.state = TaskState.FAILED
            task.error = f"storage error: {exc.__class__.__name__}: {exc}"
        except Exception as exc:
            logger.exception("analysis task crashed event=%s", event_id)
            task.state = TaskState.FAILED
            task.error = f"{exc.__class__.__name__}: {exc}"
        else:
            task.state = TaskState.SUCCEEDED
            task.severity = analysis.severity.value

        task.latency_ms = int((time.monotonic() - t0) * 1000)

        if task.state is TaskState.SUCCEEDED:
            sink.succeeded(event_id, task.severity, analysis.source, job.correlation_id)
        else:
            sink.failed(event_id, task.error or "unknown error", job.correlation_id)

        logger.info(
            "complete ANALYZE_EVENT event=%s state=%s latency_ms=%s",
            event_id,
            task.state.value,
            task.latency_ms,
        )

    return task
