# jobs/dispatcher.py
"""
Fire-and-forget scheduling of analysis tasks.

`dispatch` never awaits the task: it is handed to the running loop with
`create_task` and starts on a later turn, after the creating request has
returned. There is no queue behind this; tasks still running at shutdown
are abandoned.
"""
from __future__ import annotations

import asyncio
import logging

from jobs.handlers import AnalysisJob, AnalysisTask, handle_analyze_event
from models.event import Event
from services.analysis_engine import AnalysisEngine
from services.observability import AnalysisSink
from services.result_writer import ResultWriter

logger = logging.getLogger(__name__)


class AnalysisDispatcher:
    def __init__(
        self,
        engine: AnalysisEngine,
        writer: ResultWriter,
        sink: AnalysisSink | None = None,
    ) -> None:
        self.engine = engine
        self.writer = writer
        self.sink = sink or AnalysisSink()
        # strong refs so running tasks are not garbage collected
        self._running: set[asyncio.Task[AnalysisTask]] = set()

    @property
    def in_flight(self) -> int:
        return len(self._running)

    def dispatch(self, event: Event, terms: list[str], correlation_id: str) -> AnalysisTask:
        """Schedule exactly one analysis for a freshly committed event."""
        task = AnalysisTask(job=AnalysisJob.from_event(event, terms, correlation_id))

        self.sink.dispatched(
            str(task.job.event_id),
            task.job.event_type,
            str(task.job.watchlist_id),
            correlation_id,
        )

        loop = asyncio.get_running_loop()
        runner = loop.create_task(
            handle_analyze_event(task, self.engine, self.writer, self.sink),
            name=f"analyze-event-{task.job.event_id}",
        )
        self._running.add(runner)
        runner.add_done_callback(self._running.discard)
        return task

    async def drain(self, timeout: float | None = None) -> int:
        """Wait for outstanding tasks; returns how many were still running at the deadline."""
        if not self._running:
            return 0
        pending = set(self._running)
        _, still_running = await asyncio.wait(pending, timeout=timeout)
        if still_running:
            logger.warning("Abandoning %d analysis task(s) still in flight", len(still_running))
        return len(still_running)
