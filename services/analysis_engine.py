# services/analysis_engine.py
"""
Analysis strategy selection.

1. Remote: OpenAI analyst, used only when an API key is configured.
2. Fallback: keyword analyzer, pinned when there is no key, and substituted
   per call whenever the remote attempt fails.

The mode is decided once when the engine is built and never changes; a failed
remote call only affects that call.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ai.analysis import Analysis
from ai.keyword_analyzer import analyze_keywords
from api.app.config import Settings
from services.openai_llm import build_client
from services.remote_analyzer import RemoteAnalyzer

logger = logging.getLogger(__name__)

MODE_REMOTE = "remote"
MODE_FALLBACK = "fallback"


@dataclass(frozen=True)
class AnalysisEngine:
    remote: RemoteAnalyzer | None = None
    model: str | None = None

    @property
    def mode(self) -> str:
        return MODE_REMOTE if self.remote is not None else MODE_FALLBACK

    @classmethod
    def from_settings(cls, settings: Settings) -> AnalysisEngine:
        if settings.remote_analysis_enabled:
            remote = RemoteAnalyzer(
                build_client(settings),
                model=settings.openai_model,
                temperature=settings.openai_temperature,
                max_tokens=settings.openai_max_tokens,
            )
            engine = cls(remote=remote, model=settings.openai_model)
        else:
            engine = cls()
        logger.info("Analysis engine initialized: mode=%s model=%s", engine.mode, engine.model or "-")
        return engine

    async def analyze(
        self,
        event_type: str,
        description: str,
        metadata: dict[str, Any] | None,
        watchlist_terms: list[str],
    ) -> Analysis:
        """Produce an analysis; falls back to keywords instead of failing."""
        if self.remote is not None:
            outcome = await self.remote.analyze(event_type, description, metadata or {}, watchlist_terms)
            if outcome.ok:
                logger.info(
                    "AI analysis completed: type=%s severity=%s",
                    event_type,
                    outcome.analysis.severity.value,
                )
                return outcome.analysis
            logger.error(
                "AI analysis failed, using keyword fallback: type=%s reason=%s",
                event_type,
                outcome.reason,
            )

        return analyze_keywords(event_type, description, watchlist_terms)
