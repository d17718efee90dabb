# ai/analysis.py
"""
Value types shared by both analysis strategies.

`AnalysisOutcome` is the explicit success/failure result the remote strategy
and the response parser hand back, so the engine decides on fallback by
looking at data instead of catching exceptions.
"""
from __future__ import annotations

from dataclasses import dataclass

from models.event import Severity

SOURCE_REMOTE = "remote"
SOURCE_FALLBACK = "fallback"


@dataclass(frozen=True)
class Analysis:
    summary: str
    severity: Severity
    suggested_action: str
    source: str = SOURCE_FALLBACK


@dataclass(frozen=True)
class AnalysisOutcome:
    analysis: Analysis | None = None
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.analysis is not None

    @classmethod
    def success(cls, analysis: Analysis) -> AnalysisOutcome:
        return cls(analysis=analysis)

    @classmethod
    def failure(cls, reason: str) -> AnalysisOutcome:
        return cls(reason=reason)
