# services/remote_analyzer.py
"""
OpenAI-backed analysis of one security event.

Returns an `AnalysisOutcome` instead of raising: transport errors, timeouts
and unusable replies all come back as failure outcomes with a reason.
"""
from __future__ import annotations

import logging
from typing import Any

import openai
from openai import AsyncOpenAI

from ai.analysis import AnalysisOutcome
from ai.prompt_builder import PromptContext
from ai.prompt_versions import PROMPT_VERSION, get_prompt_builder
from ai.prompts import SYSTEM_ANALYST
from ai.response_parser import parse_analysis_response
from services.openai_llm import extract_json

logger = logging.getLogger(__name__)


class RemoteAnalyzer:
    def __init__(
        self,
        client: AsyncOpenAI,
        model: str,
        temperature: float = 0.1,
        max_tokens: int = 500,
        prompt_version: str = PROMPT_VERSION,
    ) -> None:
        self.client = client
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._build_prompt = get_prompt_builder(prompt_version)

    async def analyze(
        self,
        event_type: str,
        description: str,
        metadata: dict[str, Any],
        watchlist_terms: list[str],
    ) -> AnalysisOutcome:
        prompt = self._build_prompt(
            PromptContext(
                event_type=event_type,
                description=description,
                metadata=metadata,
                watchlist_terms=list(watchlist_terms),
            )
        )

        try:
            raw = await extract_json(
                self.client,
                SYSTEM_ANALYST,
                prompt,
                model=self.model,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except openai.APITimeoutError:
            return AnalysisOutcome.failure("remote analysis timed out")
        except openai.APIError as exc:
            return AnalysisOutcome.failure(f"remote analysis failed: {exc.__class__.__name__}: {exc}")
        except Exception as exc:
            # Unexpected client-side failure. Still substituted by the
            # fallback, but logged with a traceback so it is not lost.
            logger.exception("Remote analysis raised unexpectedly for type=%s", event_type)
            return AnalysisOutcome.failure(f"unexpected error: {exc.__class__.__name__}: {exc}")

        outcome = parse_analysis_response(raw)
        if not outcome.ok:
            logger.warning("Failed to parse AI response: %s", outcome.reason)
        return outcome
