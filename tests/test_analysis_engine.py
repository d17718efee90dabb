"""
Tests for strategy selection and per-call fallback.

The OpenAI client is mocked; nothing here touches the network.
"""
from __future__ import annotations

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import openai
import pytest

from ai.analysis import SOURCE_FALLBACK, SOURCE_REMOTE
from ai.keyword_analyzer import analyze_keywords
from api.app.config import Settings
from models.event import Severity
from services.analysis_engine import MODE_FALLBACK, MODE_REMOTE, AnalysisEngine
from services.remote_analyzer import RemoteAnalyzer

_REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")

EVENT = dict(
    event_type="malware_detection",
    description="Malware signature detected",
    metadata={"signature": "Trojan.Generic.KD.123456"},
    watchlist_terms=["malware", "phishing"],
)


def _completion(content: str | None):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def _remote_engine(create: AsyncMock) -> AnalysisEngine:
    client = MagicMock()
    client.chat.completions.create = create
    return AnalysisEngine(remote=RemoteAnalyzer(client, model="gpt-test"), model="gpt-test")


def _good_reply(severity: str = "CRITICAL") -> str:
    return json.dumps({
        "summary": "Trojan observed in network traffic",
        "severity": severity,
        "suggestedAction": "Block source IP",
    })


def test_no_key_pins_fallback():
    engine = AnalysisEngine.from_settings(Settings(_env_file=None, openai_api_key=None))
    assert engine.mode == MODE_FALLBACK
    assert engine.remote is None


def test_blank_key_pins_fallback():
    engine = AnalysisEngine.from_settings(Settings(_env_file=None, openai_api_key="   "))
    assert engine.mode == MODE_FALLBACK


def test_key_selects_remote():
    engine = AnalysisEngine.from_settings(
        Settings(_env_file=None, openai_api_key="sk-test", openai_model="gpt-4o-mini")
    )
    assert engine.mode == MODE_REMOTE
    assert engine.remote.model == "gpt-4o-mini"


@pytest.mark.asyncio
async def test_fallback_mode_uses_keywords():
    result = await AnalysisEngine().analyze(**EVENT)
    assert result == analyze_keywords(EVENT["event_type"], EVENT["description"], EVENT["watchlist_terms"])
    assert result.severity == Severity.HIGH


@pytest.mark.asyncio
async def test_remote_success():
    create = AsyncMock(return_value=_completion(_good_reply()))
    result = await _remote_engine(create).analyze(**EVENT)

    assert result.source == SOURCE_REMOTE
    assert result.severity == Severity.CRITICAL
    assert result.summary == "Trojan observed in network traffic"

    kwargs = create.await_args.kwargs
    assert kwargs["model"] == "gpt-test"
    assert kwargs["response_format"] == {"type": "json_object"}
    assert "malware_detection" in kwargs["messages"][1]["content"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        openai.APIConnectionError(request=_REQUEST),
        openai.APITimeoutError(request=_REQUEST),
        RuntimeError("client bug"),
    ],
)
async def test_remote_error_falls_back_to_same_inputs(error):
    create = AsyncMock(side_effect=error)
    result = await _remote_engine(create).analyze(**EVENT)

    expected = analyze_keywords(EVENT["event_type"], EVENT["description"], EVENT["watchlist_terms"])
    assert result == expected
    assert result.source == SOURCE_FALLBACK
    assert create.await_count == 1  # no retry


@pytest.mark.asyncio
@pytest.mark.parametrize("content", [None, "", "I think this is bad", '{"summary": "only"}'])
async def test_unusable_reply_falls_back(content):
    create = AsyncMock(return_value=_completion(content))
    result = await _remote_engine(create).analyze(**EVENT)
    assert result.source == SOURCE_FALLBACK
    assert result.severity == Severity.HIGH


@pytest.mark.asyncio
async def test_out_of_domain_severity_is_med_not_fallback():
    create = AsyncMock(return_value=_completion(_good_reply(severity="URGENT")))
    result = await _remote_engine(create).analyze(**EVENT)
    assert result.source == SOURCE_REMOTE
    assert result.severity == Severity.MED


@pytest.mark.asyncio
async def test_demotion_is_per_call():
    create = AsyncMock(side_effect=[
        openai.APIConnectionError(request=_REQUEST),
        _completion(_good_reply()),
    ])
    engine = _remote_engine(create)

    first = await engine.analyze(**EVENT)
    second = await engine.analyze(**EVENT)

    assert first.source == SOURCE_FALLBACK
    assert second.source == SOURCE_REMOTE
    assert create.await_count == 2
    assert engine.mode == MODE_REMOTE
