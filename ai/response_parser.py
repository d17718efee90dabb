# ai/response_parser.py
"""
Parse the remote analyst's reply into an `AnalysisOutcome`.

Accepts a bare JSON object or one wrapped in a ```json fence. Severity values
outside LOW/MED/HIGH/CRITICAL are coerced to MED; anything else that is wrong
with the reply is a failure outcome. Nothing here raises.
"""
from __future__ import annotations

import json
import re

from ai.analysis import SOURCE_REMOTE, Analysis, AnalysisOutcome
from models.event import Severity

_FENCE_RE = re.compile(r"```(?:json)?\s*\n?|\n?```", re.IGNORECASE)

REQUIRED_FIELDS = ("summary", "severity", "suggestedAction")


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text or "").strip()


def parse_analysis_response(raw: str | None) -> AnalysisOutcome:
    if not raw or not raw.strip():
        return AnalysisOutcome.failure("empty response")

    cleaned = strip_code_fences(raw)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        return AnalysisOutcome.failure(f"response is not valid JSON: {exc.msg}")

    if not isinstance(data, dict):
        return AnalysisOutcome.failure("response is not a JSON object")

    missing = [k for k in REQUIRED_FIELDS if not data.get(k)]
    if missing:
        return AnalysisOutcome.failure(f"response missing fields: {', '.join(missing)}")

    summary = data["summary"]
    action = data["suggestedAction"]
    if not isinstance(summary, str) or not isinstance(action, str):
        return AnalysisOutcome.failure("summary and suggestedAction must be strings")

    severity = Severity.coerce(data["severity"], default=Severity.MED)

    return AnalysisOutcome.success(
        Analysis(
            summary=summary.strip(),
            severity=severity,
            suggested_action=action.strip(),
            source=SOURCE_REMOTE,
        )
    )
