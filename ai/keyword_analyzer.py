# ai/keyword_analyzer.py
"""
Deterministic keyword analysis of a security event.

Used when no OpenAI key is configured and as the per-call substitute when the
remote analyst fails. Must stay total and cheap: no I/O, no exceptions.

Examples:
  "brute_force" / "Attack on admin login"      → CRITICAL
  "malware_detection" / "Malware signature"    → HIGH
  "login" / "Unusual login time"               → MED
  "heartbeat" / "Agent checked in"             → LOW
"""
from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from ai.analysis import SOURCE_FALLBACK, Analysis
from models.event import Severity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SeverityTier:
    severity: Severity
    keywords: tuple[str, ...]
    summary_template: str
    suggested_action: str


# ── Tiers, highest priority first ──

TIERS: tuple[SeverityTier, ...] = (
    SeverityTier(
        Severity.CRITICAL,
        ("critical", "breach", "attack"),
        "Critical security incident: {event_type}",
        "Immediate incident response required - escalate to security team",
    ),
    SeverityTier(
        Severity.HIGH,
        ("suspicious", "malware", "threat"),
        "High-priority security alert: {event_type}",
        "Investigate immediately and block if confirmed malicious",
    ),
    SeverityTier(
        Severity.MED,
        ("unusual", "anomaly"),
        "Medium-priority security event: {event_type}",
        "Review and investigate for potential security implications",
    ),
)

DEFAULT_TIER = SeverityTier(
    Severity.LOW,
    (),
    "{event_type} event detected",
    "Monitor for additional activity",
)


def classify(text: str) -> SeverityTier:
    t = (text or "").lower()
    for tier in TIERS:
        if any(k in t for k in tier.keywords):
            return tier
    return DEFAULT_TIER


def match_terms(text: str, terms: Iterable[str]) -> list[str]:
    """Watchlist terms found in text, case-insensitively, in watchlist order."""
    t = (text or "").lower()
    return [term for term in terms or () if term and str(term).lower() in t]


def analyze_keywords(
    event_type: str,
    description: str,
    watchlist_terms: Iterable[str] = (),
) -> Analysis:
    text = f"{event_type or ''} {description or ''}".lower()
    tier = classify(text)
    matched = match_terms(text, watchlist_terms)

    summary = tier.summary_template.format(event_type=event_type or "")
    if matched:
        summary += f" (matches watchlist terms: {', '.join(str(m) for m in matched)})"

    logger.info(
        "Keyword analysis: type=%s severity=%s matched_terms=%d",
        event_type,
        tier.severity.value,
        len(matched),
    )
    return Analysis(
        summary=summary,
        severity=tier.severity,
        suggested_action=tier.suggested_action,
        source=SOURCE_FALLBACK,
    )
