# ai/prompt_versions.py
"""
Prompt version registry so a prompt change can be rolled back by config.
"""
from __future__ import annotations

from collections.abc import Callable

from ai.prompt_builder import PromptContext, build_analysis_prompt

PROMPT_VERSION = "v1.0"

# Registry allows swapping prompt builders by version string
_BUILDERS: dict[str, Callable[[PromptContext], str]] = {
    "v1.0": build_analysis_prompt,
}


def get_prompt_builder(version: str = PROMPT_VERSION) -> Callable[[PromptContext], str]:
    """Return the prompt builder function for a given version."""
    return _BUILDERS.get(version, build_analysis_prompt)
