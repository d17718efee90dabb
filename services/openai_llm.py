# services/openai_llm.py
from __future__ import annotations

import logging

from openai import AsyncOpenAI

from api.app.config import Settings

logger = logging.getLogger(__name__)


def build_client(settings: Settings) -> AsyncOpenAI:
    """One client per process; calls are bounded by the timeout and never retried."""
    return AsyncOpenAI(
        api_key=settings.openai_api_key,
        timeout=settings.openai_timeout_seconds,
        max_retries=0,
    )


async def extract_json(
    client: AsyncOpenAI,
    system_prompt: str,
    user_message: str,
    model: str,
    temperature: float = 0.1,
    max_tokens: int = 500,
) -> str:
    """Run a completion expecting JSON output and return the raw message text."""
    logger.info("LLM: requesting JSON completion from %s", model)
    response = await client.chat.completions.create(
        model=model,
        messages=[
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_message},
        ],
        temperature=temperature,
        max_tokens=max_tokens,
        response_format={"type": "json_object"},
    )
    text = response.choices[0].message.content or ""
    logger.info("LLM: got %d chars response", len(text))
    return text
