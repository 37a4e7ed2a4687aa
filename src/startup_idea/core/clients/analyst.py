"""OpenAI client for the startup-opportunity analysis.

One Responses API call with web search enabled. No history, no sampling
parameters.
"""

from __future__ import annotations

import logging

from openai import AsyncOpenAI

logger = logging.getLogger(__name__)

WEB_SEARCH_TOOL = {"type": "web_search_preview", "search_context_size": "medium"}


async def analyze(prompt: str, api_key: str, model: str = "o4-mini") -> str:
    """Submit the prompt and return the model's output text ("" if none)."""
    client = AsyncOpenAI(api_key=api_key)
    logger.info("Requesting analysis from OpenAI model %s", model)

    response = await client.responses.create(
        model=model,
        tools=[WEB_SEARCH_TOOL],
        input=prompt,
    )
    content = response.output_text or ""
    logger.info("Completion from OpenAI: %s", content)
    return content