"""Prompt for the startup-opportunity analysis.

The schema keys below are what callers and the output extractor rely on.
"""

from __future__ import annotations

import json
from typing import Sequence

from .models import NormalizedArticle

REPORT_SCHEMA_EXAMPLE = {
    "opportunity": "<what is the business opportunity>",
    "tam": {
        "estimate": "<dollar estimate and units, e.g., $2B/year>",
        "methodology": "<1-2 sentence method to estimate TAM>",
    },
    "whyNow": "<why is now the right time>",
    "gettingStarted": ["<step 1>", "<step 2>", "<step 3>"],
    "source": {"title": "<headline title>", "url": "<link to article>"},
}


def _to_json(value) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False)


def build_prompt(articles: Sequence[NormalizedArticle]) -> str:
    """Render the analyst prompt for the given articles, in the given order."""
    articles_block = _to_json([a.model_dump(exclude_none=True) for a in articles])
    return "\n\n".join([
        "You are a pragmatic startup analyst. You produce concise, actionable, strictly-JSON outputs only.",
        "You are given a curated list of news headlines and articles along with their URLs that affect businesses.",
        "They may affect existing businesses or create new business opportunities.",
        "Search all of the articles for additional information that may be relevant to the opportunity.",
        "Analyze all the articles and pick the one that creates the strongest opportunity for a new startup.",
        "Return STRICT JSON only, matching exactly this schema:",
        _to_json(REPORT_SCHEMA_EXAMPLE),
        "Do not include any narration, explanations, or code fences.",
        "Here are the headlines:",
        articles_block,
    ])
