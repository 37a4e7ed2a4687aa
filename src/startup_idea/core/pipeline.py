"""Idea-of-the-day pipeline.

credentials -> paid news fetch -> normalize + cap -> prompt -> model -> extract

Credential, empty-result and parse failures come back as {"error": ...}
payloads. Fetch failures are not caught here and propagate to the caller.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from ..config import Settings
from .articles import MAX_ARTICLES, normalize_articles
from .clients import analyst, biznews
from .models import OpportunityReport, PipelineError
from .parsing import extract_json
from .prompts import build_prompt

logger = logging.getLogger(__name__)

MISSING_OPENAI_KEY = "Missing OPENAI_API_KEY"
MISSING_SIGNING_KEYS = "Missing EVM_PRIVATE_KEY or SVM_PRIVATE_KEY"
NO_ARTICLES = "No articles returned from news source"
UNPARSEABLE_OUTPUT = "Failed to parse model output"


def _check_credentials(settings: Settings) -> PipelineError | None:
    if not settings.openai_api_key:
        return PipelineError(error=MISSING_OPENAI_KEY)
    if not settings.evm_private_key or not settings.svm_private_key:
        return PipelineError(error=MISSING_SIGNING_KEYS)
    return None


async def run_idea_of_the_day(settings: Settings) -> Any:
    """Produce one startup-opportunity report from the latest business news.

    Returns the parsed model JSON on success, or a {"error", "raw"?} dict.
    """
    missing = _check_credentials(settings)
    if missing is not None:
        logger.warning("Refusing to run: %s", missing.error)
        return missing.to_payload()

    news = await biznews.fetch_business_news(
        settings.biznews_server_url,
        evm_private_key=settings.evm_private_key,
        svm_private_key=settings.svm_private_key,
        solana_rpc_url=settings.solana_rpc_url,
    )

    articles = normalize_articles(news)[:MAX_ARTICLES]
    if not articles:
        logger.warning(NO_ARTICLES)
        return PipelineError(error=NO_ARTICLES).to_payload()
    logger.info("Analyzing %d articles", len(articles))

    content = await analyst.analyze(
        build_prompt(articles),
        api_key=settings.openai_api_key,
        model=settings.openai_model,
    )

    parsed = extract_json(content)
    if parsed is None:
        logger.warning("Model output could not be parsed as JSON")
        return PipelineError(error=UNPARSEABLE_OUTPUT, raw=content).to_payload()

    # Returned as-is either way; the schema is only a request to the model.
    try:
        OpportunityReport.model_validate(parsed)
    except ValidationError as exc:
        logger.warning("Model output does not match the report schema: %d issue(s)", exc.error_count())
    return parsed
