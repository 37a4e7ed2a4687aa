"""Article normalization for upstream news payloads.

The news source is loosely typed: articles arrive as a bare list or nested
under `data` or `articles`, and every field is optional. This module reduces
whatever arrives to a list of NormalizedArticle.
"""

from __future__ import annotations

import logging
from typing import Any

from .models import NormalizedArticle, PayloadShape

logger = logging.getLogger(__name__)

MAX_SUMMARY_CHARS = 800
MAX_ARTICLES = 6

UNTITLED = "Untitled"

# Checked in order; first string value wins.
URL_FIELDS = ("url", "link")
SUMMARY_FIELDS = ("snippet", "description", "content")


def classify_payload(raw: Any) -> PayloadShape:
    """Tag the payload with the shape the article list is found under."""
    if isinstance(raw, list):
        return PayloadShape.LIST
    if isinstance(raw, dict):
        if isinstance(raw.get("data"), list):
            return PayloadShape.DATA
        if isinstance(raw.get("articles"), list):
            return PayloadShape.ARTICLES
    return PayloadShape.OTHER


def _article_list(raw: Any) -> list:
    shape = classify_payload(raw)
    if shape is PayloadShape.LIST:
        return raw
    if shape is PayloadShape.DATA:
        return raw["data"]
    if shape is PayloadShape.ARTICLES:
        return raw["articles"]
    return []


def _first_string(record: dict, fields: tuple[str, ...]) -> str | None:
    for name in fields:
        value = record.get(name)
        if isinstance(value, str):
            return value
    return None


def _title_text(value: Any) -> str:
    """Render a non-string title the way the JSON source spells it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _normalize_item(item: Any) -> dict:
    record = item if isinstance(item, dict) else {}

    title = record.get("title")
    title = UNTITLED if title is None else _title_text(title)

    summary = _first_string(record, SUMMARY_FIELDS) or ""

    return {
        "title": title,
        "url": _first_string(record, URL_FIELDS),
        "summary": summary[:MAX_SUMMARY_CHARS],
    }


def normalize_articles(raw: Any) -> list[NormalizedArticle]:
    """Normalize an upstream payload into articles with non-empty titles.

    Missing titles become "Untitled"; explicitly empty titles are dropped.
    Any shape other than a list, {"data": [...]} or {"articles": [...]}
    yields an empty list.
    """
    items = [_normalize_item(item) for item in _article_list(raw)]
    articles = [NormalizedArticle(**item) for item in items if item["title"]]

    if len(articles) < len(items):
        logger.debug("Dropped %d articles with empty titles", len(items) - len(articles))
    return articles
