"""Recover a JSON value from free-text model output."""

from __future__ import annotations

import json
import re
from typing import Any, Optional

_FENCE_RE = re.compile(r"```[a-zA-Z]*\n(.*?)\n```", re.DOTALL)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {name}")


def _loads(text: str) -> Optional[Any]:
    """Strict JSON parse; NaN, Infinity and over-deep nesting count as failures."""
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        return None


def _brace_span(text: str) -> Optional[str]:
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        return None
    return text[start:end + 1]


def extract_json(text: str) -> Optional[Any]:
    """Parse model output that may be fenced or wrapped in narration.

    Tries the first fenced block (or the whole text), then the span from the
    first "{" to the last "}". Returns None when neither parses.
    """
    if not text:
        return None

    trimmed = text.strip()
    fence = _FENCE_RE.search(trimmed)
    candidate = fence.group(1) if fence else trimmed

    parsed = _loads(candidate)
    if parsed is not None:
        return parsed

    span = _brace_span(candidate)
    if span is None:
        return None
    return _loads(span)
