# coding: ascii
"""Response parsing utilities for CreatorLens."""

from __future__ import annotations

import re
from typing import List

from .prompts import extract_marked_content

_LIST_MARKER_PATTERN = re.compile(r"^\s*(?:\d+[.)]\s+|[-*\u2022]\s*)")
_WRAPPING_QUOTES = "\"'\u201c\u201d"
_FENCE_PATTERN = re.compile(r"^```[\w-]*\s*$|^```\s*$", re.MULTILINE)
_LABEL_PATTERN = re.compile(r"^(?:hook|title)\s*\d*\s*:\s*", re.IGNORECASE)


def parse_hook_candidates(raw: str) -> List[str]:
    """Split provider output into hook or title candidate lines.

    Numbering, bullets, labels and wrapping quotes are removed. Blank lines
    and headings are dropped; de-duplication is left to the ranker.
    """

    candidates: List[str] = []
    for line in _strip_fences(raw or "").splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        cleaned = _LIST_MARKER_PATTERN.sub("", stripped, count=1)
        cleaned = _LABEL_PATTERN.sub("", cleaned, count=1)
        cleaned = cleaned.strip().strip(_WRAPPING_QUOTES).strip()
        cleaned = cleaned.replace("**", "")
        if cleaned:
            candidates.append(cleaned)
    return candidates


def extract_rewritten_text(raw: str) -> str:
    """Pull the rewritten content out of provider output.

    Providers are asked to wrap the result in content markers; when the
    markers are missing the whole response is used.
    """

    text = _strip_fences(raw or "").strip()
    marked = extract_marked_content(text)
    if marked:
        return marked
    return text


def extract_title(raw: str) -> str:
    """First non-empty candidate line of a title response."""

    candidates = parse_hook_candidates(extract_rewritten_text(raw))
    return candidates[0] if candidates else ""


def _strip_fences(text: str) -> str:
    return _FENCE_PATTERN.sub("", text)


__all__ = ["parse_hook_candidates", "extract_rewritten_text", "extract_title"]
