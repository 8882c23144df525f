"""Lexical helpers shared by the scorers."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable, List, Pattern, Set, Tuple

_SENTENCE_PATTERN = re.compile(r"[^.!?]+[.!?]*")
_TOKEN_PATTERN = re.compile(r"\b\w[\w'-]*\b")


@lru_cache(maxsize=1024)
def _phrase_pattern(phrase: str) -> Pattern[str]:
    escaped = r"\s+".join(re.escape(part) for part in phrase.lower().split())
    return re.compile(rf"(?<!\w){escaped}(?!\w)", re.IGNORECASE)


def split_sentences(text: str) -> List[str]:
    """Split text into sentences, keeping terminal punctuation."""

    sentences = []
    for match in _SENTENCE_PATTERN.finditer(text or ""):
        sentence = match.group(0).strip()
        if sentence.rstrip(".!?").strip():
            sentences.append(sentence)
    return sentences


def split_words(text: str) -> List[str]:
    """Whitespace-separated tokens, punctuation included."""

    return (text or "").split()


def tokenize(text: str) -> List[str]:
    """Lowercased word tokens with punctuation stripped."""

    return [token.lower() for token in _TOKEN_PATTERN.findall(text or "")]


def word_set(text: str) -> Set[str]:
    return set(tokenize(text))


def count_phrase(text: str, phrase: str) -> int:
    """Case-insensitive, word-boundary occurrences of ``phrase`` in ``text``."""

    if not text or not phrase or not phrase.strip():
        return 0
    return len(_phrase_pattern(phrase).findall(text))


def contains_phrase(text: str, phrase: str) -> bool:
    return count_phrase(text, phrase) > 0


def count_occurrences(text: str, phrases: Iterable[str]) -> int:
    """Total occurrences of every phrase in ``phrases``."""

    return sum(count_phrase(text, phrase) for phrase in phrases)


def distinct_present(text: str, phrases: Iterable[str]) -> List[str]:
    """Phrases present in ``text``, de-duplicated case-insensitively, in input order."""

    seen: Set[str] = set()
    present = []
    for phrase in phrases:
        key = phrase.strip().lower()
        if not key or key in seen:
            continue
        seen.add(key)
        if contains_phrase(text, phrase):
            present.append(phrase)
    return present


def replace_phrase(text: str, phrase: str, replacement: str) -> Tuple[str, int]:
    """Replace every word-boundary occurrence of ``phrase``; returns the count too."""

    if not phrase or not phrase.strip():
        return text, 0
    return _phrase_pattern(phrase).subn(lambda _: replacement, text)


def word_fraction(phrase: str, words: Set[str]) -> float:
    """Fraction of the words of ``phrase`` that appear in ``words``."""

    phrase_words = tokenize(phrase)
    if not phrase_words:
        return 0.0
    present = sum(1 for word in phrase_words if word in words)
    return present / len(phrase_words)


__all__ = [
    "split_sentences",
    "split_words",
    "tokenize",
    "word_set",
    "count_phrase",
    "contains_phrase",
    "count_occurrences",
    "distinct_present",
    "replace_phrase",
    "word_fraction",
]
