"""Whole-word keyword matching shared by the rule tables."""

import re
from functools import lru_cache
from typing import Iterable


@lru_cache(maxsize=1024)
def _pattern(keyword: str) -> re.Pattern:
    # Phrases may span any whitespace run ("real  estate")
    body = r"\s+".join(re.escape(part) for part in keyword.lower().split())
    return re.compile(rf"\b{body}\b")


def normalize(text: str) -> str:
    """Lower-case and collapse whitespace."""
    return " ".join((text or "").lower().split())


def find_keywords(text: str, keywords: Iterable[str]) -> list[str]:
    """Return the keywords present in text, in table order.

    Matching is case-insensitive and anchored on word boundaries, so
    "hi" does not fire inside "something".
    """
    normalized = normalize(text)
    if not normalized:
        return []
    return [kw for kw in keywords if _pattern(kw).search(normalized)]


def contains_any(text: str, keywords: Iterable[str]) -> bool:
    """Check if any keyword is present in text."""
    normalized = normalize(text)
    if not normalized:
        return False
    return any(_pattern(kw).search(normalized) for kw in keywords)
