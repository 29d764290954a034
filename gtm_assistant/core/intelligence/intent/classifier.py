"""
Rule-based intent classification.

Ordered keyword tables evaluated top to bottom; the first rule that
matches wins. No scoring, no fuzzy matching.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from gtm_assistant.core.intelligence.matching import contains_any, find_keywords, normalize
from .types import Intent, IntentResult

logger = logging.getLogger(__name__)


GREETING_KEYWORDS: tuple[str, ...] = (
    "hello",
    "hi",
    "hey",
    "greetings",
    "good morning",
    "good afternoon",
    "good evening",
)

CAPABILITY_KEYWORDS: tuple[str, ...] = (
    "what can you do",
    "what do you do",
    "how can you help",
    "what are you",
    "capabilities",
    "capability",
    "help",
)

# Generation vs insights is decided by a secondary check:
# analysis keyword AND sector keyword -> insights, else creation keyword -> generation
ANALYSIS_KEYWORDS: tuple[str, ...] = (
    "insight",
    "insights",
    "market",
    "trend",
    "trends",
    "analysis",
    "overview",
    "intelligence",
)

SECTOR_KEYWORDS: tuple[str, ...] = (
    "uae",
    "b2b",
    "retail",
    "healthcare",
    "education",
    "finance",
    "bank",
    "banking",
    "hospitality",
    "logistics",
    "manufacturing",
    "government",
    "real estate",
    "telecom",
    "technology",
)

CREATION_KEYWORDS: tuple[str, ...] = (
    "generate",
    "create",
    "make",
    "show",
    "draw",
    "design",
    "image",
    "visual",
    "picture",
    "infographic",
    "diagram",
    "chart",
    "dashboard",
)

ACKNOWLEDGMENT_KEYWORDS: tuple[str, ...] = (
    "yes",
    "yeah",
    "yep",
    "no",
    "sure",
    "okay",
    "ok",
    "that works",
    "sounds good",
    "go ahead",
    "perfect",
)


@dataclass(frozen=True)
class IntentRule:
    """One row of the classification table."""

    intent: Intent
    keywords: tuple[str, ...]


class IntentClassifier:
    """
    Priority-ordered keyword classifier.

    Order: greeting > capability query > insights-or-generation >
    acknowledgment > general. Ties are broken by that order, never by
    match length. Pure function of the text.
    """

    def __init__(
        self,
        greeting: tuple[str, ...] = GREETING_KEYWORDS,
        capability: tuple[str, ...] = CAPABILITY_KEYWORDS,
        analysis: tuple[str, ...] = ANALYSIS_KEYWORDS,
        sectors: tuple[str, ...] = SECTOR_KEYWORDS,
        creation: tuple[str, ...] = CREATION_KEYWORDS,
        acknowledgment: tuple[str, ...] = ACKNOWLEDGMENT_KEYWORDS,
    ):
        self._greeting = IntentRule(Intent.GREETING, greeting)
        self._capability = IntentRule(Intent.CAPABILITY_QUERY, capability)
        self._creation = IntentRule(Intent.GENERATION_REQUEST, creation)
        self._acknowledgment = IntentRule(Intent.ACKNOWLEDGMENT, acknowledgment)
        self._analysis = analysis
        self._sectors = sectors

    def classify(self, message: str) -> IntentResult:
        """
        Classify a user utterance.

        Args:
            message: Raw user text

        Returns:
            IntentResult with the winning intent and the keywords that decided it
        """
        if not normalize(message):
            return IntentResult(intent=Intent.GENERAL)

        for rule in (self._greeting, self._capability):
            matched = find_keywords(message, rule.keywords)
            if matched:
                return self._result(rule.intent, matched)

        analysis = find_keywords(message, self._analysis)
        if analysis:
            sectors = find_keywords(message, self._sectors)
            if sectors:
                return self._result(Intent.INSIGHTS_REQUEST, analysis + sectors)

        for rule in (self._creation, self._acknowledgment):
            matched = find_keywords(message, rule.keywords)
            if matched:
                return self._result(rule.intent, matched)

        return self._result(Intent.GENERAL, [])

    def has_generation_keywords(self, message: str) -> bool:
        """Check if text independently asks for content creation."""
        return contains_any(message, self._creation.keywords)

    def _result(self, intent: Intent, matched: list[str]) -> IntentResult:
        logger.debug(f"Classified intent: {intent.value} (matched: {matched})")
        return IntentResult(intent=intent, matched_keywords=matched)


# Default instance (stateless, safe to share)
_classifier: Optional[IntentClassifier] = None


def get_intent_classifier() -> IntentClassifier:
    """Get the shared default IntentClassifier."""
    global _classifier
    if _classifier is None:
        _classifier = IntentClassifier()
    return _classifier


def classify_intent(message: str) -> Intent:
    """Convenience function to classify an utterance."""
    return get_intent_classifier().classify(message).intent
