"""
Keyword slot extraction for generation requests.

Two slots are tracked: the subject (what to create) and the domain
context (which industry it is for). The default vocabulary is
permissive on purpose: generic action verbs satisfy the subject and
generic business nouns satisfy the domain, so the gate favours forward
progress over interrogation.
"""

import logging
from typing import Optional

from gtm_assistant.core.intelligence.intent.types import Intent
from gtm_assistant.core.intelligence.matching import find_keywords
from .types import SLOT_ORDER, SlotCheck, SlotName, SlotVocabulary

logger = logging.getLogger(__name__)


_ACTION_WORDS: tuple[str, ...] = (
    "generate",
    "create",
    "make",
    "show",
    "draw",
    "design",
)

_VISUAL_WORDS: tuple[str, ...] = (
    "image",
    "visual",
    "picture",
    "infographic",
    "diagram",
    "chart",
    "dashboard",
)

_PRODUCT_WORDS: tuple[str, ...] = (
    "business pro fiber",
    "business pro",
    "mobile pos solution",
    "mobile pos",
    "pos solution",
    "pos",
    "fiber",
    "internet",
    "connectivity",
    "security",
    "cloud",
    "analytics",
    "solution",
    "service",
    "pro",
)

_INDUSTRY_WORDS: tuple[str, ...] = (
    "retail",
    "healthcare",
    "education",
    "tech",
    "telecom",
    "finance",
    "manufacturing",
    "government",
    "hospitality",
    "logistics",
    "real estate",
    "smb",
)

PERMISSIVE_VOCABULARY = SlotVocabulary(
    name="permissive",
    subject=_PRODUCT_WORDS + _VISUAL_WORDS + _ACTION_WORDS,
    domain_context=_INDUSTRY_WORDS
    + ("business", "solution", "pro")
    + _VISUAL_WORDS
    + _ACTION_WORDS,
)

# Only named industries satisfy the domain context
STRICT_VOCABULARY = SlotVocabulary(
    name="strict",
    subject=_PRODUCT_WORDS + _VISUAL_WORDS + _ACTION_WORDS,
    domain_context=_INDUSTRY_WORDS,
)

VOCABULARIES: dict[str, SlotVocabulary] = {
    PERMISSIVE_VOCABULARY.name: PERMISSIVE_VOCABULARY,
    STRICT_VOCABULARY.name: STRICT_VOCABULARY,
}


def get_vocabulary(name: str) -> SlotVocabulary:
    """Look up a vocabulary preset by name."""
    try:
        return VOCABULARIES[name]
    except KeyError:
        raise ValueError(f"Unknown slot vocabulary: {name}") from None


class SlotExtractor:
    """Decides which required slots an utterance leaves unfilled."""

    def __init__(self, vocabulary: SlotVocabulary = PERMISSIVE_VOCABULARY):
        """Initialize extractor.

        Args:
            vocabulary: Satisfying vocabulary per slot
        """
        self._vocabulary = vocabulary

    @property
    def vocabulary(self) -> SlotVocabulary:
        return self._vocabulary

    def check(self, utterance: str, intent: Intent) -> SlotCheck:
        """
        Check an utterance against the required slots.

        Args:
            utterance: User text, possibly joined with earlier turns
            intent: Classified intent of the request

        Returns:
            SlotCheck with missing slots in fixed order and the matched evidence
        """
        if intent != Intent.GENERATION_REQUEST:
            return SlotCheck()

        result = SlotCheck()
        for slot in SLOT_ORDER:
            matched = find_keywords(utterance, self._vocabulary.for_slot(slot))
            if matched:
                result.evidence[slot] = matched
            else:
                result.missing.append(slot)

        logger.debug(
            f"Slot check ({self._vocabulary.name}): "
            f"missing={[s.value for s in result.missing]}"
        )
        return result

    def extract_missing_slots(self, utterance: str, intent: Intent) -> list[SlotName]:
        """Return the slots the utterance does not satisfy, in fixed order."""
        return self.check(utterance, intent).missing


# Default instance
_extractor: Optional[SlotExtractor] = None


def get_slot_extractor() -> SlotExtractor:
    """Get the shared default SlotExtractor."""
    global _extractor
    if _extractor is None:
        _extractor = SlotExtractor()
    return _extractor


def extract_missing_slots(utterance: str, intent: Intent) -> list[SlotName]:
    """Convenience function to compute missing slots."""
    return get_slot_extractor().extract_missing_slots(utterance, intent)
