"""Slot extraction module."""

from .types import SLOT_ORDER, SlotCheck, SlotName, SlotVocabulary
from .extractor import (
    PERMISSIVE_VOCABULARY,
    STRICT_VOCABULARY,
    SlotExtractor,
    get_slot_extractor,
    get_vocabulary,
    extract_missing_slots,
)

__all__ = [
    # Types
    "SLOT_ORDER",
    "SlotCheck",
    "SlotName",
    "SlotVocabulary",
    # Extractor
    "PERMISSIVE_VOCABULARY",
    "STRICT_VOCABULARY",
    "SlotExtractor",
    "get_slot_extractor",
    "get_vocabulary",
    "extract_missing_slots",
]
