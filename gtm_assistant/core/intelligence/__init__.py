"""
Intelligence Layer Module

Provides intent classification, slot extraction and session state for
the GTM assistant's dialogue manager.

Usage:
    from gtm_assistant.core.intelligence import (
        classify_intent,
        extract_missing_slots,
        SessionStore,
    )

    # Classify intent
    intent = classify_intent("generate an image for retail")
    print(intent)  # Intent.GENERATION_REQUEST

    # Check required slots
    missing = extract_missing_slots("create something", intent)
    print(missing)  # [] with the permissive vocabulary

    # Session state
    store = SessionStore()
    context = await store.get_or_create("session-1")
"""

# Intent Classification
from gtm_assistant.core.intelligence.intent.types import Intent, IntentResult
from gtm_assistant.core.intelligence.intent.classifier import (
    IntentClassifier,
    get_intent_classifier,
    classify_intent,
)

# Slot Extraction
from gtm_assistant.core.intelligence.slots.types import SlotCheck, SlotName, SlotVocabulary
from gtm_assistant.core.intelligence.slots.extractor import (
    PERMISSIVE_VOCABULARY,
    STRICT_VOCABULARY,
    SlotExtractor,
    get_slot_extractor,
    get_vocabulary,
    extract_missing_slots,
)

# Session State
from gtm_assistant.core.intelligence.session.state import (
    InvalidTransitionError,
    Stage,
    can_transition,
    is_awaiting_input,
)
from gtm_assistant.core.intelligence.session.models import DialogueContext, StructuredCommand
from gtm_assistant.core.intelligence.session.store import (
    SessionStore,
    SessionStoreError,
    create_session_store,
)

__all__ = [
    # Intent
    "Intent",
    "IntentResult",
    "IntentClassifier",
    "get_intent_classifier",
    "classify_intent",
    # Slots
    "SlotCheck",
    "SlotName",
    "SlotVocabulary",
    "PERMISSIVE_VOCABULARY",
    "STRICT_VOCABULARY",
    "SlotExtractor",
    "get_slot_extractor",
    "get_vocabulary",
    "extract_missing_slots",
    # Session State
    "InvalidTransitionError",
    "Stage",
    "can_transition",
    "is_awaiting_input",
    # Session Data
    "DialogueContext",
    "StructuredCommand",
    "SessionStore",
    "SessionStoreError",
    "create_session_store",
]
