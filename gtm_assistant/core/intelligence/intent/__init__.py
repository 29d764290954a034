"""Intent classification module."""

from .types import Intent, IntentResult
from .classifier import (
    IntentClassifier,
    IntentRule,
    get_intent_classifier,
    classify_intent,
)

__all__ = [
    # Types
    "Intent",
    "IntentResult",
    # Classifier
    "IntentClassifier",
    "IntentRule",
    "get_intent_classifier",
    "classify_intent",
]
