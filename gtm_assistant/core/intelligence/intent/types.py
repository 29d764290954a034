"""Intent types for utterance classification."""

from dataclasses import dataclass, field
from enum import Enum


class Intent(str, Enum):
    """What the user's utterance is trying to accomplish."""

    GREETING = "greeting"                      # Hello, hi
    CAPABILITY_QUERY = "capability_query"      # What can you do?
    GENERATION_REQUEST = "generation_request"  # Create / show / draw something
    INSIGHTS_REQUEST = "insights_request"      # Market trends for a sector
    ACKNOWLEDGMENT = "acknowledgment"          # Yes, sure, that works

    # Fallback
    GENERAL = "general"


@dataclass
class IntentResult:
    """Result of intent classification."""

    intent: Intent

    # Keywords that decided the intent, in rule order
    matched_keywords: list[str] = field(default_factory=list)

    @property
    def is_generation(self) -> bool:
        """Check if the utterance asks for content to be produced."""
        return self.intent == Intent.GENERATION_REQUEST

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "intent": self.intent.value,
            "matched_keywords": list(self.matched_keywords),
        }
