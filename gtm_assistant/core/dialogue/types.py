"""Response types returned by the dialogue manager."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from gtm_assistant.core.intelligence.intent.types import Intent
from gtm_assistant.core.intelligence.session.models import StructuredCommand
from gtm_assistant.core.intelligence.session.state import Stage


class Tone(str, Enum):
    """Register of the reply."""

    CONCIERGE = "concierge"          # Welcoming
    EXPERT = "expert"                # Informative
    COLLABORATIVE = "collaborative"  # Asking the user for details
    TRANSPARENT = "transparent"      # Saying what is about to happen


class NextAction(str, Enum):
    """What the caller should do after showing the reply."""

    QUESTION = "question"  # Wait for answers to the questions asked
    EXECUTE = "execute"    # Run the attached command / compile insights
    EXPLAIN = "explain"    # Follow up with an explanation of the assistant
    WAIT = "wait"          # Nothing pending


@dataclass
class DialogueResponse:
    """Reply to one user turn."""

    message: str
    tone: Tone
    next_action: NextAction

    # Present only with EXECUTE when a generation command applies
    command: Optional[StructuredCommand] = None

    # Turn metadata
    intent: Optional[Intent] = None
    stage: Optional[Stage] = None
    session_id: Optional[str] = None

    # Set once the renderer produced an artifact
    artifact_handle: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for API response."""
        result = {
            "message": self.message,
            "tone": self.tone.value,
            "next_action": self.next_action.value,
        }

        if self.command:
            result["command"] = self.command.to_dict()
        if self.intent:
            result["intent"] = self.intent.value
        if self.stage:
            result["stage"] = self.stage.value
        if self.session_id:
            result["session_id"] = self.session_id
        if self.artifact_handle:
            result["artifact_handle"] = self.artifact_handle

        return result
