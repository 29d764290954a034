"""
Session data models.

One DialogueContext per session. The store owns it; only the dialogue
manager mutates it, through the stage helpers below so that the
executing/gathering invariants hold after every turn.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from gtm_assistant.core.intelligence.intent.types import Intent
from gtm_assistant.core.intelligence.slots.types import SlotName
from .state import InvalidTransitionError, Stage, can_transition


def _utcnow() -> datetime:
    """Get current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


@dataclass
class StructuredCommand:
    """Renderer-ready description of the content to produce."""

    subject: str
    domain: str
    elements: list[str] = field(default_factory=list)
    style: str = "professional_b2b"

    # Branding line appended to the renderer prompt
    branding: str = "e& B2B branding"

    def to_prompt(self) -> str:
        """Render the instruction text understood by the renderer."""
        return (
            f"Draw these elements: {', '.join(self.elements)} "
            f"for {self.domain} business solution with {self.branding} "
            f"and professional layout"
        )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "subject": self.subject,
            "domain": self.domain,
            "elements": list(self.elements),
            "style": self.style,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "StructuredCommand":
        """Create from a stored dict."""
        return cls(
            subject=data.get("subject", ""),
            domain=data.get("domain", ""),
            elements=list(data.get("elements", [])),
            style=data.get("style", "professional_b2b"),
        )


@dataclass
class DialogueContext:
    """Conversational state of one session."""

    session_id: str
    last_utterance: str = ""
    intent: Intent = Intent.GENERAL
    stage: Stage = Stage.INITIAL
    missing_slots: list[SlotName] = field(default_factory=list)
    pending_command: Optional[StructuredCommand] = None

    # Generation request accumulated while gathering slots
    request_text: str = ""

    # Handle of the last successfully rendered artifact
    last_artifact: Optional[str] = None

    # Metadata
    turn_count: int = 0
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    # === Stage helpers ===

    def record_turn(self, utterance: str, intent: Intent) -> None:
        """Note the latest utterance and its intent."""
        self.last_utterance = utterance
        self.intent = intent
        self.turn_count += 1
        self.updated_at = _utcnow()

    def begin_gathering(self, request_text: str, missing: list[SlotName]) -> None:
        """Wait on the user for the given slots."""
        if not missing:
            raise ValueError("Gathering requires at least one missing slot")
        self._move_to(Stage.GATHERING_INFO)
        self.request_text = request_text
        self.missing_slots = list(dict.fromkeys(missing))
        self.pending_command = None

    def begin_execution(self, request_text: str, command: StructuredCommand) -> None:
        """All slots filled; hold the command for the renderer."""
        self._move_to(Stage.EXECUTING)
        self.request_text = request_text
        self.missing_slots = []
        self.pending_command = command

    def complete(self, artifact_handle: str) -> None:
        """The renderer produced an artifact."""
        self._move_to(Stage.COMPLETE)
        self.last_artifact = artifact_handle
        self.pending_command = None

    def reset(self) -> None:
        """Back to a clean slate so the user can retry."""
        self._move_to(Stage.INITIAL)
        self.request_text = ""
        self.missing_slots = []
        self.pending_command = None

    def _move_to(self, stage: Stage) -> None:
        if not can_transition(self.stage, stage):
            raise InvalidTransitionError(self.stage, stage)
        self.stage = stage
        self.updated_at = _utcnow()

    @property
    def is_consistent(self) -> bool:
        """Check the stage invariants."""
        executing = not self.missing_slots and self.pending_command is not None
        if (self.stage == Stage.EXECUTING) != executing:
            return False
        if self.stage == Stage.GATHERING_INFO and not self.missing_slots:
            return False
        return True

    # === Serialization ===

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "session_id": self.session_id,
            "last_utterance": self.last_utterance,
            "intent": self.intent.value,
            "stage": self.stage.value,
            "missing_slots": [slot.value for slot in self.missing_slots],
            "pending_command": (
                self.pending_command.to_dict() if self.pending_command else None
            ),
            "request_text": self.request_text,
            "last_artifact": self.last_artifact,
            "turn_count": self.turn_count,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    def to_json(self) -> str:
        """Convert to JSON string for Redis storage."""
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, json_str: str) -> "DialogueContext":
        """Create from JSON string."""
        data = json.loads(json_str)
        command = data.get("pending_command")
        return cls(
            session_id=data["session_id"],
            last_utterance=data.get("last_utterance", ""),
            intent=Intent(data.get("intent", Intent.GENERAL.value)),
            stage=Stage(data.get("stage", Stage.INITIAL.value)),
            missing_slots=[SlotName(s) for s in data.get("missing_slots", [])],
            pending_command=StructuredCommand.from_dict(command) if command else None,
            request_text=data.get("request_text", ""),
            last_artifact=data.get("last_artifact"),
            turn_count=data.get("turn_count", 0),
            created_at=datetime.fromisoformat(data["created_at"]),
            updated_at=datetime.fromisoformat(data["updated_at"]),
        )
