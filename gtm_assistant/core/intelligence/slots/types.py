"""Slot types for the generation-request gate."""

from dataclasses import dataclass, field
from enum import Enum


class SlotName(str, Enum):
    """Information required before a generation command can be issued."""

    SUBJECT = "subject"                # What to create
    DOMAIN_CONTEXT = "domain_context"  # Which business/industry context applies


# Fixed reporting order for missing slots
SLOT_ORDER: tuple[SlotName, ...] = (SlotName.SUBJECT, SlotName.DOMAIN_CONTEXT)


@dataclass(frozen=True)
class SlotVocabulary:
    """Words and phrases that count as satisfying each slot."""

    name: str
    subject: tuple[str, ...]
    domain_context: tuple[str, ...]

    def for_slot(self, slot: SlotName) -> tuple[str, ...]:
        """Get the satisfying vocabulary of one slot."""
        if slot == SlotName.SUBJECT:
            return self.subject
        return self.domain_context


@dataclass
class SlotCheck:
    """Outcome of checking an utterance against the required slots."""

    missing: list[SlotName] = field(default_factory=list)

    # Slot -> keywords that satisfied it
    evidence: dict[SlotName, list[str]] = field(default_factory=dict)

    @property
    def is_complete(self) -> bool:
        """Check if nothing is missing."""
        return not self.missing

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "missing": [slot.value for slot in self.missing],
            "evidence": {slot.value: words for slot, words in self.evidence.items()},
        }
