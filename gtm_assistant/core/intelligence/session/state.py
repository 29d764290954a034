"""Dialogue stage state machine."""

from enum import Enum
from typing import Set


class Stage(str, Enum):
    """Position of a session in the gather-then-execute workflow."""

    INITIAL = "initial"
    GATHERING_INFO = "gathering_info"  # Waiting on missing slots
    EXECUTING = "executing"            # Command built, handed to the renderer
    COMPLETE = "complete"              # Renderer returned an artifact


# Valid stage transitions. Staying put is always allowed; a new request
# can re-enter gathering or execution from any stage.
VALID_TRANSITIONS: dict[Stage, Set[Stage]] = {
    Stage.INITIAL: {
        Stage.INITIAL,
        Stage.GATHERING_INFO,
        Stage.EXECUTING,
    },
    Stage.GATHERING_INFO: {
        Stage.GATHERING_INFO,
        Stage.EXECUTING,
        Stage.INITIAL,
    },
    Stage.EXECUTING: {
        Stage.EXECUTING,
        Stage.COMPLETE,
        Stage.INITIAL,  # Renderer failure
        Stage.GATHERING_INFO,
    },
    Stage.COMPLETE: {
        Stage.COMPLETE,
        Stage.INITIAL,
        Stage.GATHERING_INFO,
        Stage.EXECUTING,
    },
}


class InvalidTransitionError(Exception):
    """Raised when code attempts a stage change the table forbids."""

    def __init__(self, from_stage: Stage, to_stage: Stage):
        self.from_stage = from_stage
        self.to_stage = to_stage
        super().__init__(f"Invalid transition: {from_stage.value} -> {to_stage.value}")


def can_transition(from_stage: Stage, to_stage: Stage) -> bool:
    """Check if a stage transition is valid."""
    return to_stage in VALID_TRANSITIONS.get(from_stage, set())


def is_awaiting_input(stage: Stage) -> bool:
    """Check if the session is waiting for the user to fill slots."""
    return stage == Stage.GATHERING_INFO
