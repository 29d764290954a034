"""Session state module."""

from .state import (
    InvalidTransitionError,
    Stage,
    can_transition,
    is_awaiting_input,
)
from .models import DialogueContext, StructuredCommand
from .store import SessionStore, SessionStoreError, create_session_store

__all__ = [
    # State
    "InvalidTransitionError",
    "Stage",
    "can_transition",
    "is_awaiting_input",
    # Models
    "DialogueContext",
    "StructuredCommand",
    # Store
    "SessionStore",
    "SessionStoreError",
    "create_session_store",
]
