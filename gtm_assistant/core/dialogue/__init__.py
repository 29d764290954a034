"""
Dialogue Module

Provides the dialogue manager, command translation, response templates
and the content renderer contract.

Usage:
    from gtm_assistant.core.dialogue import DialogueManager
    from gtm_assistant.core.intelligence import SessionStore

    manager = DialogueManager(store=SessionStore())
    response = await manager.process_turn("s1", "generate an image for retail")
    print(response.next_action)     # NextAction.EXECUTE
    print(response.command.domain)  # "retail"
"""

# Response types
from gtm_assistant.core.dialogue.types import DialogueResponse, NextAction, Tone

# Command translation
from gtm_assistant.core.dialogue.commands import (
    CommandTranslator,
    DOMAINS,
    ELEMENTS,
)

# Response templates
from gtm_assistant.core.dialogue.response import ResponseGenerator

# Content renderer
from gtm_assistant.core.dialogue.renderer import (
    ContentRenderer,
    HttpContentRenderer,
    RenderResult,
    RendererError,
)

# Dialogue manager (main orchestrator)
from gtm_assistant.core.dialogue.manager import DialogueManager

__all__ = [
    # Types
    "DialogueResponse",
    "NextAction",
    "Tone",
    # Commands
    "CommandTranslator",
    "DOMAINS",
    "ELEMENTS",
    # Responses
    "ResponseGenerator",
    # Renderer
    "ContentRenderer",
    "HttpContentRenderer",
    "RenderResult",
    "RendererError",
    # Manager
    "DialogueManager",
]
