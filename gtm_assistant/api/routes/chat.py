"""
Chat API Endpoint.

Handles conversational messages for the GTM assistant.
"""

import logging
from typing import Optional
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel, Field

from gtm_assistant.core.dialogue import DialogueManager, DialogueResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["Chat"])


def get_dialogue_manager(request: Request) -> DialogueManager:
    """FastAPI dependency returning the manager built at startup."""
    return request.app.state.dialogue_manager


class ChatRequest(BaseModel):
    """Chat message request."""

    message: str = Field(
        ...,
        max_length=2000,
        description="User's message",
        examples=["Generate an image of Business Pro Fiber for retail"],
    )
    session_id: Optional[str] = Field(
        default=None,
        description="Existing session ID for conversation continuity",
        examples=["550e8400-e29b-41d4-a716-446655440000"],
    )


class CommandModel(BaseModel):
    """Structured command handed to the content renderer."""

    subject: str
    domain: str
    elements: list[str]
    style: str


class ChatResponse(BaseModel):
    """Chat response."""

    message: str = Field(
        ...,
        description="Assistant's reply",
    )
    session_id: str = Field(
        ...,
        description="Session ID for continuing conversation",
    )
    tone: str = Field(
        ...,
        description="Register of the reply (concierge, expert, collaborative, transparent)",
    )
    next_action: str = Field(
        ...,
        description="What happens next (question, execute, explain, wait)",
    )
    intent: Optional[str] = Field(
        default=None,
        description="Detected intent of the user message",
    )
    stage: Optional[str] = Field(
        default=None,
        description="Conversation stage after this turn",
    )
    command: Optional[CommandModel] = Field(
        default=None,
        description="Renderer command, present only when next_action is execute",
    )
    artifact_handle: Optional[str] = Field(
        default=None,
        description="Rendered artifact reference, if rendering ran",
    )

    @classmethod
    def from_dialogue(cls, response: DialogueResponse, session_id: str) -> "ChatResponse":
        """Build from a dialogue manager response."""
        return cls(
            message=response.message,
            session_id=session_id,
            tone=response.tone.value,
            next_action=response.next_action.value,
            intent=response.intent.value if response.intent else None,
            stage=response.stage.value if response.stage else None,
            command=CommandModel(**response.command.to_dict()) if response.command else None,
            artifact_handle=response.artifact_handle,
        )


class CapabilitiesResponse(BaseModel):
    """Assistant status and capability list."""

    status: str
    active_sessions: int
    session_backend: str
    capabilities: list[str]


class ErrorResponse(BaseModel):
    """Error response."""

    error: str
    detail: Optional[str] = None


@router.post(
    "",
    response_model=ChatResponse,
    status_code=status.HTTP_200_OK,
    summary="Send a chat message",
    description="Send a message to the GTM assistant and get a response.",
    responses={
        200: {"description": "Successful response"},
        422: {"model": ErrorResponse, "description": "Invalid request"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
)
async def chat(
    request: ChatRequest,
    manager: DialogueManager = Depends(get_dialogue_manager),
) -> ChatResponse:
    """
    Process a chat message.

    The session_id should be preserved across requests to maintain
    conversation context; a new one is issued when it is omitted.
    """
    session_id = request.session_id or str(uuid4())

    try:
        response = await manager.process_turn(session_id, request.message)
    except Exception as e:
        logger.exception(f"Error processing chat message: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to process message",
        )

    return ChatResponse.from_dialogue(response, session_id)


@router.get(
    "/capabilities",
    response_model=CapabilitiesResponse,
    summary="Assistant status",
    description="Report whether the assistant is operational and what it can do.",
)
async def capabilities(
    manager: DialogueManager = Depends(get_dialogue_manager),
) -> CapabilitiesResponse:
    """Get assistant status and capabilities."""
    return CapabilitiesResponse(
        status="operational",
        active_sessions=await manager.store.count(),
        session_backend=manager.store.backend,
        capabilities=manager.responses.capability_list(),
    )


@router.get(
    "/session/{session_id}",
    response_model=dict,
    summary="Get session data",
    description="Retrieve the current state of a conversation session.",
    responses={
        200: {"description": "Session data"},
        404: {"model": ErrorResponse, "description": "Session not found"},
    },
)
async def get_session(
    session_id: str,
    manager: DialogueManager = Depends(get_dialogue_manager),
) -> dict:
    """Get session information."""
    context = await manager.get_context(session_id)

    if context is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found",
        )

    return context.to_dict()


@router.delete(
    "/session/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Clear a session",
    description="Forget a conversation so the next message starts fresh.",
)
async def clear_session(
    session_id: str,
    manager: DialogueManager = Depends(get_dialogue_manager),
) -> None:
    """Clear a conversation."""
    if not await manager.clear_session(session_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found",
        )
