"""
Dialogue Manager - Main Orchestrator.

Runs one user turn through intent classification, the slot gate and the
stage machine, then hands any resulting command to the content renderer.

The transition itself (advance) is synchronous and never awaits. It is
committed to the session store before the renderer is called, so a
second turn for the same session never sees a half-updated context.
"""

import logging
from typing import Optional

import httpx

from gtm_assistant.core.intelligence.intent.classifier import IntentClassifier
from gtm_assistant.core.intelligence.intent.types import Intent
from gtm_assistant.core.intelligence.session.models import DialogueContext
from gtm_assistant.core.intelligence.session.state import is_awaiting_input
from gtm_assistant.core.intelligence.session.store import SessionStore
from gtm_assistant.core.intelligence.slots.extractor import SlotExtractor
from .commands import CommandTranslator
from .renderer import ContentRenderer, RendererError, RenderResult
from .response import ResponseGenerator
from .types import DialogueResponse, NextAction, Tone

logger = logging.getLogger(__name__)


class DialogueManager:
    """
    Per-session gather-then-execute conversation manager.

    Coordinates:
    - Intent classification
    - Slot gating for generation requests
    - Session state (via the injected SessionStore)
    - Command translation
    - Content rendering (optional, injected)
    """

    def __init__(
        self,
        store: SessionStore,
        classifier: Optional[IntentClassifier] = None,
        extractor: Optional[SlotExtractor] = None,
        translator: Optional[CommandTranslator] = None,
        responses: Optional[ResponseGenerator] = None,
        renderer: Optional[ContentRenderer] = None,
    ):
        """Initialize manager with its collaborators.

        Args:
            store: Session state store owned by the host
            classifier: Intent classifier
            extractor: Slot extractor (decides the vocabulary)
            translator: Command translator
            responses: Response templates
            renderer: Content renderer; without one, commands are only returned
        """
        self._store = store
        self._classifier = classifier or IntentClassifier()
        self._extractor = extractor or SlotExtractor()
        self._translator = translator or CommandTranslator()
        self._responses = responses or ResponseGenerator()
        self._renderer = renderer

    @property
    def store(self) -> SessionStore:
        return self._store

    @property
    def responses(self) -> ResponseGenerator:
        return self._responses

    async def process_turn(self, session_id: str, utterance: str) -> DialogueResponse:
        """Process one user utterance.

        Args:
            session_id: Conversation identifier (unknown ids start a new session)
            utterance: Raw user text

        Returns:
            DialogueResponse for the caller to display
        """
        async with self._store.lock(session_id):
            context = await self._store.get_or_create(session_id)
            response = self.advance(context, utterance)

            # Commit before any renderer call
            await self._store.save(context)

            if response.command is not None and self._renderer is not None:
                response = await self._render(context, response)
                await self._store.save(context)

        return response

    def advance(self, context: DialogueContext, utterance: str) -> DialogueResponse:
        """Apply one utterance to a context. Pure state transition, no I/O.

        Args:
            context: Session context, mutated in place
            utterance: Raw user text

        Returns:
            DialogueResponse describing the transition
        """
        utterance = (utterance or "").strip()
        intent = self._classifier.classify(utterance).intent
        context.record_turn(utterance, intent)

        if intent == Intent.GREETING:
            response = self._reply(self._responses.greeting(), Tone.CONCIERGE, NextAction.EXPLAIN)
        elif intent == Intent.CAPABILITY_QUERY:
            response = self._reply(self._responses.capabilities(), Tone.EXPERT, NextAction.WAIT)
        elif intent == Intent.INSIGHTS_REQUEST:
            response = self._reply(
                self._responses.insights_acknowledgment(), Tone.EXPERT, NextAction.EXECUTE
            )
        elif intent == Intent.GENERATION_REQUEST:
            response = self._handle_request(context, utterance)
        elif is_awaiting_input(context.stage) and utterance:
            # Acknowledgments and bare answers ("for healthcare") fill open slots
            response = self._handle_follow_up(context, utterance)
        elif intent == Intent.ACKNOWLEDGMENT and self._classifier.has_generation_keywords(utterance):
            response = self._handle_request(context, utterance)
        else:
            response = self._reply(self._responses.general(), Tone.EXPERT, NextAction.WAIT)

        response.intent = intent
        response.stage = context.stage
        response.session_id = context.session_id

        logger.debug(
            f"Session {context.session_id}: intent={intent.value} "
            f"stage={context.stage.value} next={response.next_action.value}"
        )
        return response

    def _handle_request(self, context: DialogueContext, text: str) -> DialogueResponse:
        """Start a fresh generation request."""
        missing = self._extractor.extract_missing_slots(text, Intent.GENERATION_REQUEST)

        if not missing:
            return self._execute(context, text, follow_up=False)

        context.begin_gathering(text, missing)
        return self._reply(
            self._responses.gather(missing), Tone.COLLABORATIVE, NextAction.QUESTION
        )

    def _handle_follow_up(self, context: DialogueContext, text: str) -> DialogueResponse:
        """Combine an answer with the request being gathered."""
        combined = f"{context.request_text} {text}".strip()
        missing = self._extractor.extract_missing_slots(combined, Intent.GENERATION_REQUEST)

        if not missing:
            return self._execute(context, combined, follow_up=True)

        context.begin_gathering(combined, missing)
        return self._reply(
            self._responses.still_missing(missing), Tone.COLLABORATIVE, NextAction.QUESTION
        )

    def _execute(self, context: DialogueContext, text: str, follow_up: bool) -> DialogueResponse:
        command = self._translator.translate(text)
        context.begin_execution(text, command)
        return self._reply(
            self._responses.executing(self._translator.describe(text), follow_up=follow_up),
            Tone.TRANSPARENT,
            NextAction.EXECUTE,
            command=command,
        )

    async def _render(
        self,
        context: DialogueContext,
        response: DialogueResponse,
    ) -> DialogueResponse:
        """Hand the committed command to the renderer and settle the stage."""
        try:
            result = await self._renderer.render(response.command)
        except (RendererError, httpx.HTTPError) as e:
            result = RenderResult(success=False, error_detail=str(e))
        except Exception as e:
            logger.exception(f"Renderer raised for session {context.session_id}: {e!r}")
            result = RenderResult(success=False, error_detail=repr(e))

        if not result.success:
            # Detail goes to logs only
            logger.warning(
                f"Render failed for session {context.session_id}: {result.error_detail}"
            )
            context.reset()
            return DialogueResponse(
                message=self._responses.render_failed(),
                tone=Tone.EXPERT,
                next_action=NextAction.WAIT,
                intent=response.intent,
                stage=context.stage,
                session_id=context.session_id,
            )

        context.complete(result.artifact_handle)
        response.stage = context.stage
        response.artifact_handle = result.artifact_handle
        response.message = f"{response.message}\n\n{self._responses.rendered(result.artifact_handle)}"
        return response

    async def get_context(self, session_id: str) -> Optional[DialogueContext]:
        """Get a session's context, or None if the session is unknown."""
        return await self._store.get(session_id)

    async def clear_session(self, session_id: str) -> bool:
        """Forget a conversation.

        Returns:
            True if the session existed
        """
        async with self._store.lock(session_id):
            return await self._store.delete(session_id)

    @staticmethod
    def _reply(
        message: str,
        tone: Tone,
        next_action: NextAction,
        command=None,
    ) -> DialogueResponse:
        return DialogueResponse(
            message=message,
            tone=tone,
            next_action=next_action,
            command=command,
        )
