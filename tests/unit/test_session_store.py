"""Tests for session state, models and the session store."""

import asyncio

import pytest
from unittest.mock import AsyncMock, patch
from redis.exceptions import ConnectionError as RedisConnectionError

from gtm_assistant.config import Settings
from gtm_assistant.core.intelligence.intent.types import Intent
from gtm_assistant.core.intelligence.session.models import DialogueContext, StructuredCommand
from gtm_assistant.core.intelligence.session.state import (
    InvalidTransitionError,
    Stage,
    can_transition,
    is_awaiting_input,
)
from gtm_assistant.core.intelligence.session.store import (
    SESSION_PREFIX,
    SessionStore,
    SessionStoreError,
    create_session_store,
)
from gtm_assistant.core.intelligence.slots.types import SlotName


def _command() -> StructuredCommand:
    return StructuredCommand(
        subject="business solution",
        domain="retail",
        elements=["office_building", "retail_store"],
    )


class TestStageMachine:
    """Test stage transition table."""

    def test_staying_put_is_valid(self):
        for stage in Stage:
            assert can_transition(stage, stage)

    def test_initial_cannot_complete(self):
        assert not can_transition(Stage.INITIAL, Stage.COMPLETE)
        assert not can_transition(Stage.GATHERING_INFO, Stage.COMPLETE)

    def test_renderer_failure_path(self):
        assert can_transition(Stage.EXECUTING, Stage.INITIAL)

    def test_is_awaiting_input(self):
        assert is_awaiting_input(Stage.GATHERING_INFO)
        assert not is_awaiting_input(Stage.EXECUTING)


class TestDialogueContext:
    """Test context stage helpers and serialization."""

    def test_defaults(self):
        context = DialogueContext(session_id="sess-1")

        assert context.stage == Stage.INITIAL
        assert context.intent == Intent.GENERAL
        assert context.missing_slots == []
        assert context.pending_command is None
        assert context.is_consistent

    def test_begin_gathering(self):
        context = DialogueContext(session_id="sess-1")
        context.begin_gathering("create something", [SlotName.DOMAIN_CONTEXT])

        assert context.stage == Stage.GATHERING_INFO
        assert context.missing_slots == [SlotName.DOMAIN_CONTEXT]
        assert context.request_text == "create something"
        assert context.is_consistent

    def test_begin_gathering_requires_missing(self):
        context = DialogueContext(session_id="sess-1")

        with pytest.raises(ValueError):
            context.begin_gathering("create something", [])

    def test_begin_gathering_dedupes(self):
        context = DialogueContext(session_id="sess-1")
        context.begin_gathering("x", [SlotName.SUBJECT, SlotName.SUBJECT])

        assert context.missing_slots == [SlotName.SUBJECT]

    def test_execution_and_complete(self):
        context = DialogueContext(session_id="sess-1")
        context.begin_execution("generate retail", _command())

        assert context.stage == Stage.EXECUTING
        assert context.is_consistent

        context.complete("https://cdn.example.com/a.png")

        assert context.stage == Stage.COMPLETE
        assert context.pending_command is None
        assert context.last_artifact == "https://cdn.example.com/a.png"
        assert context.is_consistent

    def test_invalid_transition(self):
        context = DialogueContext(session_id="sess-1")

        with pytest.raises(InvalidTransitionError) as exc_info:
            context.complete("handle")

        assert exc_info.value.from_stage == Stage.INITIAL
        assert exc_info.value.to_stage == Stage.COMPLETE

    def test_reset(self):
        context = DialogueContext(session_id="sess-1")
        context.begin_execution("generate retail", _command())
        context.reset()

        assert context.stage == Stage.INITIAL
        assert context.pending_command is None
        assert context.request_text == ""
        assert context.is_consistent

    def test_inconsistent_state_detected(self):
        context = DialogueContext(session_id="sess-1", stage=Stage.EXECUTING)

        assert not context.is_consistent

    def test_record_turn(self):
        context = DialogueContext(session_id="sess-1")
        context.record_turn("hello", Intent.GREETING)

        assert context.last_utterance == "hello"
        assert context.intent == Intent.GREETING
        assert context.turn_count == 1

    def test_json_roundtrip_preserves_command(self):
        context = DialogueContext(session_id="sess-1")
        context.record_turn("generate retail", Intent.GENERATION_REQUEST)
        context.begin_execution("generate retail", _command())

        restored = DialogueContext.from_json(context.to_json())

        assert restored.stage == Stage.EXECUTING
        assert restored.intent == Intent.GENERATION_REQUEST
        assert restored.pending_command == context.pending_command
        assert restored.created_at == context.created_at

    def test_command_prompt(self):
        prompt = _command().to_prompt()

        assert prompt == (
            "Draw these elements: office_building, retail_store for retail "
            "business solution with e& B2B branding and professional layout"
        )


class TestSessionStoreMemory:
    """Test the in-memory backend."""

    @pytest.fixture
    def store(self):
        return SessionStore()

    @pytest.mark.asyncio
    async def test_create_and_get(self, store):
        created = await store.create("sess-1")
        fetched = await store.get("sess-1")

        assert store.backend == "memory"
        assert fetched is created
        assert fetched.stage == Stage.INITIAL

    @pytest.mark.asyncio
    async def test_get_unknown(self, store):
        assert await store.get("missing") is None

    @pytest.mark.asyncio
    async def test_get_or_create(self, store):
        first = await store.get_or_create("sess-1")
        second = await store.get_or_create("sess-1")

        assert first is second
        assert await store.count() == 1

    @pytest.mark.asyncio
    async def test_delete(self, store):
        await store.create("sess-1")

        assert await store.delete("sess-1") is True
        assert await store.delete("sess-1") is False
        assert await store.get("sess-1") is None

    @pytest.mark.asyncio
    async def test_teardown(self, store):
        await store.create("sess-1")
        await store.create("sess-2")
        await store.teardown()

        assert await store.count() == 0

    @pytest.mark.asyncio
    async def test_idle_locks_are_dropped(self, store):
        async with store.lock("sess-1"):
            assert store.active_locks() == 1

        assert store.active_locks() == 0

    @pytest.mark.asyncio
    async def test_locks_are_per_session(self, store):
        async with store.lock("sess-1"):
            # A different session is never blocked
            await asyncio.wait_for(self._enter(store, "sess-2"), timeout=1)

    @staticmethod
    async def _enter(store, session_id):
        async with store.lock(session_id):
            pass

    @pytest.mark.asyncio
    async def test_delete_keeps_queued_lock(self, store):
        """Test a delete between queued turns does not split the queue."""
        await store.create("sess-1")
        inside = 0
        peak = 0

        async def turn(hold: asyncio.Event):
            nonlocal inside, peak
            async with store.lock("sess-1"):
                inside += 1
                peak = max(peak, inside)
                await hold.wait()
                inside -= 1

        async def clear():
            async with store.lock("sess-1"):
                await store.delete("sess-1")

        release_first, release_second, release_late = (
            asyncio.Event(), asyncio.Event(), asyncio.Event()
        )
        first = asyncio.create_task(turn(release_first))
        await asyncio.sleep(0)
        cleared = asyncio.create_task(clear())
        second = asyncio.create_task(turn(release_second))
        await asyncio.sleep(0)

        release_first.set()
        await first
        await cleared

        # Second turn now owns the lock; a new turn must queue behind it
        late = asyncio.create_task(turn(release_late))
        for _ in range(5):
            await asyncio.sleep(0)

        assert peak == 1

        release_second.set()
        release_late.set()
        await asyncio.gather(second, late)

        assert peak == 1
        assert store.active_locks() == 0

    @pytest.mark.asyncio
    async def test_separate_stores_are_isolated(self):
        a, b = SessionStore(), SessionStore()
        await a.create("sess-1")

        assert await b.get("sess-1") is None

    @pytest.mark.asyncio
    async def test_lock_serializes_turns(self, store):
        order = []

        async def turn(name: str):
            async with store.lock("sess-1"):
                order.append(f"{name}-start")
                await asyncio.sleep(0)
                order.append(f"{name}-end")

        await asyncio.gather(turn("a"), turn("b"))

        assert order == ["a-start", "a-end", "b-start", "b-end"]


class TestSessionStoreRedis:
    """Test the Redis backend with a mocked client."""

    @pytest.fixture
    def mock_redis(self):
        """Create mock Redis client."""
        mock = AsyncMock()
        mock.get = AsyncMock(return_value=None)
        mock.setex = AsyncMock()
        mock.set = AsyncMock()
        mock.delete = AsyncMock(return_value=1)
        return mock

    @pytest.mark.asyncio
    async def test_create_without_ttl(self, mock_redis):
        store = SessionStore(mock_redis)
        await store.create("sess-1")

        assert store.backend == "redis"
        mock_redis.set.assert_called_once()
        key = mock_redis.set.call_args[0][0]
        assert key == f"{SESSION_PREFIX}sess-1"
        mock_redis.setex.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_with_ttl(self, mock_redis):
        store = SessionStore(mock_redis, ttl=600)
        await store.create("sess-1")

        mock_redis.setex.assert_called_once()
        assert mock_redis.setex.call_args[0][1] == 600

    @pytest.mark.asyncio
    async def test_get_existing(self, mock_redis):
        existing = DialogueContext(session_id="sess-1")
        existing.begin_gathering("create something", [SlotName.DOMAIN_CONTEXT])
        mock_redis.get = AsyncMock(return_value=existing.to_json())

        store = SessionStore(mock_redis)
        context = await store.get("sess-1")

        assert context.stage == Stage.GATHERING_INFO
        assert context.missing_slots == [SlotName.DOMAIN_CONTEXT]

    @pytest.mark.asyncio
    async def test_get_corrupt_payload(self, mock_redis):
        mock_redis.get = AsyncMock(return_value="{not json")
        store = SessionStore(mock_redis)

        with pytest.raises(SessionStoreError):
            await store.get("sess-1")

    @pytest.mark.asyncio
    async def test_save_does_not_mirror_to_memory(self, mock_redis):
        store = SessionStore(mock_redis, ttl=600)
        await store.create("sess-1")
        await store.create("sess-2")

        assert store._in_memory == {}

    @pytest.mark.asyncio
    async def test_read_failure_does_not_resurrect_saved_context(self, mock_redis):
        """Test a context that reached Redis is not served from memory."""
        store = SessionStore(mock_redis, ttl=600)
        await store.create("sess-1")
        mock_redis.get = AsyncMock(side_effect=RedisConnectionError("down"))

        assert await store.get("sess-1") is None

    @pytest.mark.asyncio
    async def test_successful_write_replaces_fallback(self, mock_redis):
        mock_redis.set = AsyncMock(side_effect=RedisConnectionError("down"))
        store = SessionStore(mock_redis)
        context = await store.create("sess-1")

        mock_redis.set = AsyncMock()
        await store.save(context)

        assert store._in_memory == {}

    @pytest.mark.asyncio
    async def test_write_failure_keeps_memory_copy(self, mock_redis):
        mock_redis.set = AsyncMock(side_effect=RedisConnectionError("down"))
        mock_redis.get = AsyncMock(side_effect=RedisConnectionError("down"))
        store = SessionStore(mock_redis)

        context = await store.create("sess-1")

        assert await store.get("sess-1") is context

    @pytest.mark.asyncio
    async def test_delete(self, mock_redis):
        store = SessionStore(mock_redis)

        assert await store.delete("sess-1") is True
        mock_redis.delete.assert_called_once_with(f"{SESSION_PREFIX}sess-1")


class TestCreateSessionStore:
    """Test backend selection from settings."""

    @pytest.mark.asyncio
    async def test_memory_backend(self):
        store = await create_session_store(Settings(session_backend="memory"))

        assert store.backend == "memory"

    @pytest.mark.asyncio
    async def test_redis_backend(self):
        mock_client = AsyncMock()
        with patch(
            "gtm_assistant.core.intelligence.session.store.RedisClient.get_client",
            AsyncMock(return_value=mock_client),
        ):
            store = await create_session_store(
                Settings(session_backend="redis", redis_session_ttl=60)
            )

        assert store.backend == "redis"

    @pytest.mark.asyncio
    async def test_redis_unavailable_falls_back(self):
        with patch(
            "gtm_assistant.core.intelligence.session.store.RedisClient.get_client",
            AsyncMock(return_value=None),
        ):
            store = await create_session_store(Settings(session_backend="redis"))

        assert store.backend == "memory"
