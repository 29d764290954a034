"""Session state store for dialogue contexts."""

import asyncio
import json
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import AsyncIterator, Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from gtm_assistant.config import Settings
from gtm_assistant.infra.redis import APP_PREFIX, RedisClient
from .models import DialogueContext

logger = logging.getLogger(__name__)

# Session key prefix (extends existing APP_PREFIX)
SESSION_PREFIX = f"{APP_PREFIX}dialogue:session:"


class SessionStoreError(Exception):
    """Raised when a stored session payload cannot be decoded."""
    pass


@dataclass
class _SessionLock:
    """Per-session lock with a count of turns holding or waiting on it."""

    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    users: int = 0


class SessionStore:
    """
    Map from session id to DialogueContext.

    Constructed explicitly by the host and handed to the dialogue
    manager. Keeps contexts in memory, or in Redis when a client is
    given (key pattern: gtm:v1:dialogue:session:{session_id}). With
    Redis, a context is only kept in memory after a failed Redis write.

    Writes are atomic per key. Callers serialize turns of one session
    with lock(session_id); there is no lock across sessions.
    """

    def __init__(self, redis_client: Optional[Redis] = None, ttl: int = 0):
        """Initialize store.

        Args:
            redis_client: Optional Redis client; memory-only when None
            ttl: Redis key TTL in seconds, 0 for no expiry
        """
        self._redis = redis_client
        self._ttl = ttl
        self._in_memory: dict[str, DialogueContext] = {}
        self._locks: dict[str, _SessionLock] = {}

    @property
    def backend(self) -> str:
        """Name of the active backend."""
        return "redis" if self._redis is not None else "memory"

    def _key(self, session_id: str) -> str:
        """Generate Redis key."""
        return f"{SESSION_PREFIX}{session_id}"

    @asynccontextmanager
    async def lock(self, session_id: str) -> AsyncIterator[None]:
        """
        Serialize turns of one session.

        The lock entry lives while any turn holds or waits on it and is
        dropped when the last one leaves, so deleting a session never
        splits its queue across two locks.

        Usage:
            async with store.lock(session_id):
                ...
        """
        entry = self._locks.get(session_id)
        if entry is None:
            entry = self._locks[session_id] = _SessionLock()
        entry.users += 1

        try:
            async with entry.lock:
                yield
        finally:
            entry.users -= 1
            if entry.users == 0 and self._locks.get(session_id) is entry:
                del self._locks[session_id]

    def active_locks(self) -> int:
        """Number of sessions with a turn in progress or queued."""
        return len(self._locks)

    async def create(self, session_id: str) -> DialogueContext:
        """
        Create a fresh context in the initial stage.

        Args:
            session_id: Session identifier

        Returns:
            Created DialogueContext
        """
        context = DialogueContext(session_id=session_id)
        await self.save(context)
        logger.debug(f"Session created: {session_id}")
        return context

    async def get(self, session_id: str) -> Optional[DialogueContext]:
        """
        Get context by session id.

        Args:
            session_id: Session identifier

        Returns:
            DialogueContext or None if not found
        """
        if self._redis is None:
            return self._in_memory.get(session_id)

        try:
            data = await self._redis.get(self._key(session_id))
        except RedisError as e:
            logger.error(f"Redis read failed, using in-memory fallback: {e}")
            return self._in_memory.get(session_id)

        if not data:
            return self._in_memory.get(session_id)

        try:
            return DialogueContext.from_json(data)
        except (KeyError, ValueError, json.JSONDecodeError) as e:
            raise SessionStoreError(f"Corrupt session payload for {session_id}") from e

    async def get_or_create(self, session_id: str) -> DialogueContext:
        """
        Get existing context or create a new one.

        Unknown ids are not an error; they start a new conversation.
        """
        context = await self.get(session_id)
        if context is not None:
            return context
        return await self.create(session_id)

    async def save(self, context: DialogueContext) -> None:
        """
        Commit a context.

        Args:
            context: DialogueContext to store
        """
        if self._redis is None:
            self._in_memory[context.session_id] = context
            return

        key = self._key(context.session_id)
        try:
            if self._ttl:
                await self._redis.setex(key, self._ttl, context.to_json())
            else:
                await self._redis.set(key, context.to_json())
            # Redis holds the latest copy; drop any stale fallback
            self._in_memory.pop(context.session_id, None)
            logger.debug(f"Session saved: {context.session_id}")
        except RedisError as e:
            self._in_memory[context.session_id] = context
            logger.warning(
                f"Redis write failed, using in-memory fallback for session "
                f"{context.session_id}: {e}"
            )

    async def delete(self, session_id: str) -> bool:
        """
        Delete a context.

        Args:
            session_id: Session identifier

        Returns:
            True if something was deleted
        """
        existed = self._in_memory.pop(session_id, None) is not None

        if self._redis is not None:
            try:
                deleted = await self._redis.delete(self._key(session_id))
                existed = existed or bool(deleted)
            except RedisError as e:
                logger.error(f"Redis delete failed: {e}")

        if existed:
            logger.debug(f"Session deleted: {session_id}")
        return existed

    async def count(self) -> int:
        """Number of stored sessions."""
        if self._redis is None:
            return len(self._in_memory)

        try:
            total = 0
            async for _ in self._redis.scan_iter(match=f"{SESSION_PREFIX}*"):
                total += 1
            return total
        except RedisError as e:
            logger.error(f"Redis scan failed: {e}")
            return len(self._in_memory)

    async def teardown(self) -> None:
        """Drop contexts held in process. The Redis client is owned elsewhere."""
        self._in_memory.clear()
        logger.debug("Session store torn down")


async def create_session_store(settings: Settings) -> SessionStore:
    """
    Build a SessionStore for the configured backend.

    Falls back to memory when Redis is requested but unavailable.
    """
    if settings.session_backend == "redis":
        client = await RedisClient.get_client()
        if client is not None:
            return SessionStore(client, ttl=settings.redis_session_ttl)
        logger.warning("Redis unavailable, using in-memory session store")

    return SessionStore()
