"""
Session Persistence - mirrors the session list into key-value storage.

The adapter never mutates sessions. It seeds the store once at startup
(``load``) and afterwards only reacts to store change notifications by
writing the full list. Writes are fire-and-forget and best-effort: a failing
backend is logged, never raised to the caller.
"""

import asyncio
import logging
from typing import Callable, List, Optional, Set, Tuple, TYPE_CHECKING

from pydantic import TypeAdapter, ValidationError

from .models import ChatSession
from .storage import KeyValueStorage

if TYPE_CHECKING:
    from .store import SessionStore

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "koreanChatHistory"

_SESSION_LIST = TypeAdapter(List[ChatSession])


class SessionPersistence:
    """Serializes chat sessions to a single storage key."""

    def __init__(self, storage: KeyValueStorage, key: str = DEFAULT_STORAGE_KEY):
        self.storage = storage
        self.key = key
        self._lock = asyncio.Lock()
        self._pending: Set[asyncio.Task] = set()
        self._version = 0
        self._written_version = 0
        # Change recorded while no event loop was running
        self._unsaved: Optional[Tuple[int, str]] = None

    @staticmethod
    def serialize(sessions: List[ChatSession]) -> str:
        """JSON array of sessions with camelCase keys and ISO-8601 datetimes."""
        return _SESSION_LIST.dump_json(sessions, by_alias=True).decode("utf-8")

    @staticmethod
    def deserialize(raw: str) -> List[ChatSession]:
        """
        Parse a stored session list, reviving datetime fields.

        Sessions repeating an earlier id are dropped.

        Raises:
            ValueError: if ``raw`` is not a valid session list
        """
        try:
            sessions = _SESSION_LIST.validate_json(raw)
        except ValidationError as e:
            raise ValueError(f"Malformed session data: {e.error_count()} validation error(s)") from e

        unique: List[ChatSession] = []
        seen: Set[str] = set()
        for session in sessions:
            if session.id in seen:
                logger.warning(f"Dropping persisted session with duplicate id {session.id}")
                continue
            seen.add(session.id)
            unique.append(session)
        return unique

    async def load(self) -> List[ChatSession]:
        """
        Read persisted sessions.

        Returns:
            The stored sessions in stored order, or [] when the key is missing,
            unreadable or malformed
        """
        try:
            raw = await self.storage.get_item(self.key)
        except Exception as e:
            logger.warning(f"Failed to read persisted sessions: {e}", exc_info=True)
            return []

        if raw is None:
            logger.info(f"No persisted sessions under '{self.key}'")
            return []

        try:
            sessions = self.deserialize(raw)
        except ValueError as e:
            logger.warning(f"Ignoring persisted sessions under '{self.key}': {e}")
            return []

        logger.info(f"Loaded {len(sessions)} persisted session(s)")
        return sessions

    async def save(self, sessions: List[ChatSession]) -> bool:
        """Write ``sessions`` now. Returns False (and logs) on failure."""
        return await self._save_payload(self.serialize(sessions))

    async def _save_payload(self, payload: str) -> bool:
        try:
            saved = await self.storage.set_item(self.key, payload)
        except Exception as e:
            logger.error(f"Failed to persist sessions: {e}", exc_info=True)
            return False
        if not saved:
            logger.warning(f"Storage refused write for '{self.key}'")
        return saved

    async def _write(self, version: int, payload: str) -> None:
        async with self._lock:
            # A newer snapshot already reached storage
            if version <= self._written_version:
                return
            if await self._save_payload(payload):
                self._written_version = version

    def attach(self, store: "SessionStore") -> Callable[[], None]:
        """Mirror every change of ``store``. Returns the unsubscribe callable."""
        return store.subscribe(self._on_change)

    def _on_change(self, store: "SessionStore") -> None:
        self._version += 1
        payload = self.serialize(store.sessions)

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._unsaved = (self._version, payload)
            return

        task = loop.create_task(self._write(self._version, payload))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def flush(self) -> None:
        """Wait until every recorded change has been written (or has failed)."""
        if self._unsaved is not None:
            version, payload = self._unsaved
            self._unsaved = None
            await self._write(version, payload)
        while self._pending:
            await asyncio.gather(*list(self._pending))
