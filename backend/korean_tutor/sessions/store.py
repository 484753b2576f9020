"""
Session Store - authoritative chat-session state for one chat view.

Holds the session list (most recent first), the current-session pointer and
the loading flag. Every mutation ends with a change notification; persistence
and views subscribe to it instead of being called directly.
"""

import logging
from typing import Awaitable, Callable, List, Optional, Tuple

from ..client.relay_client import RelayClientError
from .models import ChatSession, Message, utcnow
from .persistence import SessionPersistence
from ..core.logging_config import preview_text
from ..tutor.language import wants_romanization

logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 1000
TITLE_LENGTH = 20

ERROR_REPLY = "죄송합니다. 오류가 발생했습니다. 다시 시도해주세요."
ERROR_MARKER = "Error occurred"
DEFAULT_REPLY = "안녕하세요! 한국어 학습을 도와드릴게요."

# (message, romanize) -> reply text
ReplyFetcher = Callable[[str, bool], Awaitable[str]]
Listener = Callable[["SessionStore"], None]


def is_valid_message(text: str, max_length: int = MAX_MESSAGE_LENGTH) -> bool:
    """Non-blank and within the length limit."""
    return bool(text.strip()) and len(text) <= max_length


def make_title(text: str) -> str:
    """Sidebar title from the first characters of a user message."""
    text = text.strip()
    if len(text) > TITLE_LENGTH:
        return text[:TITLE_LENGTH] + "..."
    return text


class SessionStore:
    """
    In-memory chat sessions with a current-session pointer.

    The list is never empty: an empty initial list and deleting the last
    session both leave exactly one fresh session behind.
    """

    def __init__(
        self,
        sessions: Optional[List[ChatSession]] = None,
        max_message_length: int = MAX_MESSAGE_LENGTH,
    ):
        self.sessions: List[ChatSession] = []
        self.current_session_id: Optional[str] = None
        self.loading = False
        self.max_message_length = max_message_length
        self._listeners: List[Listener] = []
        self.initialize(sessions or [])

    # -- observers -----------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for change notifications; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as e:
                logger.error(f"Session store listener failed: {e}", exc_info=True)

    # -- queries -------------------------------------------------------------

    def get_session(self, session_id: str) -> Optional[ChatSession]:
        for session in self.sessions:
            if session.id == session_id:
                return session
        return None

    @property
    def current_session(self) -> ChatSession:
        session = self.get_session(self.current_session_id) if self.current_session_id else None
        return session or self.sessions[0]

    @property
    def messages(self) -> List[Message]:
        return self.current_session.messages

    def can_send(self, text: str) -> bool:
        return not self.loading and is_valid_message(text, self.max_message_length)

    # -- operations ----------------------------------------------------------

    def initialize(self, sessions: List[ChatSession]) -> None:
        """Adopt persisted sessions, or seed one empty session when there are none."""
        self.sessions = list(sessions)
        if not self.sessions:
            self.sessions.append(ChatSession())
        self.current_session_id = self.sessions[0].id
        self._notify()

    def start_new_chat(self) -> ChatSession:
        """Prepend a fresh session and make it current."""
        session = ChatSession()
        self.sessions.insert(0, session)
        self.current_session_id = session.id
        logger.debug(f"Started session {session.id}")
        self._notify()
        return session

    def load_chat(self, session_id: str) -> None:
        """Switch to ``session_id``; unknown ids are ignored."""
        if self.get_session(session_id) is None:
            logger.debug(f"Ignoring switch to unknown session {session_id}")
            return
        self.current_session_id = session_id
        self._notify()

    def delete_session(self, session_id: str) -> None:
        """Remove a session, keeping at least one session in the list."""
        session = self.get_session(session_id)
        if session is None:
            return

        self.sessions.remove(session)
        if not self.sessions:
            self.start_new_chat()
            return

        if self.current_session_id == session_id:
            self.current_session_id = self.sessions[0].id
        self._notify()

    async def send_message(
        self,
        text: str,
        relay: ReplyFetcher,
        romanize: Optional[bool] = None,
    ) -> bool:
        """
        Send ``text`` from the current session and append the reply.

        The reply lands in the session that was current when the send began,
        even if another session is current by the time it arrives. When that
        session was deleted meanwhile the reply is dropped.

        Returns:
            False if the message was rejected (blank, too long, or a send is
            already in flight); True once the exchange has concluded
        """
        if not self.can_send(text):
            return False

        session = self.current_session
        session_id = session.id
        if romanize is None:
            romanize = wants_romanization(text)

        session.messages.append(Message(content=text, role="user"))
        self.loading = True
        self._notify()

        try:
            reply, last_message = await self._exchange(text, romanize, relay)
        finally:
            self.loading = False

        target = self.get_session(session_id)
        if target is None:
            logger.info(f"Session {session_id} was deleted before its reply arrived; reply dropped")
            self._notify()
            return True

        target.messages.append(reply)
        now = utcnow()
        target.last_message = last_message
        target.updated_at = now
        target.timestamp = now
        if target.has_default_title:
            target.title = make_title(text)
        self._notify()
        return True

    async def _exchange(self, text: str, romanize: bool, relay: ReplyFetcher) -> Tuple[Message, str]:
        """Call the relay; returns the assistant message and the sidebar preview."""
        try:
            reply_text = await relay(text, romanize)
        except Exception as e:
            logger.error(
                f"Relay request failed: {e}",
                exc_info=True,
                extra={"extra_fields": {"message": preview_text(text), "romanize": romanize}}
            )
            # Prefer the relay's own localized fallback when it sent one
            content = e.reply if isinstance(e, RelayClientError) and e.reply else ERROR_REPLY
            return Message(content=content, role="assistant", is_error=True), ERROR_MARKER

        reply_text = reply_text or DEFAULT_REPLY
        return Message(content=reply_text, role="assistant"), reply_text


async def create_session_store(
    persistence: SessionPersistence,
    max_message_length: int = MAX_MESSAGE_LENGTH,
) -> SessionStore:
    """Build a store seeded from ``persistence`` and mirrored back into it."""
    store = SessionStore(await persistence.load(), max_message_length=max_message_length)
    persistence.attach(store)
    await persistence.save(store.sessions)
    return store
