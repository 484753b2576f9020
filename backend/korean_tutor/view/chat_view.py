"""
Chat View - headless view-model of the chat screen.

Holds the input box, turns user actions into session-store operations and
renders the store into plain data (bubbles, sidebar, typing indicator,
status line) for whatever front end draws it.
"""

from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from typing import List, Optional, Tuple

from ..client.relay_client import HttpRelayClient
from ..config import settings
from ..sessions.models import ChatSession, Message
from ..sessions.persistence import SessionPersistence
from ..sessions.storage import FileKeyValueStorage
from ..sessions.store import ReplyFetcher, SessionStore, create_session_store

HEADER_TITLE = "한국어 학습 챗봇"
EMPTY_PLACEHOLDER = "메시지를 입력하여 대화를 시작하세요"
INPUT_PLACEHOLDER = "메시지를 입력하세요..."
STATUS_WAITING = "응답을 기다리는 중..."
STATUS_IDLE = "Enter 키로 전송"


def format_time_label(value: datetime, tz: Optional[tzinfo] = None) -> str:
    """Korean 12-hour clock label, e.g. "오후 3:05"."""
    local = value.astimezone(tz)
    meridiem = "오전" if local.hour < 12 else "오후"
    hour = local.hour % 12 or 12
    return f"{meridiem} {hour}:{local.minute:02d}"


@dataclass
class MessageBubble:
    id: str
    text: str
    is_user: bool
    is_error: bool
    time_label: str


@dataclass
class SidebarEntry:
    id: str
    title: str
    preview: str
    is_current: bool
    updated_label: str


@dataclass
class ViewState:
    header_title: str
    bubbles: List[MessageBubble] = field(default_factory=list)
    sidebar: List[SidebarEntry] = field(default_factory=list)
    show_typing: bool = False
    empty_placeholder: Optional[str] = None
    input_text: str = ""
    input_placeholder: str = INPUT_PLACEHOLDER
    input_disabled: bool = False
    send_enabled: bool = False
    status_text: str = STATUS_IDLE


class ChatView:
    """View-model binding the chat screen to a SessionStore."""

    def __init__(self, store: SessionStore, relay: ReplyFetcher, tz: Optional[tzinfo] = None):
        """
        Args:
            store: Session store backing the view
            relay: Reply fetcher used for sends (normally an HttpRelayClient)
            tz: Time zone for time labels; None uses the local zone
        """
        self.store = store
        self.relay = relay
        self.tz = tz
        self.input_text = ""

    def set_input(self, text: str) -> None:
        self.input_text = text

    @property
    def can_send(self) -> bool:
        return self.store.can_send(self.input_text)

    async def submit(self) -> bool:
        """Send the input box contents. Returns False if nothing was sent."""
        if not self.can_send:
            return False
        text = self.input_text
        self.input_text = ""
        return await self.store.send_message(text, self.relay)

    def start_new_chat(self) -> ChatSession:
        self.input_text = ""
        return self.store.start_new_chat()

    def load_chat(self, session_id: str) -> None:
        self.store.load_chat(session_id)

    def delete_session(self, session_id: str) -> None:
        self.store.delete_session(session_id)

    def _bubble(self, message: Message) -> MessageBubble:
        return MessageBubble(
            id=message.id,
            text=message.content,
            is_user=message.role == "user",
            is_error=message.is_error,
            time_label=format_time_label(message.timestamp, self.tz),
        )

    def _sidebar_entry(self, session: ChatSession, current_id: str) -> SidebarEntry:
        return SidebarEntry(
            id=session.id,
            title=session.title,
            preview=session.last_message,
            is_current=session.id == current_id,
            updated_label=format_time_label(session.updated_at, self.tz),
        )

    def render(self) -> ViewState:
        store = self.store
        current = store.current_session
        return ViewState(
            header_title=HEADER_TITLE,
            bubbles=[self._bubble(m) for m in current.messages],
            sidebar=[self._sidebar_entry(s, current.id) for s in store.sessions],
            show_typing=store.loading,
            empty_placeholder=EMPTY_PLACEHOLDER if not current.messages else None,
            input_text=self.input_text,
            input_disabled=store.loading,
            send_enabled=self.can_send,
            status_text=STATUS_WAITING if store.loading else STATUS_IDLE,
        )


async def create_chat_view(config=None, tz: Optional[tzinfo] = None) -> Tuple[ChatView, SessionPersistence]:
    """
    Wire a chat view from settings: file-backed session storage mirrored by
    SessionPersistence, and an HttpRelayClient pointed at ``relay_base_url``.

    Returns the view and its persistence so callers can ``flush()`` on exit.
    """
    config = config or settings
    persistence = SessionPersistence(
        FileKeyValueStorage(config.local_storage_path),
        key=config.chat_storage_key,
    )
    store = await create_session_store(persistence, max_message_length=config.max_message_length)
    view = ChatView(store, HttpRelayClient(config.relay_base_url), tz=tz)
    return view, persistence
