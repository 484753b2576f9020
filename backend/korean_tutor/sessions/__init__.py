"""Sessions module - chat session state and its persistence."""

from .models import ChatSession, Message, DEFAULT_TITLE
from .storage import KeyValueStorage, MemoryKeyValueStorage, FileKeyValueStorage
from .persistence import SessionPersistence, DEFAULT_STORAGE_KEY
from .store import (
    SessionStore,
    create_session_store,
    MAX_MESSAGE_LENGTH,
    ERROR_REPLY,
    ERROR_MARKER,
    DEFAULT_REPLY,
)

__all__ = [
    'ChatSession', 'Message', 'DEFAULT_TITLE',
    'KeyValueStorage', 'MemoryKeyValueStorage', 'FileKeyValueStorage',
    'SessionPersistence', 'DEFAULT_STORAGE_KEY',
    'SessionStore', 'create_session_store',
    'MAX_MESSAGE_LENGTH', 'ERROR_REPLY', 'ERROR_MARKER', 'DEFAULT_REPLY',
]
