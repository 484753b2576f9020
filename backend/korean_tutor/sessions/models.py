"""
Session Models - chat sessions and their messages.

Both models serialize with camelCase keys (``lastMessage``, ``createdAt``,
``isError`` ...) so the stored JSON keeps the browser-storage layout.
"""

import uuid
from datetime import datetime, timezone
from typing import List, Literal
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

DEFAULT_TITLE = "New Chat"


def new_id() -> str:
    """Collision-resistant opaque identifier."""
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _id_to_str(value):
    # Older stored histories used numeric millisecond timestamps as ids
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


class Message(BaseModel):
    """One chat message. Never modified once appended to a session."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str = Field(default_factory=new_id)
    content: str
    role: Literal["user", "assistant"]
    timestamp: datetime = Field(default_factory=utcnow)
    is_error: bool = False

    coerce_numeric_id = field_validator("id", mode="before")(_id_to_str)


class ChatSession(BaseModel):
    """One conversation thread with its own ordered message history."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(default_factory=new_id)
    title: str = DEFAULT_TITLE
    last_message: str = ""
    timestamp: datetime = Field(default_factory=utcnow)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    messages: List[Message] = Field(default_factory=list)

    coerce_numeric_id = field_validator("id", mode="before")(_id_to_str)

    @property
    def has_default_title(self) -> bool:
        return self.title == DEFAULT_TITLE
