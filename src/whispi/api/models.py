"""Data models exchanged with the remote API.

Wire names are camelCase; Python attributes are snake_case and either
spelling is accepted on input.
"""

from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

_WIRE_CONFIG = ConfigDict(
    frozen=True,
    populate_by_name=True,
    alias_generator=to_camel,
)


def _coerce_timestamp(value: Any) -> Any:
    """Accept ISO strings, epoch milliseconds and Firestore-style timestamp objects."""
    if isinstance(value, dict):
        seconds = value.get("_seconds", value.get("seconds"))
        if seconds is not None:
            nanos = value.get("_nanoseconds", value.get("nanoseconds", 0)) or 0
            return datetime.fromtimestamp(seconds + nanos / 1e9, tz=timezone.utc)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    return value


class Character(BaseModel):
    """A selectable chat persona from the remote catalog."""

    model_config = _WIRE_CONFIG

    id: str = Field(description="Character identifier")
    name: str = Field(description="Display name")
    profile_picture: str | None = Field(default=None, description="Avatar URL")
    status_text: str = Field(default="", description="Short status line")
    personality_tags: list[str] | None = Field(default=None)
    filter_tags: list[str] | None = Field(default=None)
    age: int | None = Field(default=None)


class ChatMessage(BaseModel):
    """A single message in a conversation."""

    model_config = _WIRE_CONFIG

    content: str = Field(description="Message text")
    role: Literal["user", "assistant"] = Field(description="Who sent the message")
    timestamp: datetime = Field(default_factory=datetime.now)

    @field_validator("timestamp", mode="before")
    @classmethod
    def _parse_timestamp(cls, value: Any) -> Any:
        return _coerce_timestamp(value)


class UserChat(BaseModel):
    """Summary of one conversation, shown in the sidebar."""

    model_config = _WIRE_CONFIG

    character_id: str
    character_name: str
    character_avatar: str | None = None
    conversation_id: str
    last_message: str | None = None
    last_message_time: datetime | None = None

    @field_validator("last_message_time", mode="before")
    @classmethod
    def _parse_timestamp(cls, value: Any) -> Any:
        return _coerce_timestamp(value)


class NewChatResult(BaseModel):
    """Result of opening a conversation with a character."""

    model_config = _WIRE_CONFIG

    conversation_id: str
    is_new_conversation: bool = True
    message_count: int = 0

    @property
    def has_history(self) -> bool:
        """Whether the conversation already has messages worth loading."""
        return not self.is_new_conversation and self.message_count > 0
