"""Text formatting utilities for the TUI.

Hides how timestamps, previews and character details are turned into text.
"""

from datetime import datetime

from rich.text import Text

from ..api.models import Character, UserChat
from .config import CHAT_PREVIEW_LENGTH, MESSAGE_TIME_FORMAT, NEW_CHAT_PREVIEW


def format_time(value: datetime | None) -> str:
    """Format a timestamp as local HH:MM; empty for None."""
    if value is None:
        return ""
    if value.tzinfo is not None:
        value = value.astimezone()
    return value.strftime(MESSAGE_TIME_FORMAT)


def truncate(text: str, limit: int = CHAT_PREVIEW_LENGTH) -> str:
    """Collapse whitespace and cut text to limit characters with an ellipsis."""
    flat = " ".join(text.split())
    if len(flat) <= limit:
        return flat
    return flat[: limit - 1].rstrip() + "…"


def format_chat_summary(chat: UserChat) -> Text:
    """Two-line sidebar entry: name and time, then the last message preview."""
    line = Text()
    line.append(chat.character_name, style="bold")
    when = format_time(chat.last_message_time)
    if when:
        line.append(f"  {when}", style="dim")
    line.append("\n")
    line.append(truncate(chat.last_message or NEW_CHAT_PREVIEW), style="dim")
    return line


def format_character(character: Character) -> Text:
    """Picker entry: name (and age), status line and personality tags."""
    line = Text()
    line.append(character.name, style="bold")
    if character.age is not None:
        line.append(f", {character.age}")
    if character.status_text:
        line.append("\n")
        line.append(character.status_text, style="italic")
    if character.personality_tags:
        line.append("\n")
        line.append(" · ".join(character.personality_tags), style="dim")
    return line
