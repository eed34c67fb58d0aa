"""Widget state shape.

A single immutable snapshot of everything the UI renders. Only the reducer
produces new snapshots.
"""

from dataclasses import dataclass
from enum import Enum

from ..api.models import Character, ChatMessage, UserChat
from ..catalog import filter_characters


class SendPhase(str, Enum):
    """Lifecycle of a single send operation."""

    IDLE = "idle"            # No send in flight
    SENDING = "sending"      # Prompt sent, waiting for the first fragment
    STREAMING = "streaming"  # Fragments arriving into the placeholder


@dataclass(frozen=True)
class WidgetState:
    """Everything the chat widget knows at one point in time."""

    # User
    uid: str | None = None
    user_chats: tuple[UserChat, ...] = ()

    # Character picker
    show_character_picker: bool = False
    characters: tuple[Character, ...] = ()
    search_term: str = ""
    active_filters: tuple[str, ...] = ()
    loading_characters: bool = False
    selecting_character: bool = False

    # Current conversation
    current_character: Character | None = None
    conversation_id: str | None = None
    show_chat: bool = False
    messages: tuple[ChatMessage, ...] = ()
    draft: str = ""

    # Send state machine
    phase: SendPhase = SendPhase.IDLE
    typing: bool = False
    stream_buffer: str = ""  # Concatenated fragments of the reply in flight
    reply_index: int | None = None  # Position of the assistant placeholder

    # Anonymous account dialog
    show_account_dialog: bool = False
    account_status: str = ""
    creating_account: bool = False

    # Transient banner
    error: str = ""

    @property
    def filtered_characters(self) -> list[Character]:
        """Characters matching the current search term and active filters."""
        return filter_characters(self.characters, self.search_term, self.active_filters)

    @property
    def is_streaming(self) -> bool:
        """Whether a send operation is in flight."""
        return self.phase is not SendPhase.IDLE

    @property
    def can_send(self) -> bool:
        """Whether the send control should be enabled."""
        return (
            not self.is_streaming
            and bool(self.draft.strip())
            and self.current_character is not None
            and bool(self.uid)
        )
