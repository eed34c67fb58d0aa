"""Action variants accepted by the reducer."""

from dataclasses import dataclass, field
from datetime import datetime

from ..api.models import Character, ChatMessage, UserChat


@dataclass(frozen=True)
class SetUser:
    uid: str


@dataclass(frozen=True)
class SetUserChats:
    chats: tuple[UserChat, ...]


@dataclass(frozen=True)
class OpenCharacterPicker:
    pass


@dataclass(frozen=True)
class CloseCharacterPicker:
    """Hide the picker and reset its search term and filters."""


@dataclass(frozen=True)
class SetCharactersLoading:
    loading: bool


@dataclass(frozen=True)
class SetCharacters:
    characters: tuple[Character, ...]


@dataclass(frozen=True)
class SetSearchTerm:
    term: str


@dataclass(frozen=True)
class ToggleFilterTag:
    tag: str


@dataclass(frozen=True)
class SetSelectingCharacter:
    selecting: bool


@dataclass(frozen=True)
class OpenChat:
    """Make a conversation current and show the chat view."""

    character: Character
    conversation_id: str | None
    messages: tuple[ChatMessage, ...] = ()


@dataclass(frozen=True)
class SetMessages:
    messages: tuple[ChatMessage, ...]


@dataclass(frozen=True)
class SetDraft:
    text: str


@dataclass(frozen=True)
class SendStarted:
    """Append the user's message and enter the SENDING phase."""

    prompt: str
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class StreamChunk:
    """A fragment of the reply arrived."""

    content: str


@dataclass(frozen=True)
class StreamComplete:
    """The authoritative reply text arrived."""

    content: str


@dataclass(frozen=True)
class StreamError:
    message: str


@dataclass(frozen=True)
class StreamFinished:
    pass


@dataclass(frozen=True)
class OpenAccountDialog:
    pass


@dataclass(frozen=True)
class CloseAccountDialog:
    pass


@dataclass(frozen=True)
class SetAccountStatus:
    status: str
    busy: bool = False


@dataclass(frozen=True)
class SetError:
    message: str


@dataclass(frozen=True)
class ClearError:
    pass


Action = (
    SetUser
    | SetUserChats
    | OpenCharacterPicker
    | CloseCharacterPicker
    | SetCharactersLoading
    | SetCharacters
    | SetSearchTerm
    | ToggleFilterTag
    | SetSelectingCharacter
    | OpenChat
    | SetMessages
    | SetDraft
    | SendStarted
    | StreamChunk
    | StreamComplete
    | StreamError
    | StreamFinished
    | OpenAccountDialog
    | CloseAccountDialog
    | SetAccountStatus
    | SetError
    | ClearError
)
