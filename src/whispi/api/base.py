from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from typing import Any

from ..streaming import StreamFrame
from .models import Character, ChatMessage, NewChatResult, UserChat


class ChatBackend(ABC):
    """Abstract base class for the remote chat service.

    This module hides the design decision of how the client reaches the server.
    Implementations must handle:
    - Transport setup and authentication
    - Request/response envelope conversion
    - Mapping server failures onto ApiError/NotFoundError
    - Decoding the reply stream into frames

    Supports async context manager protocol for proper resource cleanup:
        async with backend:
            chats = await backend.get_user_chats(uid)
    """

    @abstractmethod
    async def get_user_chats(self, uid: str) -> list[UserChat]:
        """List conversation summaries for a user.

        Raises:
            NotFoundError: If the user has no conversations yet
            ApiError: On any other failure
        """

    @abstractmethod
    async def create_anonymous_user(self) -> str:
        """Create an anonymous account and return its user identifier."""

    @abstractmethod
    async def onboard_user(
        self,
        uid: str,
        device_id: str,
        display_name: str,
        birth_year: int,
    ) -> None:
        """Attach profile details and the device fingerprint to an account."""

    @abstractmethod
    async def list_characters(
        self,
        limit: int = 20,
        filtered_tags: list[str] | None = None,
        prefetch_mode: bool = False,
    ) -> list[Character]:
        """Fetch a page of the character catalog."""

    @abstractmethod
    async def new_chat(self, character_id: str, uid: str) -> NewChatResult:
        """Open (or resume) the conversation between a user and a character."""

    @abstractmethod
    async def get_chat_history(
        self,
        character_id: str,
        uid: str,
        limit: int = 50,
    ) -> list[ChatMessage]:
        """Fetch past messages of a conversation, oldest first."""

    @abstractmethod
    def stream_reply(
        self,
        prompt: str,
        character_id: str,
        uid: str,
    ) -> AsyncIterator[StreamFrame]:
        """Send a prompt and iterate over the reply frames in arrival order.

        Malformed frames are skipped by the implementation. Error frames are
        yielded like any other frame; interpreting them is the caller's job.

        Raises:
            ApiError: If the stream could not be opened
        """

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""

    async def __aenter__(self) -> "ChatBackend":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup.

        Note: Suppresses "Event loop is closed" errors during cleanup.
        This is a known harmless race condition in httpx/anyio cleanup:
        https://github.com/encode/httpx/issues/914
        """
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
