"""Pytest configuration and shared fixtures."""
import os

import pytest

from whispi.api import ChatBackend
from whispi.api.models import Character, ChatMessage, NewChatResult, UserChat
from whispi.controller import ChatController
from whispi.session.in_memory import InMemorySessionStore


class FakeChatBackend(ChatBackend):
    """In-process backend recording calls and replaying canned results.

    Set a ``*_error`` attribute to make the matching call raise it.
    """

    def __init__(self) -> None:
        self.calls: list[tuple] = []
        self.closed = False

        self.chats: list[UserChat] = []
        self.chats_error: Exception | None = None

        self.anonymous_uid = "anon-123"
        self.create_error: Exception | None = None
        self.onboard_error: Exception | None = None

        self.characters: list[Character] = []
        self.characters_error: Exception | None = None

        self.new_chat_result = NewChatResult(conversation_id="conv-1")
        self.new_chat_error: Exception | None = None

        self.history: list[ChatMessage] = []
        self.history_error: Exception | None = None

        self.reply_frames: list = []
        self.stream_error: Exception | None = None
        self.stream_gate = None  # asyncio.Event awaited before the first frame

    def call_names(self) -> list[str]:
        return [call[0] for call in self.calls]

    async def get_user_chats(self, uid):
        self.calls.append(("get_user_chats", uid))
        if self.chats_error:
            raise self.chats_error
        return list(self.chats)

    async def create_anonymous_user(self):
        self.calls.append(("create_anonymous_user",))
        if self.create_error:
            raise self.create_error
        return self.anonymous_uid

    async def onboard_user(self, uid, device_id, display_name, birth_year):
        self.calls.append(("onboard_user", uid, device_id, display_name, birth_year))
        if self.onboard_error:
            raise self.onboard_error

    async def list_characters(self, limit=20, filtered_tags=None, prefetch_mode=False):
        self.calls.append(("list_characters", limit))
        if self.characters_error:
            raise self.characters_error
        return list(self.characters)

    async def new_chat(self, character_id, uid):
        self.calls.append(("new_chat", character_id, uid))
        if self.new_chat_error:
            raise self.new_chat_error
        return self.new_chat_result

    async def get_chat_history(self, character_id, uid, limit=50):
        self.calls.append(("get_chat_history", character_id, uid, limit))
        if self.history_error:
            raise self.history_error
        return list(self.history)

    async def stream_reply(self, prompt, character_id, uid):
        self.calls.append(("stream_reply", prompt, character_id, uid))
        if self.stream_gate is not None:
            await self.stream_gate.wait()
        for frame in self.reply_frames:
            yield frame
        if self.stream_error:
            raise self.stream_error

    async def close(self):
        self.closed = True


@pytest.fixture(scope="session")
def live_api_url():
    """Return the API URL for integration tests, if configured."""
    return os.getenv("WHISPI_API_BASE_URL")


@pytest.fixture
def fake_backend():
    """Return a fresh fake backend."""
    return FakeChatBackend()


@pytest.fixture
def memory_store():
    """Return an empty in-memory session store."""
    return InMemorySessionStore()


@pytest.fixture
def controller(fake_backend, memory_store):
    """Return a controller wired to the fake backend and memory store."""
    return ChatController(fake_backend, memory_store)


@pytest.fixture
def luna():
    return Character(
        id="luna",
        name="Luna",
        status_text="Stargazing tonight",
        personality_tags=["Dreamy", "Caring"],
        filter_tags=["Fantasy", "Caring"],
        age=24,
    )


@pytest.fixture
def max_character():
    return Character(
        id="max",
        name="Max",
        status_text="At the gym",
        personality_tags=["Playful"],
        filter_tags=["Modern", "Playful"],
        age=29,
    )


@pytest.fixture
def sample_characters(luna, max_character):
    """Return a small character catalog."""
    return [
        luna,
        max_character,
        Character(
            id="ada",
            name="Ada",
            status_text="Debugging the universe",
            personality_tags=["Intellectual", "Funny"],
            filter_tags=["Modern", "Intellectual"],
        ),
        Character(id="ghost", name="Ghost"),
    ]
