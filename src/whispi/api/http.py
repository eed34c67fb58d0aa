from collections.abc import AsyncIterator
from contextlib import aclosing
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from ..config import DEFAULT_API_BASE_URL, DebugCallback
from ..errors import ApiError, NotFoundError
from ..streaming import StreamFrame, iter_frames
from .base import ChatBackend
from .models import Character, ChatMessage, NewChatResult, UserChat

STREAM_ENDPOINT = "chatApi/chatStream"

ModelT = TypeVar("ModelT", bound=BaseModel)


class HttpChatBackend(ChatBackend):
    """Chat backend speaking the callable-function HTTP protocol.

    Hidden design decisions:
    - Every call is a POST with a ``{"data": ...}`` envelope
    - Successful responses carry ``{"result": ...}``
    - Failures carry ``{"error": {"message", "status"}}`` and a non-2xx code
    - The reply stream authenticates with the user id as bearer token
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_BASE_URL,
        timeout: float | None = None,
        debug_callback: DebugCallback | None = None,
        **client_kwargs: Any,
    ):
        """Initialize the HTTP backend.

        Args:
            base_url: Root URL of the cloud functions
            timeout: Request timeout in seconds (None waits indefinitely)
            debug_callback: Optional (level, component, message) logger
            **client_kwargs: Additional kwargs for httpx.AsyncClient
        """
        self._base_url = base_url.rstrip("/")
        self._debug_callback = debug_callback
        self._client = httpx.AsyncClient(timeout=timeout, **client_kwargs)

    @property
    def base_url(self) -> str:
        """Get the API base URL."""
        return self._base_url

    def set_debug_callback(self, callback: DebugCallback | None) -> None:
        """Set the callback receiving request tracing."""
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "API", message)

    async def _call(
        self,
        endpoint: str,
        data: dict[str, Any],
        failure_message: str,
    ) -> dict[str, Any]:
        """POST a callable-function request and unwrap its result."""
        self._debug("debug", f"POST {endpoint}")
        try:
            response = await self._client.post(f"{self._base_url}/{endpoint}", json={"data": data})
        except httpx.HTTPError as e:
            raise ApiError(f"{failure_message}: {_describe(e)}") from e

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if response.is_error:
            raise _error_from_payload(payload, response.status_code, failure_message)

        if not isinstance(payload, dict):
            raise ApiError(f"{failure_message}: invalid response body", response.status_code)

        self._debug("debug", f"{endpoint} -> {response.status_code}")
        result = payload.get("result")
        return result if isinstance(result, dict) else {}

    async def get_user_chats(self, uid: str) -> list[UserChat]:
        result = await self._call("getUserChats", {"uid": uid}, "Failed to get user chats")
        return _validate_list(UserChat, result.get("conversations"), "Failed to get user chats")

    async def create_anonymous_user(self) -> str:
        result = await self._call("createAnonymousUser", {}, "Failed to create anonymous user")
        uid = result.get("uid")
        if not uid:
            raise ApiError("Failed to create anonymous user: no uid returned")
        return uid

    async def onboard_user(
        self,
        uid: str,
        device_id: str,
        display_name: str,
        birth_year: int,
    ) -> None:
        await self._call(
            "onboardUser",
            {
                "uid": uid,
                "deviceId": device_id,
                "displayName": display_name,
                "birthYear": birth_year,
            },
            "Failed to onboard user",
        )

    async def list_characters(
        self,
        limit: int = 20,
        filtered_tags: list[str] | None = None,
        prefetch_mode: bool = False,
    ) -> list[Character]:
        result = await self._call(
            "listCharacters",
            {
                "limit": limit,
                "filteredTags": filtered_tags or [],
                "prefetchMode": prefetch_mode,
            },
            "Failed to list characters",
        )
        return _validate_list(Character, result.get("characters"), "Failed to list characters")

    async def new_chat(self, character_id: str, uid: str) -> NewChatResult:
        result = await self._call(
            "newChat",
            {"characterId": character_id, "uid": uid},
            "Failed to create new chat",
        )
        return _validate(NewChatResult, result, "Failed to create new chat")

    async def get_chat_history(
        self,
        character_id: str,
        uid: str,
        limit: int = 50,
    ) -> list[ChatMessage]:
        result = await self._call(
            "getChatHistory",
            {"characterId": character_id, "uid": uid, "limit": limit},
            "Failed to get chat history",
        )
        return _validate_list(ChatMessage, result.get("messages"), "Failed to get chat history")

    async def stream_reply(
        self,
        prompt: str,
        character_id: str,
        uid: str,
    ) -> AsyncIterator[StreamFrame]:
        self._debug("debug", f"POST {STREAM_ENDPOINT} (character={character_id})")
        try:
            async with self._client.stream(
                "POST",
                f"{self._base_url}/{STREAM_ENDPOINT}",
                params={"uid": uid},
                headers={"Authorization": f"Bearer {uid}"},
                json={"prompt": prompt, "characterId": character_id, "uid": uid},
            ) as response:
                if response.is_error:
                    raise ApiError(
                        f"HTTP error! status: {response.status_code}",
                        status_code=response.status_code,
                    )
                # aiter_lines reassembles frames split across network chunks
                frames = iter_frames(response.aiter_lines(), self._debug_callback)
                async with aclosing(frames):
                    async for frame in frames:
                        yield frame
        except httpx.HTTPError as e:
            raise ApiError(f"Reply stream failed: {_describe(e)}") from e

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()


def _error_from_payload(payload: Any, status_code: int, failure_message: str) -> ApiError:
    """Build the most specific ApiError for a failed response."""
    error = payload.get("error") if isinstance(payload, dict) else None
    message = failure_message
    code = None
    if isinstance(error, dict):
        message = error.get("message") or failure_message
        code = error.get("status")

    if status_code == 404 or code == "NOT_FOUND":
        return NotFoundError(message, status_code, code)
    return ApiError(message, status_code, code)


def _describe(error: Exception) -> str:
    return str(error) or type(error).__name__


def _validate(model: type[ModelT], value: Any, failure_message: str) -> ModelT:
    try:
        return model.model_validate(value)
    except ValidationError as e:
        raise ApiError(f"{failure_message}: unexpected response shape") from e


def _validate_list(model: type[ModelT], values: Any, failure_message: str) -> list[ModelT]:
    return [_validate(model, v, failure_message) for v in values or []]
