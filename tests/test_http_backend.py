"""Unit tests for the HTTP chat backend, using httpx.MockTransport."""
import json

import httpx
import pytest

from whispi.api import HttpChatBackend, create_chat_backend
from whispi.errors import ApiError, NotFoundError, is_not_found
from whispi.streaming import CompleteFrame, ErrorFrame, FragmentFrame

BASE_URL = "https://functions.test"


def _backend(handler, **kwargs) -> HttpChatBackend:
    return HttpChatBackend(
        base_url=BASE_URL,
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


def _body(request: httpx.Request) -> dict:
    return json.loads(request.content)


async def _collect(backend: HttpChatBackend, prompt="hello", character_id="luna", uid="u1"):
    return [frame async for frame in backend.stream_reply(prompt, character_id, uid)]


class TestFactory:
    """Tests for create_chat_backend."""

    def test_create_http_backend(self):
        backend = create_chat_backend("http", base_url="http://localhost:5001/")
        assert isinstance(backend, HttpChatBackend)
        assert backend.base_url == "http://localhost:5001"

    def test_unknown_backend_raises(self):
        with pytest.raises(ValueError, match="Unsupported chat backend"):
            create_chat_backend("grpc")


class TestCallableEndpoints:
    """Tests for the request/response envelope."""

    @pytest.mark.asyncio
    async def test_get_user_chats_envelope(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["path"] = request.url.path
            seen["body"] = _body(request)
            return httpx.Response(200, json={"result": {"conversations": [{
                "characterId": "luna",
                "characterName": "Luna",
                "conversationId": "conv-1",
                "lastMessage": "See you",
                "lastMessageTime": {"_seconds": 1700000000, "_nanoseconds": 0},
            }]}})

        async with _backend(handler) as backend:
            chats = await backend.get_user_chats("u1")

        assert seen == {"method": "POST", "path": "/getUserChats", "body": {"data": {"uid": "u1"}}}
        assert len(chats) == 1
        assert chats[0].character_name == "Luna"
        assert chats[0].last_message_time.timestamp() == 1700000000

    @pytest.mark.asyncio
    async def test_create_anonymous_user_returns_uid(self):
        def handler(request):
            assert request.url.path == "/createAnonymousUser"
            assert _body(request) == {"data": {}}
            return httpx.Response(200, json={"result": {"uid": "anon-9"}})

        async with _backend(handler) as backend:
            assert await backend.create_anonymous_user() == "anon-9"

    @pytest.mark.asyncio
    async def test_create_anonymous_user_without_uid_fails(self):
        async with _backend(lambda r: httpx.Response(200, json={"result": {}})) as backend:
            with pytest.raises(ApiError, match="no uid"):
                await backend.create_anonymous_user()

    @pytest.mark.asyncio
    async def test_onboard_user_sends_camel_case_fields(self):
        bodies = []

        def handler(request):
            bodies.append(_body(request))
            return httpx.Response(200, json={"result": {"success": True}})

        async with _backend(handler) as backend:
            await backend.onboard_user("u1", "device_abc", "Sam", 1990)

        assert bodies == [{"data": {
            "uid": "u1",
            "deviceId": "device_abc",
            "displayName": "Sam",
            "birthYear": 1990,
        }}]

    @pytest.mark.asyncio
    async def test_list_characters(self):
        def handler(request):
            assert _body(request) == {"data": {"limit": 20, "filteredTags": [], "prefetchMode": False}}
            return httpx.Response(200, json={"result": {"characters": [
                {
                    "id": "luna",
                    "name": "Luna",
                    "profilePicture": "https://img.test/luna.png",
                    "statusText": "Stargazing",
                    "personalityTags": ["Dreamy"],
                    "filterTags": ["Fantasy"],
                    "age": 24,
                },
                {"id": "ghost", "name": "Ghost"},
            ]}})

        async with _backend(handler) as backend:
            characters = await backend.list_characters()

        assert [c.id for c in characters] == ["luna", "ghost"]
        assert characters[0].profile_picture == "https://img.test/luna.png"
        assert characters[0].filter_tags == ["Fantasy"]
        assert characters[1].status_text == ""
        assert characters[1].filter_tags is None

    @pytest.mark.asyncio
    async def test_new_chat_result(self):
        def handler(request):
            assert _body(request) == {"data": {"characterId": "luna", "uid": "u1"}}
            return httpx.Response(200, json={"result": {
                "conversationId": "conv-1",
                "isNewConversation": False,
                "messageCount": 4,
            }})

        async with _backend(handler) as backend:
            result = await backend.new_chat("luna", "u1")

        assert result.conversation_id == "conv-1"
        assert result.has_history

    @pytest.mark.asyncio
    async def test_get_chat_history(self):
        def handler(request):
            assert _body(request) == {"data": {"characterId": "luna", "uid": "u1", "limit": 50}}
            return httpx.Response(200, json={"result": {"messages": [
                {"content": "hello", "role": "user", "timestamp": 1700000000000},
                {"content": "Hi!", "role": "assistant", "timestamp": "2024-05-01T12:00:00Z"},
            ]}})

        async with _backend(handler) as backend:
            messages = await backend.get_chat_history("luna", "u1")

        assert [(m.role, m.content) for m in messages] == [("user", "hello"), ("assistant", "Hi!")]
        assert messages[0].timestamp.timestamp() == 1700000000

    @pytest.mark.asyncio
    async def test_not_found_status_raises_not_found_error(self):
        def handler(request):
            return httpx.Response(
                404, json={"error": {"message": "No chats for user", "status": "NOT_FOUND"}}
            )

        async with _backend(handler) as backend:
            with pytest.raises(NotFoundError) as excinfo:
                await backend.get_user_chats("u1")

        assert excinfo.value.message == "No chats for user"
        assert is_not_found(excinfo.value)

    @pytest.mark.asyncio
    async def test_server_error_message_is_surfaced(self):
        def handler(request):
            return httpx.Response(500, json={"error": {"message": "boom", "status": "INTERNAL"}})

        async with _backend(handler) as backend:
            with pytest.raises(ApiError) as excinfo:
                await backend.list_characters()

        assert not isinstance(excinfo.value, NotFoundError)
        assert excinfo.value.message == "boom"
        assert excinfo.value.status_code == 500
        assert excinfo.value.code == "INTERNAL"

    @pytest.mark.asyncio
    async def test_error_without_body_uses_operation_message(self):
        async with _backend(lambda r: httpx.Response(502, text="Bad gateway")) as backend:
            with pytest.raises(ApiError, match="Failed to create new chat"):
                await backend.new_chat("luna", "u1")

    @pytest.mark.asyncio
    async def test_transport_failure_is_wrapped(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with _backend(handler) as backend:
            with pytest.raises(ApiError, match="Failed to get user chats: connection refused"):
                await backend.get_user_chats("u1")

    @pytest.mark.asyncio
    async def test_unexpected_shape_raises_api_error(self):
        def handler(request):
            return httpx.Response(200, json={"result": {"characters": [{"name": "No id"}]}})

        async with _backend(handler) as backend:
            with pytest.raises(ApiError, match="unexpected response shape"):
                await backend.list_characters()

    @pytest.mark.asyncio
    async def test_requests_are_logged(self):
        logged = []
        backend = _backend(
            lambda r: httpx.Response(200, json={"result": {"conversations": []}}),
            debug_callback=lambda level, component, message: logged.append((component, message)),
        )
        async with backend:
            await backend.get_user_chats("u1")

        assert ("API", "POST getUserChats") in logged


class TestStreamReply:
    """Tests for the streamed reply endpoint."""

    @pytest.mark.asyncio
    async def test_stream_request_shape(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["uid"] = request.url.params.get("uid")
            seen["auth"] = request.headers.get("Authorization")
            seen["body"] = _body(request)
            return httpx.Response(200, text='data: {"type":"complete","content":"ok"}\n\n')

        async with _backend(handler) as backend:
            frames = await _collect(backend)

        assert seen == {
            "path": "/chatApi/chatStream",
            "uid": "u1",
            "auth": "Bearer u1",
            "body": {"prompt": "hello", "characterId": "luna", "uid": "u1"},
        }
        assert frames == [CompleteFrame(content="ok")]

    @pytest.mark.asyncio
    async def test_frames_split_across_network_chunks(self):
        async def body():
            yield b'data: {"type":"chunk","con'
            yield b'tent":"Hi"}\n\ndata: {"type":"chunk",'
            yield b'"content":" there"}\n'
            yield b'\ndata: {"type":"complete","content":"Hi there!"}\n\n'

        async with _backend(lambda r: httpx.Response(200, content=body())) as backend:
            frames = await _collect(backend)

        assert frames == [
            FragmentFrame(content="Hi"),
            FragmentFrame(content=" there"),
            CompleteFrame(content="Hi there!"),
        ]

    @pytest.mark.asyncio
    async def test_malformed_frames_are_skipped(self):
        text = (
            'data: {"type":"chunk","content":"A"}\n\n'
            "data: {oops\n\n"
            'data: {"type":"error","message":"quota"}\n\n'
        )
        async with _backend(lambda r: httpx.Response(200, text=text)) as backend:
            frames = await _collect(backend)

        assert frames == [FragmentFrame(content="A"), ErrorFrame(message="quota")]

    @pytest.mark.asyncio
    async def test_error_status_raises(self):
        async with _backend(lambda r: httpx.Response(500, text="nope")) as backend:
            with pytest.raises(ApiError, match="HTTP error! status: 500"):
                await _collect(backend)

    @pytest.mark.asyncio
    async def test_transport_failure_is_wrapped(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        async with _backend(handler) as backend:
            with pytest.raises(ApiError, match="Reply stream failed"):
                await _collect(backend)
