"""The pure reducer driving the chat widget.

Every state change goes through ``reduce``; nothing here performs I/O, so
the send state machine can be exercised without a UI or a network.
"""

from collections.abc import Callable
from dataclasses import replace
from typing import Any

from ..api.models import ChatMessage
from ..catalog import toggle_filter
from . import actions as a
from .models import SendPhase, WidgetState


def _set_reply_content(state: WidgetState, content: str) -> WidgetState:
    """Write content into the assistant placeholder, creating it if needed."""
    messages = list(state.messages)
    index = state.reply_index
    if index is None or index >= len(messages):
        messages.append(ChatMessage(content=content, role="assistant"))
        index = len(messages) - 1
    else:
        messages[index] = messages[index].model_copy(update={"content": content})
    return replace(
        state,
        messages=tuple(messages),
        reply_index=index,
        stream_buffer=content,
        phase=SendPhase.STREAMING,
        typing=False,
    )


def _stream_chunk(state: WidgetState, action: a.StreamChunk) -> WidgetState:
    if not state.is_streaming:
        return state
    return _set_reply_content(state, state.stream_buffer + action.content)


def _stream_complete(state: WidgetState, action: a.StreamComplete) -> WidgetState:
    if not state.is_streaming:
        return state
    # The complete frame is authoritative, whatever the fragments added up to.
    return _set_reply_content(state, action.content)


def _end_stream(state: WidgetState, error: str | None = None) -> WidgetState:
    return replace(
        state,
        phase=SendPhase.IDLE,
        typing=False,
        stream_buffer="",
        reply_index=None,
        error=state.error if error is None else error,
    )


def _send_started(state: WidgetState, action: a.SendStarted) -> WidgetState:
    if state.is_streaming:
        return state
    message = ChatMessage(content=action.prompt, role="user", timestamp=action.timestamp)
    return replace(
        state,
        messages=(*state.messages, message),
        draft="",
        phase=SendPhase.SENDING,
        typing=True,
        stream_buffer="",
        reply_index=None,
    )


def _open_chat(state: WidgetState, action: a.OpenChat) -> WidgetState:
    return replace(
        _end_stream(state),
        current_character=action.character,
        conversation_id=action.conversation_id,
        messages=tuple(action.messages),
        show_chat=True,
        show_character_picker=False,
    )


_HANDLERS: dict[type, Callable[[WidgetState, Any], WidgetState]] = {
    a.SetUser: lambda s, act: replace(s, uid=act.uid),
    a.SetUserChats: lambda s, act: replace(s, user_chats=tuple(act.chats)),
    a.OpenCharacterPicker: lambda s, act: replace(s, show_character_picker=True),
    a.CloseCharacterPicker: lambda s, act: replace(
        s, show_character_picker=False, search_term="", active_filters=()
    ),
    a.SetCharactersLoading: lambda s, act: replace(s, loading_characters=act.loading),
    a.SetCharacters: lambda s, act: replace(s, characters=tuple(act.characters)),
    a.SetSearchTerm: lambda s, act: replace(s, search_term=act.term),
    a.ToggleFilterTag: lambda s, act: replace(
        s, active_filters=toggle_filter(s.active_filters, act.tag)
    ),
    a.SetSelectingCharacter: lambda s, act: replace(s, selecting_character=act.selecting),
    a.OpenChat: _open_chat,
    a.SetMessages: lambda s, act: replace(s, messages=tuple(act.messages)),
    a.SetDraft: lambda s, act: replace(s, draft=act.text),
    a.SendStarted: _send_started,
    a.StreamChunk: _stream_chunk,
    a.StreamComplete: _stream_complete,
    a.StreamError: lambda s, act: _end_stream(s, error=act.message),
    a.StreamFinished: lambda s, act: _end_stream(s),
    a.OpenAccountDialog: lambda s, act: replace(s, show_account_dialog=True),
    a.CloseAccountDialog: lambda s, act: replace(
        s, show_account_dialog=False, account_status="", creating_account=False
    ),
    a.SetAccountStatus: lambda s, act: replace(
        s, account_status=act.status, creating_account=act.busy
    ),
    a.SetError: lambda s, act: replace(s, error=act.message),
    a.ClearError: lambda s, act: replace(s, error=""),
}


def reduce(state: WidgetState, action: a.Action) -> WidgetState:
    """Apply an action and return the resulting state.

    Raises:
        TypeError: If the action type is unknown
    """
    handler = _HANDLERS.get(type(action))
    if handler is None:
        raise TypeError(f"Unknown action: {type(action).__name__}")
    return handler(state, action)
