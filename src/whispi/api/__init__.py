"""Remote chat API layer for whispi."""

from .base import ChatBackend
from .factory import create_chat_backend
from .http import HttpChatBackend
from .models import Character, ChatMessage, NewChatResult, UserChat

__all__ = [
    "ChatBackend",
    "create_chat_backend",
    "HttpChatBackend",
    "Character",
    "ChatMessage",
    "NewChatResult",
    "UserChat",
]
