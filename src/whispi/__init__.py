"""
Whispi: a terminal chat client for Whispi characters.

Each subpackage hides one design decision: the wire protocol (api),
the reply stream format (streaming), catalog filtering (catalog), the
widget state machine (state), local persistence (session) and
orchestration (controller).
"""

__version__ = "0.1.0"

from .api import ChatBackend, create_chat_backend
from .controller import ChatController
from .errors import ApiError, NotFoundError, StreamError, WhispiError
from .session import SessionStore, create_session_store
from .state import WidgetState, reduce

__all__ = [
    "ApiError",
    "ChatBackend",
    "ChatController",
    "NotFoundError",
    "SessionStore",
    "StreamError",
    "WhispiError",
    "WidgetState",
    "create_chat_backend",
    "create_session_store",
    "reduce",
]
