"""Widget orchestration for whispi."""

from .chat_controller import ChatController, StateListener, validate_account_input

__all__ = [
    "ChatController",
    "StateListener",
    "validate_account_input",
]
