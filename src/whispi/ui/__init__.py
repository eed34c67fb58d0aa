"""Terminal UI module for whispi.

Provides a Textual-based chat widget driven by ChatController.

Module structure (each module hides a design decision):
- config.py: Display constants (formats, labels, placeholders)
- formatting.py: How chats, characters and timestamps become text
- widgets.py: Custom widgets (message list, chat list, input bar, log)
- styles.py: CSS styling (layout decisions)
- themes.py: Color palette and theme configuration
- screens.py: Modal dialogs (character picker, anonymous account)
- app.py: Application orchestration (state rendering, user interaction)
"""

from .app import WhispiChatApp, run_textual_tui
from .widgets import ChatHistoryWidget, ChatInputBar, ChatListPanel, DebugPanel

__all__ = [
    "ChatHistoryWidget",
    "ChatInputBar",
    "ChatListPanel",
    "DebugPanel",
    "WhispiChatApp",
    "run_textual_tui",
]
