"""UI configuration constants.

Centralizes display-only values for the TUI; shared client constants
live in whispi.config.
"""

# Time display
MESSAGE_TIME_FORMAT = "%H:%M"
LOG_TIMESTAMP_FORMAT = "%H:%M:%S"

# Debug panel
DEBUG_LOG_MAX_LINES = 1000  # Older entries are dropped

# Sidebar
CHAT_PREVIEW_LENGTH = 40  # Characters of the last message shown in the chat list
NEW_CHAT_PREVIEW = "New chat"

# Placeholders and labels
APP_TITLE = "Whispi Chat"
UID_PLACEHOLDER = "Enter your UID or create a new account"
MESSAGE_PLACEHOLDER = "Type your message..."
SEARCH_PLACEHOLDER = "Search characters..."
AVATAR_FALLBACK = "🧑‍💼"
