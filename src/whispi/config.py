"""Client configuration constants.

Centralizes magic numbers and defaults shared by the controller, the CLI and the TUI.
"""

from collections.abc import Callable

# (level, component, message), level is one of "debug", "info", "warning", "error"
DebugCallback = Callable[[str, str, str], None]


class LogLevel:
    """Log level constants with numeric values for comparison.

    Standard logging hierarchy: DEBUG < INFO < WARNING < ERROR
    Lower numeric value = more verbose (shows more messages).
    """

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40

    _names = {
        DEBUG: "DEBUG",
        INFO: "INFO",
        WARNING: "WARNING",
        ERROR: "ERROR",
    }

    _from_string = {
        "debug": DEBUG,
        "info": INFO,
        "warning": WARNING,
        "error": ERROR,
    }

    @classmethod
    def name(cls, level: int) -> str:
        """Get the name for a log level."""
        return cls._names.get(level, "UNKNOWN")

    @classmethod
    def from_string(cls, level_str: str) -> int:
        """Convert string to log level. Returns DEBUG if invalid."""
        return cls._from_string.get(level_str.lower(), cls.DEBUG)


# Remote API
DEFAULT_API_BASE_URL = "https://us-central1-whispi-e61fa.cloudfunctions.net"
CHARACTER_PAGE_SIZE = 20  # Characters requested per catalog load
CHAT_HISTORY_LIMIT = 50  # Messages requested when resuming a conversation

# Local session
DEFAULT_SESSION_PATH = "~/.whispi/session.json"

# Timers
ERROR_DISMISS_SECONDS = 5.0  # Error banner auto-dismiss
ACCOUNT_DIALOG_CLOSE_SECONDS = 2.0  # Delay before closing the account dialog on success

# Account validation
MIN_BIRTH_YEAR = 1900

# Status text for chats opened from the sidebar
EXISTING_CHAT_STATUS = "Online"
