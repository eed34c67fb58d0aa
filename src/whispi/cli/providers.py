"""Provider factory functions for CLI.

Centralizes creation of the chat backend, the session store and the
controller from environment variables. Hides configuration details from
command implementations.
"""

import os

from rich.console import Console
from rich.markup import escape

from ..api import ChatBackend, create_chat_backend
from ..config import DEFAULT_API_BASE_URL, DEFAULT_SESSION_PATH, DebugCallback, LogLevel
from ..controller import ChatController
from ..session import SessionStore, create_session_store

# Default console for output
_console = Console()


def get_backend(debug_callback: DebugCallback | None = None) -> ChatBackend:
    """Create the chat backend from environment variables.

    Environment variables:
        WHISPI_API_BASE_URL: Root URL of the cloud functions
    """
    return create_chat_backend(
        "http",
        base_url=os.getenv("WHISPI_API_BASE_URL", DEFAULT_API_BASE_URL),
        debug_callback=debug_callback,
    )


def get_session_store(debug_callback: DebugCallback | None = None) -> SessionStore:
    """Create the session store from environment variables.

    Environment variables:
        WHISPI_SESSION_BACKEND: "file" (default) or "memory"
        WHISPI_SESSION_PATH: JSON file for the "file" backend
    """
    backend = os.getenv("WHISPI_SESSION_BACKEND", "file").lower()
    if backend == "file":
        return create_session_store(
            "file",
            path=os.getenv("WHISPI_SESSION_PATH", DEFAULT_SESSION_PATH),
            debug_callback=debug_callback,
        )
    return create_session_store(backend)


def get_controller(debug_callback: DebugCallback | None = None) -> ChatController:
    """Wire a controller to the configured backend and session store."""
    return ChatController(
        get_backend(debug_callback),
        get_session_store(debug_callback),
        debug_callback=debug_callback,
    )


def console_debug_callback(
    log_level: str | None,
    console: Console | None = None,
) -> DebugCallback | None:
    """Build a debug callback printing to the console, or None when disabled."""
    if log_level is None:
        return None

    con = console or _console
    threshold = LogLevel.from_string(log_level)
    level_colors = {
        "debug": "dim",
        "info": "cyan",
        "warning": "yellow",
        "error": "red",
    }

    def callback(level: str, component: str, message: str) -> None:
        if LogLevel.from_string(level) < threshold:
            return
        color = level_colors.get(level, "white")
        con.print(f"[{color}]{level.upper():<7}[/] [bold]\\[{component}][/] {escape(message)}")

    return callback
