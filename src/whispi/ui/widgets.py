"""Custom Textual widgets for the TUI.

Hides widget implementation details:
- Incremental chat message rendering (streamed replies update in place)
- Conversation list rendering and selection
- Input bar enable/disable and draft tracking
- Error banner, typing indicator and log rendering
"""

from collections.abc import Sequence
from datetime import datetime

from rich.text import Text
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.events import Click
from textual.message import Message
from textual.widgets import Button, OptionList, RichLog, Static, TextArea
from textual.widgets.option_list import Option

from ..api.models import Character, ChatMessage, UserChat
from ..config import LogLevel
from .config import (
    AVATAR_FALLBACK,
    DEBUG_LOG_MAX_LINES,
    LOG_TIMESTAMP_FORMAT,
    MESSAGE_PLACEHOLDER,
)
from .formatting import format_chat_summary, format_time


class ClickableMessage(Vertical):
    """A chat message container that copies its content when clicked."""

    def __init__(self, message: ChatMessage, author: str, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._content = message.content
        self._header = Static(
            Text(f"{author} [{format_time(message.timestamp)}]"),
            classes="message-header",
        )
        self._body = Static(Text(message.content), classes="message-content")

    def compose(self):
        yield self._header
        yield self._body

    def update_content(self, content: str) -> None:
        """Replace the message text (used while a reply streams in)."""
        self._content = content
        self._body.update(Text(content))

    def on_click(self, event: Click) -> None:
        """Copy message content to the clipboard when clicked."""
        event.stop()
        self.app.copy_to_clipboard(self._content)
        self.app.notify("Copied to clipboard", timeout=2)


class ChatHistoryWidget(VerticalScroll):
    """Scrollable conversation view kept in sync with the message list."""

    BORDER_TITLE = "Chat"
    BORDER_SUBTITLE = "No messages"
    ALLOW_SELECT = True

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._messages: list[ChatMessage] = []
        self._containers: list[ClickableMessage] = []

    def sync_messages(self, messages: Sequence[ChatMessage], assistant_name: str) -> None:
        """Render the difference between what is shown and the given messages.

        Appended messages are mounted, messages whose content changed are
        updated in place, and anything else (a different conversation)
        triggers a full re-render.
        """
        shown = self._messages
        diverged = len(messages) < len(shown) or any(
            old.role != new.role or old.timestamp != new.timestamp
            for old, new in zip(shown, messages)
        )
        if diverged:
            self.clear_history()

        for container, old, new in zip(self._containers, self._messages, messages):
            if old.content != new.content:
                container.update_content(new.content)

        for message in messages[len(self._messages):]:
            self._mount_message(message, assistant_name)

        self._messages = list(messages)
        count = len(self._messages)
        self.border_subtitle = f"{count} messages" if count else "No messages"
        self.scroll_end(animate=False)

    def _mount_message(self, message: ChatMessage, assistant_name: str) -> None:
        if message.role == "user":
            author, css_class = "You", "user-message"
        else:
            author, css_class = assistant_name, "assistant-message"
        container = ClickableMessage(message, author, classes=f"chat-message {css_class}")
        self._containers.append(container)
        self.mount(container)

    def get_last_response(self) -> str | None:
        """Get the last assistant response."""
        for msg in reversed(self._messages):
            if msg.role == "assistant":
                return msg.content
        return None

    def clear_history(self) -> None:
        """Remove every rendered message."""
        self._messages.clear()
        self._containers.clear()
        self.remove_children()
        self.border_subtitle = "No messages"


class ChatHeader(Static):
    """Name, avatar placeholder and status of the current character."""

    def set_character(self, character: Character | None) -> None:
        if character is None:
            self.update("")
            return
        text = Text()
        text.append(f"{AVATAR_FALLBACK} ")
        text.append(character.name, style="bold")
        if character.status_text:
            text.append(f"\n{character.status_text}", style="dim")
        self.update(text)


class TypingIndicator(Static):
    """Shown while waiting for the first fragment of a reply."""

    def on_mount(self) -> None:
        self.display = False

    def set_typing(self, typing: bool, name: str = "") -> None:
        self.display = typing
        if typing:
            self.update(Text(f"● ● ●  {name} is typing...".strip(), style="italic"))


class ErrorBanner(Static):
    """Transient error message at the top of the sidebar."""

    def on_mount(self) -> None:
        self.display = False

    def show_error(self, message: str) -> None:
        self.update(Text(message))
        self.display = True

    def clear_error(self) -> None:
        self.update("")
        self.display = False


class ChatListPanel(Vertical):
    """Sidebar list of the user's conversations, or an empty state."""

    BORDER_TITLE = "Chats"

    class ChatSelected(Message):
        """Posted when the user picks a conversation."""

        def __init__(self, chat: UserChat) -> None:
            super().__init__()
            self.chat = chat

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._chats: tuple[UserChat, ...] = ()

    def compose(self):
        yield Static(
            Text("💬\nNo chats yet\nPress New Chat to start one", justify="center"),
            id="chat-list-empty",
        )
        yield OptionList(id="chat-list-options")

    def on_mount(self) -> None:
        self._refresh_view()

    def set_chats(self, chats: Sequence[UserChat], current_character_id: str | None) -> None:
        """Replace the list; highlights the conversation with the current character."""
        chats = tuple(chats)
        options = self.query_one("#chat-list-options", OptionList)
        if chats != self._chats:
            self._chats = chats
            options.clear_options()
            options.add_options(
                [Option(format_chat_summary(chat), id=chat.conversation_id) for chat in chats]
            )
            self._refresh_view()
        for index, chat in enumerate(self._chats):
            if chat.character_id == current_character_id:
                options.highlighted = index
                break

    def _refresh_view(self) -> None:
        has_chats = bool(self._chats)
        self.query_one("#chat-list-empty", Static).display = not has_chats
        self.query_one("#chat-list-options", OptionList).display = has_chats
        self.border_subtitle = f"{len(self._chats)}" if has_chats else ""

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        event.stop()
        if 0 <= event.option_index < len(self._chats):
            self.post_message(self.ChatSelected(self._chats[event.option_index]))


class ChatInputBar(Horizontal):
    """Chat input bar with TextArea and Send button."""

    class Submitted(Message):
        """Message sent when user submits input."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    class DraftChanged(Message):
        """Message sent whenever the input text changes."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._history: list[str] = []
        self._history_index: int = -1

    def compose(self):
        text_area = TextArea(
            id="chat-input", show_line_numbers=False, placeholder=MESSAGE_PLACEHOLDER
        )
        text_area.cursor_blink = False
        yield text_area
        yield Button("Send", id="send-btn", variant="primary", disabled=True).with_tooltip(
            "Send message (Ctrl+J)"
        )

    def on_mount(self) -> None:
        text_area = self.query_one("#chat-input", TextArea)
        text_area.highlight_cursor_line = False

    @property
    def text(self) -> str:
        return self.query_one("#chat-input", TextArea).text

    @text.setter
    def text(self, value: str) -> None:
        self.query_one("#chat-input", TextArea).text = value

    def set_send_enabled(self, enabled: bool) -> None:
        """Enable or disable the Send button."""
        self.query_one("#send-btn", Button).disabled = not enabled

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "send-btn":
            event.stop()
            self._submit()

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        event.stop()
        self.post_message(self.DraftChanged(event.text_area.text))

    def on_key(self, event) -> None:
        """Handle keyboard shortcuts.

        Note: ctrl+enter cannot work in terminals (terminal doesn't pass
        ctrl/shift modifiers with Enter). Use ctrl+j as the submit shortcut.
        """
        if event.key == "ctrl+j":
            self._submit()
            event.prevent_default()
            event.stop()
        elif event.key == "up" and self._is_cursor_at_start():
            self._navigate_history(-1)
            event.prevent_default()
            event.stop()
        elif event.key == "down" and self._is_cursor_at_end():
            self._navigate_history(1)
            event.prevent_default()
            event.stop()

    def _is_cursor_at_start(self) -> bool:
        text_area = self.query_one("#chat-input", TextArea)
        return text_area.cursor_location == (0, 0)

    def _is_cursor_at_end(self) -> bool:
        text_area = self.query_one("#chat-input", TextArea)
        lines = text_area.text.split("\n")
        last_row = len(lines) - 1
        last_col = len(lines[-1]) if lines else 0
        return text_area.cursor_location == (last_row, last_col)

    def _navigate_history(self, direction: int) -> None:
        if not self._history:
            return
        text_area = self.query_one("#chat-input", TextArea)
        if direction < 0:  # Up
            if self._history_index == -1:
                self._history_index = len(self._history) - 1
            elif self._history_index > 0:
                self._history_index -= 1
        else:  # Down
            if self._history_index < len(self._history) - 1:
                self._history_index += 1
            else:
                self._history_index = -1
                text_area.text = ""
                return
        text_area.text = self._history[self._history_index]

    def _submit(self) -> None:
        if self.query_one("#send-btn", Button).disabled:
            return
        value = self.text.strip()
        if value:
            if not self._history or self._history[-1] != value:
                self._history.append(value)
            self._history_index = -1
            self.post_message(self.Submitted(value))

    def focus_input(self) -> None:
        """Focus the text input."""
        self.query_one("#chat-input", TextArea).focus()


class DebugPanel(RichLog):
    """Log panel for real-time tracing with level filtering.

    Shows timestamped log messages from all components.
    Supports standard log levels: DEBUG < INFO < WARNING < ERROR.
    Hidden by default, shown with --log-level flag or toggled with Ctrl+D.
    """

    BORDER_TITLE = "Log"
    BORDER_SUBTITLE = "Trace log"

    def __init__(self, *args, log_level: int = LogLevel.DEBUG, **kwargs) -> None:
        super().__init__(
            *args,
            markup=False,
            highlight=False,
            auto_scroll=True,
            wrap=False,
            max_lines=DEBUG_LOG_MAX_LINES,
            **kwargs
        )
        self._log_level = log_level

    @property
    def log_level(self) -> int:
        """Current log level threshold."""
        return self._log_level

    @log_level.setter
    def log_level(self, level: int) -> None:
        """Set log level threshold."""
        self._log_level = level
        self._update_subtitle()

    def _update_subtitle(self) -> None:
        """Update subtitle to show current log level."""
        if self.display:
            self.border_subtitle = f"Level: {LogLevel.name(self._log_level)}"
        else:
            self.border_subtitle = "Hidden"

    def on_mount(self) -> None:
        """Hide by default."""
        self.display = False

    def log_entry(
        self,
        component: str,
        message: str,
        level: int = LogLevel.DEBUG
    ) -> None:
        """Add a log entry if it meets the current level threshold.

        Args:
            component: Component name (TUI, API, Stream, Controller, Session)
            message: Log message
            level: Log level (LogLevel.DEBUG, INFO, WARNING, ERROR)
        """
        if level < self._log_level:
            return

        timestamp = datetime.now().strftime(LOG_TIMESTAMP_FORMAT)

        level_colors = {
            LogLevel.DEBUG: "dim white",
            LogLevel.INFO: "cyan",
            LogLevel.WARNING: "yellow",
            LogLevel.ERROR: "red",
        }
        component_colors = {
            "TUI": "magenta",
            "API": "blue",
            "Stream": "green",
            "Controller": "bright_magenta",
            "Session": "bright_blue",
        }

        line = Text()
        line.append(f"{timestamp} ", style="dim")
        line.append(f"{LogLevel.name(level):<5} ", style=level_colors.get(level, "white"))
        line.append(f"[{component}] ", style=component_colors.get(component, "white"))
        line.append(message)

        self.write(line)

    def debug(self, component: str, message: str) -> None:
        """Log a DEBUG level message."""
        self.log_entry(component, message, LogLevel.DEBUG)

    def info(self, component: str, message: str) -> None:
        """Log an INFO level message."""
        self.log_entry(component, message, LogLevel.INFO)

    def warning(self, component: str, message: str) -> None:
        """Log a WARNING level message."""
        self.log_entry(component, message, LogLevel.WARNING)

    def error(self, component: str, message: str) -> None:
        """Log an ERROR level message."""
        self.log_entry(component, message, LogLevel.ERROR)

    def show(self) -> None:
        """Show the log panel."""
        self.display = True
        self._update_subtitle()

    def hide(self) -> None:
        """Hide the log panel."""
        self.display = False
        self.border_subtitle = "Hidden"

    def toggle(self) -> bool:
        """Toggle visibility. Returns new state."""
        if self.display:
            self.hide()
            return False
        self.show()
        return True
