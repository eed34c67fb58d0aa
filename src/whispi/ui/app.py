"""Main Textual TUI application.

Renders the chat widget from the controller's state and turns user
interaction into controller calls.
"""

import asyncio
import contextlib

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import Screen
from textual.timer import Timer
from textual.widgets import Button, Footer, Header, Input, Static

from ..api.models import Character, UserChat
from ..config import ACCOUNT_DIALOG_CLOSE_SECONDS, ERROR_DISMISS_SECONDS, LogLevel
from ..controller import ChatController
from ..state import WidgetState
from .config import APP_TITLE, UID_PLACEHOLDER
from .screens import AnonymousAccountScreen, CharacterPickerScreen
from .styles import APP_CSS
from .themes import WHISPI_LIGHT
from .widgets import (
    ChatHeader,
    ChatHistoryWidget,
    ChatInputBar,
    ChatListPanel,
    DebugPanel,
    ErrorBanner,
    TypingIndicator,
)

WELCOME_TEXT = (
    "Welcome to Whispi\n\n"
    "Pick a conversation on the left,\n"
    "or press New Chat (Ctrl+N) to meet a character.\n\n"
    "Click on any message to copy it to clipboard."
)


class WhispiChatApp(App):
    """Textual TUI for Whispi chat."""

    CSS = APP_CSS
    TITLE = APP_TITLE

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit"),
        Binding("ctrl+n", "new_chat", "New Chat"),
        Binding("ctrl+d", "toggle_debug", "Debug"),
        Binding("ctrl+r", "copy_last_response", "Copy Response"),
    ]

    def __init__(self, controller: ChatController, log_level: str | None = None) -> None:
        super().__init__()
        self._controller = controller
        self._log_level = log_level
        self._unsubscribe = None
        self._shown_error = ""
        self._error_timer: Timer | None = None
        self._account_timer: Timer | None = None
        self._picker_screen: CharacterPickerScreen | None = None
        self._account_screen: AnonymousAccountScreen | None = None

    @property
    def controller(self) -> ChatController:
        return self._controller

    @property
    def _main_screen(self) -> Screen:
        """The screen holding the chat layout, even while a modal is on top."""
        return self.screen_stack[0]

    def compose(self) -> ComposeResult:
        yield Header()

        with Horizontal(id="layout"):
            # Sidebar: error banner, user bar, conversation list
            with Vertical(id="sidebar"):
                yield ErrorBanner(id="error-banner")
                with Vertical(id="user-bar"):
                    yield Input(placeholder=UID_PLACEHOLDER, id="uid-input")
                    with Horizontal(id="user-buttons"):
                        yield Button("New Chat", id="new-chat-btn", variant="primary")
                        yield Button("Anonymous Account", id="account-btn").with_tooltip(
                            "Create a new anonymous account"
                        )
                yield ChatListPanel(id="chat-list")

            # Main column: welcome panel or the open conversation
            with Vertical(id="main"):
                yield Static(WELCOME_TEXT, id="welcome")
                with Vertical(id="chat-view"):
                    yield ChatHeader(id="chat-header")
                    yield ChatHistoryWidget(id="chat-history")
                    yield TypingIndicator(id="typing-indicator")
                    yield ChatInputBar(id="chat-input-bar")
                yield DebugPanel(id="debug-panel")

        yield Footer()

    def on_mount(self) -> None:
        """Called when app is mounted."""
        self.register_theme(WHISPI_LIGHT)
        self.theme = "whispi-light"

        log_panel = self._main_screen.query_one("#debug-panel", DebugPanel)
        if self._log_level is not None:
            log_panel.log_level = LogLevel.from_string(self._log_level)
            log_panel.show()
            log_panel.info("TUI", f"Log panel enabled with level: {self._log_level.upper()}")

        def debug_callback(level: str, component: str, message: str) -> None:
            """Route debug messages to the log panel."""
            if level == "debug":
                log_panel.debug(component, message)
            elif level == "info":
                log_panel.info(component, message)
            elif level == "warning":
                log_panel.warning(component, message)
            elif level == "error":
                log_panel.error(component, message)

        self._controller.set_debug_callback(debug_callback)
        for component in (self._controller.backend, self._controller.store):
            if hasattr(component, "set_debug_callback"):
                component.set_debug_callback(debug_callback)

        self._unsubscribe = self._controller.subscribe(self._render_state)
        self._render_state(self._controller.state)
        self._bootstrap()

    def on_unmount(self) -> None:
        """Stop timers and detach from the controller."""
        for timer in (self._error_timer, self._account_timer):
            if timer is not None:
                timer.stop()
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._controller.set_debug_callback(None)

    # -- rendering ---------------------------------------------------------

    def _render_state(self, state: WidgetState) -> None:
        """Bring every widget in line with the given state."""
        self.sub_title = state.uid or "Not signed in"
        main = self._main_screen

        uid_input = main.query_one("#uid-input", Input)
        if state.uid and not uid_input.has_focus and uid_input.value != state.uid:
            uid_input.value = state.uid

        self._render_error(state.error)

        current_id = state.current_character.id if state.current_character else None
        main.query_one("#chat-list", ChatListPanel).set_chats(state.user_chats, current_id)

        main.query_one("#welcome", Static).display = not state.show_chat
        main.query_one("#chat-view", Vertical).display = state.show_chat

        name = state.current_character.name if state.current_character else ""
        main.query_one("#chat-header", ChatHeader).set_character(state.current_character)
        main.query_one("#chat-history", ChatHistoryWidget).sync_messages(state.messages, name)
        main.query_one("#typing-indicator", TypingIndicator).set_typing(state.typing, name)

        input_bar = main.query_one("#chat-input-bar", ChatInputBar)
        input_bar.set_send_enabled(state.can_send)
        # Only a send clears the draft from state
        if not state.draft and input_bar.text:
            input_bar.text = ""

        self._render_picker(state)
        self._render_account_dialog(state)

    def _render_error(self, error: str) -> None:
        if error == self._shown_error:
            return
        self._shown_error = error
        banner = self._main_screen.query_one("#error-banner", ErrorBanner)
        if self._error_timer is not None:
            self._error_timer.stop()
            self._error_timer = None
        if error:
            banner.show_error(error)
            self._error_timer = self.set_timer(
                ERROR_DISMISS_SECONDS, self._controller.clear_error
            )
        else:
            banner.clear_error()

    def _render_picker(self, state: WidgetState) -> None:
        if state.show_character_picker:
            if self._picker_screen is None:
                self._picker_screen = CharacterPickerScreen(self._controller)
                self.push_screen(self._picker_screen)
            else:
                self._picker_screen.update_from_state(state)
        elif self._picker_screen is not None:
            screen, self._picker_screen = self._picker_screen, None
            if self.screen is screen:
                screen.dismiss()

    def _render_account_dialog(self, state: WidgetState) -> None:
        if state.show_account_dialog:
            if self._account_screen is None:
                self._account_screen = AnonymousAccountScreen(self._controller)
                self.push_screen(self._account_screen)
            else:
                self._account_screen.update_from_state(state)
        elif self._account_screen is not None:
            screen, self._account_screen = self._account_screen, None
            if self._account_timer is not None:
                self._account_timer.stop()
                self._account_timer = None
            if self.screen is screen:
                screen.dismiss()

    # -- workers -----------------------------------------------------------

    @work(exclusive=True, group="user")
    async def _bootstrap(self) -> None:
        await self._controller.bootstrap()

    @work(exclusive=True, group="user")
    async def _set_user(self, uid: str) -> None:
        await self._controller.set_user(uid)

    @work(exclusive=True, group="picker")
    async def _open_picker(self) -> None:
        await self._controller.open_character_picker()

    @work(exclusive=True, group="chat")
    async def _select_character(self, character: Character) -> None:
        if await self._controller.select_character(character):
            self._main_screen.query_one("#chat-input-bar", ChatInputBar).focus_input()

    @work(exclusive=True, group="chat")
    async def _open_chat(self, chat: UserChat) -> None:
        await self._controller.open_existing_chat(chat)
        self._main_screen.query_one("#chat-input-bar", ChatInputBar).focus_input()

    @work(exclusive=True, group="account")
    async def _create_account(self, display_name: str, birth_year: str) -> None:
        uid = await self._controller.create_anonymous_account(display_name, birth_year)
        if uid:
            self.notify(f"Signed in as {uid}", timeout=3)
            self._account_timer = self.set_timer(
                ACCOUNT_DIALOG_CLOSE_SECONDS, self._controller.close_account_dialog
            )

    @work(exclusive=True, group="send")
    async def _send(self, text: str) -> None:
        await self._controller.send_message(text)

    # -- events ------------------------------------------------------------

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "uid-input":
            self._set_user(event.value)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "new-chat-btn":
            self.action_new_chat()
        elif event.button.id == "account-btn":
            self._controller.open_account_dialog()

    def on_chat_list_panel_chat_selected(self, event: ChatListPanel.ChatSelected) -> None:
        self._open_chat(event.chat)

    def on_character_picker_screen_character_chosen(
        self, event: CharacterPickerScreen.CharacterChosen
    ) -> None:
        self._select_character(event.character)

    def on_anonymous_account_screen_create_requested(
        self, event: AnonymousAccountScreen.CreateRequested
    ) -> None:
        self._create_account(event.display_name, event.birth_year)

    def on_chat_input_bar_draft_changed(self, event: ChatInputBar.DraftChanged) -> None:
        if event.value != self._controller.state.draft:
            self._controller.set_draft(event.value)

    def on_chat_input_bar_submitted(self, event: ChatInputBar.Submitted) -> None:
        """Handle user input submission."""
        self._send(event.value)

    # -- actions -----------------------------------------------------------

    def action_new_chat(self) -> None:
        """Open the character picker."""
        self._open_picker()

    def action_toggle_debug(self) -> None:
        """Toggle the log panel visibility."""
        log_panel = self._main_screen.query_one("#debug-panel", DebugPanel)
        is_visible = log_panel.toggle()
        self.notify(f"Log panel {'shown' if is_visible else 'hidden'}", timeout=2)

    def action_copy_last_response(self) -> None:
        """Copy last assistant response to clipboard."""
        chat = self._main_screen.query_one("#chat-history", ChatHistoryWidget)
        response = chat.get_last_response()
        if response:
            self.copy_to_clipboard(response)
            self.notify("Response copied")
        else:
            self.notify("No response to copy", severity="warning")


async def run_textual_tui(
    controller: ChatController,
    log_level: str | None = None,
) -> None:
    """Run the Textual TUI.

    Args:
        controller: Controller wired to a backend and a session store
        log_level: Log level for panel (debug/info/warning/error), None to hide
    """
    app = WhispiChatApp(controller, log_level=log_level)
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
    finally:
        with contextlib.suppress(Exception):
            await controller.backend.close()
