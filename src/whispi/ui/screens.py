"""Modal screens for the TUI.

This module hides the design decisions about:
- Character picker layout (search, filter tags, results)
- Anonymous account form layout
- Keyboard shortcuts for dialogs

Both screens render from WidgetState and forward user intent to the
controller; the app decides when they are shown.
"""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.screen import ModalScreen
from textual.widgets import Button, Input, OptionList, SelectionList, Static
from textual.widgets.option_list import Option

from ..api.models import Character
from ..catalog import FILTER_TAGS
from ..controller import ChatController
from ..state import WidgetState
from .config import SEARCH_PLACEHOLDER
from .formatting import format_character


class CharacterPickerScreen(ModalScreen[None]):
    """Modal for browsing, searching and filtering characters."""

    CSS = """
    CharacterPickerScreen {
        align: center middle;
        background: $background 70%;
    }

    #picker-dialog {
        width: 90%;
        max-width: 110;
        height: 85%;
        border: tall $primary;
        background: $surface;
        padding: 1 2;
    }

    #picker-title {
        width: 100%;
        height: auto;
        text-style: bold;
        color: $primary;
        padding: 0 0 1 0;
    }

    #picker-search {
        margin-bottom: 1;
    }

    #picker-body {
        height: 1fr;
    }

    #picker-filters {
        width: 30;
        height: 100%;
        margin-right: 1;
    }

    #picker-results {
        width: 1fr;
        height: 100%;
    }

    #picker-status {
        height: auto;
        color: $text-muted;
        padding: 1 0 0 0;
    }
    """

    BINDINGS = [
        Binding("escape", "close", "Close", show=False),
    ]

    class CharacterChosen(Message):
        """Posted when the user picks a character to chat with."""

        def __init__(self, character: Character) -> None:
            super().__init__()
            self.character = character

    def __init__(self, controller: ChatController) -> None:
        super().__init__()
        self._controller = controller
        self._shown: tuple[Character, ...] | None = None
        self._ready = False

    def compose(self) -> ComposeResult:
        with Vertical(id="picker-dialog"):
            yield Static("Choose a character", id="picker-title")
            yield Input(placeholder=SEARCH_PLACEHOLDER, id="picker-search")
            with Horizontal(id="picker-body"):
                yield SelectionList[str](
                    *[(tag, tag) for tag in FILTER_TAGS],
                    id="picker-filters",
                )
                yield OptionList(id="picker-results")
            yield Static("", id="picker-status")

    def on_mount(self) -> None:
        self.query_one("#picker-filters", SelectionList).border_title = "Filters"
        self._ready = True
        self.update_from_state(self._controller.state)
        self.query_one("#picker-search", Input).focus()

    def update_from_state(self, state: WidgetState) -> None:
        """Re-render results and status from the given state."""
        if not self._ready:
            return
        visible = tuple(state.filtered_characters)
        if visible != self._shown:
            self._shown = visible
            results = self.query_one("#picker-results", OptionList)
            results.clear_options()
            results.add_options(
                [Option(format_character(character), id=character.id) for character in visible]
            )

        if state.selecting_character:
            status = "Opening chat..."
        elif state.loading_characters:
            status = "Loading characters..."
        elif not visible:
            status = "No characters match your search."
        else:
            status = f"{len(visible)} of {len(state.characters)} characters"
        self.query_one("#picker-status", Static).update(status)

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "picker-search":
            event.stop()
            self._controller.set_search_term(event.value)

    def on_selection_list_selection_toggled(
        self, event: SelectionList.SelectionToggled
    ) -> None:
        event.stop()
        self._controller.toggle_filter(event.selection.value)

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        event.stop()
        if self._controller.state.selecting_character or not self._shown:
            return
        if 0 <= event.option_index < len(self._shown):
            self.post_message(self.CharacterChosen(self._shown[event.option_index]))

    def action_close(self) -> None:
        self._controller.close_character_picker()


class AnonymousAccountScreen(ModalScreen[None]):
    """Modal form for creating an anonymous account."""

    CSS = """
    AnonymousAccountScreen {
        align: center middle;
        background: $background 70%;
    }

    #account-dialog {
        width: 60;
        height: auto;
        border: tall $primary;
        background: $surface;
        padding: 1 2;
    }

    #account-title {
        width: 100%;
        height: auto;
        text-align: center;
        text-style: bold;
        color: $primary;
        padding: 0 0 1 0;
        border-bottom: solid $border;
        margin-bottom: 1;
    }

    #account-dialog Input {
        margin-bottom: 1;
    }

    #account-status {
        height: auto;
        text-align: center;
        color: $text-muted;
    }

    #account-buttons {
        width: 100%;
        height: 3;
        align: center middle;
        margin-top: 1;
    }

    #account-buttons Button {
        margin: 0 1;
        min-width: 10;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", show=False),
    ]

    class CreateRequested(Message):
        """Posted when the user submits the form."""

        def __init__(self, display_name: str, birth_year: str) -> None:
            super().__init__()
            self.display_name = display_name
            self.birth_year = birth_year

    def __init__(self, controller: ChatController) -> None:
        super().__init__()
        self._controller = controller
        self._ready = False

    def compose(self) -> ComposeResult:
        with Vertical(id="account-dialog"):
            yield Static("Create anonymous account", id="account-title")
            yield Input(placeholder="Your name", id="account-name")
            yield Input(placeholder="Birth year", type="integer", id="account-birth-year")
            yield Static("", id="account-status")
            with Horizontal(id="account-buttons"):
                yield Button("Create", id="account-create", variant="primary")
                yield Button("Cancel", id="account-cancel")

    def on_mount(self) -> None:
        self._ready = True
        self.update_from_state(self._controller.state)
        self.query_one("#account-name", Input).focus()

    def update_from_state(self, state: WidgetState) -> None:
        if not self._ready:
            return
        self.query_one("#account-status", Static).update(state.account_status)
        self.query_one("#account-create", Button).disabled = state.creating_account

    def _submit(self) -> None:
        if self._controller.state.creating_account:
            return
        self.post_message(
            self.CreateRequested(
                self.query_one("#account-name", Input).value,
                self.query_one("#account-birth-year", Input).value,
            )
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        if event.button.id == "account-create":
            self._submit()
        elif event.button.id == "account-cancel":
            self.action_cancel()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self._submit()

    def action_cancel(self) -> None:
        self._controller.close_account_dialog()
