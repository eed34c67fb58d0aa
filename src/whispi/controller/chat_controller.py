"""Chat controller.

Turns user intents into remote calls and reducer actions. Owns the single
WidgetState of one widget instance and notifies listeners after every
dispatch; it never touches presentation.
"""

from collections.abc import Callable
from contextlib import aclosing
from datetime import datetime

from ..api import ChatBackend
from ..api.models import Character, UserChat
from ..config import (
    CHARACTER_PAGE_SIZE,
    CHAT_HISTORY_LIMIT,
    EXISTING_CHAT_STATUS,
    MIN_BIRTH_YEAR,
    DebugCallback,
)
from ..errors import AccountInputError, StreamError, WhispiError, is_not_found
from ..session import SessionStore, generate_device_id
from ..state import WidgetState, reduce
from ..state import actions as a
from ..streaming import CompleteFrame, ErrorFrame, FragmentFrame

StateListener = Callable[[WidgetState], None]

MISSING_UID_MESSAGE = "Enter your UID or create a new anonymous account."
PICKER_NEEDS_UID_MESSAGE = "Please enter a UID or create an anonymous account first."


def validate_account_input(
    display_name: str,
    birth_year: str | int,
    current_year: int | None = None,
) -> tuple[str, int]:
    """Check the anonymous account form.

    Returns:
        The trimmed display name and the birth year as int

    Raises:
        AccountInputError: If the name is blank or the year is out of range
    """
    name = display_name.strip()
    if not name:
        raise AccountInputError("Please enter your name.")

    max_year = current_year or datetime.now().year
    try:
        year = int(str(birth_year).strip())
    except ValueError:
        raise AccountInputError("Please enter a valid birth year.") from None
    if not MIN_BIRTH_YEAR <= year <= max_year:
        raise AccountInputError("Please enter a valid birth year.")
    return name, year


class ChatController:
    """Drives one chat widget: user, character picker, conversation and sends.

    All remote failures are caught here, logged, and surfaced through the
    state's error banner; the widget stays usable after any failure.
    """

    def __init__(
        self,
        backend: ChatBackend,
        store: SessionStore,
        debug_callback: DebugCallback | None = None,
    ):
        self._backend = backend
        self._store = store
        self._debug_callback = debug_callback
        self._state = WidgetState()
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> WidgetState:
        return self._state

    @property
    def backend(self) -> ChatBackend:
        return self._backend

    @property
    def store(self) -> SessionStore:
        return self._store

    def set_debug_callback(self, callback: DebugCallback | None) -> None:
        """Set the debug callback for detailed logging."""
        self._debug_callback = callback

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a listener called with the new state after each dispatch.

        Returns:
            A function that removes the listener
        """
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def dispatch(self, action: a.Action) -> WidgetState:
        """Apply an action through the reducer and notify listeners."""
        self._state = reduce(self._state, action)
        for listener in list(self._listeners):
            listener(self._state)
        return self._state

    def _log(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "Controller", message)

    def _fail(self, prefix: str, error: Exception) -> None:
        self._log("error", f"{prefix}: {error!r}")
        self.dispatch(a.SetError(f"{prefix}: {error}"))

    def _remember_uid(self, uid: str) -> None:
        # The uid stays current for this run even when it cannot be saved
        try:
            self._store.set_uid(uid)
        except OSError as e:
            self._log("warning", f"Could not save uid: {e!r}")

    def _device_id(self) -> str:
        try:
            return self._store.get_or_create_device_id()
        except OSError as e:
            self._log("warning", f"Could not persist device id: {e!r}")
            return generate_device_id()

    # -- user --------------------------------------------------------------

    async def bootstrap(self) -> None:
        """Restore the persisted user, if any."""
        try:
            uid = self._store.get_uid()
        except OSError as e:
            self._log("warning", f"Could not read saved session: {e!r}")
            return
        if uid:
            self._log("info", f"Restoring saved user {uid}")
            await self.set_user(uid)

    async def set_user(self, uid: str) -> None:
        uid = uid.strip()
        if not uid:
            self.dispatch(a.SetError(MISSING_UID_MESSAGE))
            return
        self.dispatch(a.SetUser(uid))
        self._remember_uid(uid)
        await self.load_user_chats()

    async def load_user_chats(self) -> None:
        """Refresh the sidebar conversation list from the server."""
        uid = self._state.uid
        if not uid:
            self.dispatch(a.SetError(MISSING_UID_MESSAGE))
            return
        try:
            chats = await self._backend.get_user_chats(uid)
        except WhispiError as e:
            if is_not_found(e):
                self._log("info", "No conversations yet")
                self.dispatch(a.SetUserChats(()))
            else:
                self._fail("Error loading chats", e)
            return
        self.dispatch(a.SetUserChats(tuple(chats)))

    # -- anonymous account -------------------------------------------------

    def open_account_dialog(self) -> None:
        self.dispatch(a.OpenAccountDialog())

    def close_account_dialog(self) -> None:
        self.dispatch(a.CloseAccountDialog())

    async def create_anonymous_account(
        self,
        display_name: str,
        birth_year: str | int,
    ) -> str | None:
        """Create and onboard an anonymous user, then make it current.

        Returns:
            The new uid, or None if validation or a remote call failed
        """
        try:
            name, year = validate_account_input(display_name, birth_year)
        except AccountInputError as e:
            self.dispatch(a.SetAccountStatus(str(e)))
            return None

        self.dispatch(a.SetAccountStatus("Creating anonymous account...", busy=True))
        try:
            uid = await self._backend.create_anonymous_user()
            self.dispatch(a.SetAccountStatus("Setting up your account...", busy=True))
            device_id = self._device_id()
            await self._backend.onboard_user(uid, device_id, name, year)
        except WhispiError as e:
            self._log("error", f"Account creation failed: {e!r}")
            self.dispatch(a.SetAccountStatus(f"Error creating account: {e}"))
            return None

        self._log("info", f"Created anonymous user {uid}")
        await self.set_user(uid)
        self.dispatch(a.SetAccountStatus("Account created successfully!"))
        return uid

    # -- character picker --------------------------------------------------

    async def open_character_picker(self) -> None:
        if not self._state.uid:
            self.dispatch(a.SetError(PICKER_NEEDS_UID_MESSAGE))
            return
        self.dispatch(a.OpenCharacterPicker())
        await self.load_characters()

    def close_character_picker(self) -> None:
        self.dispatch(a.CloseCharacterPicker())

    async def load_characters(self) -> None:
        self.dispatch(a.SetCharactersLoading(True))
        try:
            characters = await self._backend.list_characters(limit=CHARACTER_PAGE_SIZE)
            self.dispatch(a.SetCharacters(tuple(characters)))
        except WhispiError as e:
            self._fail("Error loading characters", e)
        finally:
            self.dispatch(a.SetCharactersLoading(False))

    def set_search_term(self, term: str) -> None:
        self.dispatch(a.SetSearchTerm(term))

    def toggle_filter(self, tag: str) -> None:
        self.dispatch(a.ToggleFilterTag(tag))

    # -- conversations -----------------------------------------------------

    async def select_character(self, character: Character) -> bool:
        """Open (or resume) the conversation with a character from the picker."""
        uid = self._state.uid
        if not uid:
            self.dispatch(a.SetError(PICKER_NEEDS_UID_MESSAGE))
            return False

        self.dispatch(a.SetSelectingCharacter(True))
        try:
            result = await self._backend.new_chat(character.id, uid)
        except WhispiError as e:
            self._fail("Error selecting character", e)
            return False
        finally:
            self.dispatch(a.SetSelectingCharacter(False))

        self._log("info", f"Opened conversation {result.conversation_id} with {character.name}")
        self.dispatch(a.OpenChat(character, result.conversation_id))
        if result.has_history:
            await self.load_chat_history(character.id)
        await self.load_user_chats()
        return True

    async def open_existing_chat(self, chat: UserChat) -> None:
        """Resume a conversation picked from the sidebar."""
        character = Character(
            id=chat.character_id,
            name=chat.character_name,
            profile_picture=chat.character_avatar,
            status_text=EXISTING_CHAT_STATUS,
        )
        self.dispatch(a.OpenChat(character, chat.conversation_id))
        await self.load_chat_history(chat.character_id)

    async def load_chat_history(self, character_id: str) -> None:
        uid = self._state.uid
        if not uid or not character_id:
            return
        try:
            messages = await self._backend.get_chat_history(
                character_id, uid, limit=CHAT_HISTORY_LIMIT
            )
        except WhispiError as e:
            if is_not_found(e):
                self.dispatch(a.SetMessages(()))
            else:
                self._fail("Error loading chat history", e)
            return
        self.dispatch(a.SetMessages(tuple(messages)))

    # -- sending -----------------------------------------------------------

    def set_draft(self, text: str) -> None:
        self.dispatch(a.SetDraft(text))

    async def send_message(self, text: str | None = None) -> bool:
        """Send the draft (or the given text) and consume the streamed reply.

        Returns:
            True if the reply stream ended normally, False if nothing was
            sent or the send failed
        """
        if text is not None:
            self.dispatch(a.SetDraft(text))

        state = self._state
        if not state.can_send:
            return False

        prompt = state.draft.strip()
        character_id = state.current_character.id
        uid = state.uid
        self.dispatch(a.SendStarted(prompt))
        self._log("info", f"Sending {len(prompt)} chars to {character_id}")

        ok = False
        try:
            frames = self._backend.stream_reply(prompt, character_id, uid)
            async with aclosing(frames):
                async for frame in frames:
                    if isinstance(frame, FragmentFrame):
                        self.dispatch(a.StreamChunk(frame.content))
                    elif isinstance(frame, CompleteFrame):
                        self.dispatch(a.StreamComplete(frame.content))
                    elif isinstance(frame, ErrorFrame):
                        raise StreamError(frame.message)
            ok = True
        except WhispiError as e:
            self._log("error", f"Send failed: {e!r}")
            self.dispatch(a.StreamError(f"Error sending message: {e}"))
        finally:
            if self._state.is_streaming:
                self.dispatch(a.StreamFinished())

        await self.load_user_chats()
        return ok

    # -- banner ------------------------------------------------------------

    def clear_error(self) -> None:
        self.dispatch(a.ClearError())
