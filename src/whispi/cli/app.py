"""Main CLI application using Typer."""
import asyncio
from contextlib import aclosing

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..api import ChatBackend
from ..catalog import FILTER_TAGS, filter_characters
from ..config import CHARACTER_PAGE_SIZE, CHAT_HISTORY_LIMIT
from ..errors import StreamError, WhispiError, is_not_found
from ..session import SessionStore
from ..streaming import CompleteFrame, ErrorFrame, FragmentFrame
from ..ui.formatting import format_time, truncate
from .providers import console_debug_callback, get_backend, get_controller, get_session_store

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="whispi",
    help="Chat with Whispi characters from the terminal",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()

LOG_LEVEL_HELP = "Print trace logs with level: debug (all), info, warning, or error"


def _require_uid(store: SessionStore) -> str:
    uid = store.get_uid()
    if not uid:
        console.print("[red]Error: no user set. Run 'whispi login UID' or 'whispi account'.[/red]")
        raise typer.Exit(code=1)
    return uid


@app.command(name="tui")
def tui_command(
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Show log panel with level: debug (all), info, warning, or error"
    ),
):
    """Launch the interactive chat interface."""
    async def _tui():
        from ..ui import run_textual_tui

        await run_textual_tui(get_controller(), log_level=log_level)
        console.print("\n[dim]Goodbye![/dim]")

    try:
        asyncio.run(_tui())
    except KeyboardInterrupt:
        pass


@app.command()
def login(uid: str = typer.Argument(..., help="User identifier to chat as")):
    """Remember a user identifier for later commands."""
    uid = uid.strip()
    if not uid:
        console.print("[red]Error: UID must not be blank[/red]")
        raise typer.Exit(code=1)
    get_session_store().set_uid(uid)
    console.print(f"[green]Logged in as[/green] {escape(uid)}")


@app.command()
def whoami():
    """Show the saved user identifier and device fingerprint."""
    data = get_session_store().load()

    table = Table(show_header=False, box=None)
    table.add_column("Field", style="bold cyan", width=10)
    table.add_column("Value")
    table.add_row("UID", escape(data.uid) if data.uid else "[dim]not set[/dim]")
    table.add_row("Device", escape(data.device_id) if data.device_id else "[dim]not generated[/dim]")
    console.print(table)


@app.command()
def account(
    name: str = typer.Argument(..., help="Display name"),
    birth_year: str = typer.Argument(..., help="Four-digit birth year"),
    log_level: str | None = typer.Option(None, "--log-level", "-l", help=LOG_LEVEL_HELP),
):
    """Create an anonymous account and make it the current user."""
    async def _account():
        controller = get_controller(console_debug_callback(log_level, console))
        try:
            console.print("[dim]Creating anonymous account...[/dim]")
            uid = await controller.create_anonymous_account(name, birth_year)
        finally:
            await controller.backend.close()

        status = escape(controller.state.account_status)
        if not uid:
            console.print(f"[red]{status}[/red]")
            raise typer.Exit(code=1)
        console.print(f"[green]{status}[/green]")
        console.print(f"UID: [bold]{escape(uid)}[/bold]")

    asyncio.run(_account())


@app.command()
def chats(
    log_level: str | None = typer.Option(None, "--log-level", "-l", help=LOG_LEVEL_HELP),
):
    """List the current user's conversations."""
    async def _chats():
        debug_callback = console_debug_callback(log_level, console)
        uid = _require_uid(get_session_store(debug_callback))
        backend = get_backend(debug_callback)
        try:
            conversations = await backend.get_user_chats(uid)
        except WhispiError as e:
            if not is_not_found(e):
                console.print(f"[red]Error loading chats: {escape(str(e))}[/red]")
                raise typer.Exit(code=1)
            conversations = []
        finally:
            await backend.close()

        if not conversations:
            console.print("[yellow]No chats yet[/yellow]")
            return

        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Character", style="bold")
        table.add_column("Character ID", style="dim")
        table.add_column("Last message")
        table.add_column("When", style="dim", width=6)
        for chat in conversations:
            table.add_row(
                escape(chat.character_name),
                escape(chat.character_id),
                escape(truncate(chat.last_message or "")),
                format_time(chat.last_message_time),
            )
        console.print(table)

    asyncio.run(_chats())


@app.command()
def characters(
    search: str = typer.Option("", "--search", "-s", help="Match name, status or personality tag"),
    tags: list[str] | None = typer.Option(
        None,
        "--tag",
        "-t",
        help="Only characters carrying this filter tag (repeatable)"
    ),
    limit: int = typer.Option(CHARACTER_PAGE_SIZE, "--limit", "-n", help="Characters to fetch"),
    log_level: str | None = typer.Option(None, "--log-level", "-l", help=LOG_LEVEL_HELP),
):
    """Browse the character catalog."""
    active = tuple(tags or ())
    unknown = [tag for tag in active if tag not in FILTER_TAGS]
    if unknown:
        console.print(f"[yellow]Warning: unknown filter tags: {escape(', '.join(unknown))}[/yellow]")

    async def _characters():
        backend = get_backend(console_debug_callback(log_level, console))
        try:
            catalog = await backend.list_characters(limit=limit)
        except WhispiError as e:
            console.print(f"[red]Error loading characters: {escape(str(e))}[/red]")
            raise typer.Exit(code=1)
        finally:
            await backend.close()

        visible = filter_characters(catalog, search, active)
        if not visible:
            console.print("[yellow]No characters match[/yellow]")
            return

        console.print(f"[green]{len(visible)} of {len(catalog)} characters[/green]\n")
        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("ID", style="dim")
        table.add_column("Name", style="bold")
        table.add_column("Age", width=4)
        table.add_column("Status")
        table.add_column("Personality", style="magenta")
        for character in visible:
            table.add_row(
                escape(character.id),
                escape(character.name),
                str(character.age) if character.age is not None else "",
                escape(character.status_text),
                escape(", ".join(character.personality_tags or [])),
            )
        console.print(table)

    asyncio.run(_characters())


@app.command()
def history(
    character_id: str = typer.Argument(..., help="Character whose conversation to show"),
    limit: int = typer.Option(CHAT_HISTORY_LIMIT, "--limit", "-n", help="Messages to fetch"),
    log_level: str | None = typer.Option(None, "--log-level", "-l", help=LOG_LEVEL_HELP),
):
    """Print the conversation with a character."""
    async def _history():
        debug_callback = console_debug_callback(log_level, console)
        uid = _require_uid(get_session_store(debug_callback))
        backend = get_backend(debug_callback)
        try:
            messages = await backend.get_chat_history(character_id, uid, limit=limit)
        except WhispiError as e:
            if not is_not_found(e):
                console.print(f"[red]Error loading chat history: {escape(str(e))}[/red]")
                raise typer.Exit(code=1)
            messages = []
        finally:
            await backend.close()

        if not messages:
            console.print("[yellow]No messages yet[/yellow]")
            return

        for message in messages:
            when = format_time(message.timestamp)
            if message.role == "user":
                console.print(f"[dim]{when}[/dim] [bold yellow]You:[/bold yellow] {escape(message.content)}")
            else:
                console.print(f"[dim]{when}[/dim] [bold green]Them:[/bold green] {escape(message.content)}")

    asyncio.run(_history())


async def _stream_to_console(backend: ChatBackend, prompt: str, character_id: str, uid: str) -> str:
    """Print reply fragments as they arrive and return the final reply text."""
    shown = ""
    frames = backend.stream_reply(prompt, character_id, uid)
    async with aclosing(frames):
        async for frame in frames:
            if isinstance(frame, FragmentFrame):
                console.out(frame.content, end="", highlight=False)
                shown += frame.content
            elif isinstance(frame, CompleteFrame):
                # The final text is authoritative; print only what is missing
                if frame.content.startswith(shown):
                    console.out(frame.content[len(shown):], end="", highlight=False)
                else:
                    console.out("\n" + frame.content, end="", highlight=False)
                shown = frame.content
            elif isinstance(frame, ErrorFrame):
                raise StreamError(frame.message)
    console.out("")
    return shown


@app.command()
def send(
    character_id: str = typer.Argument(..., help="Character to message"),
    prompt: str = typer.Argument(..., help="Message text"),
    log_level: str | None = typer.Option(None, "--log-level", "-l", help=LOG_LEVEL_HELP),
):
    """Send a message and stream the reply."""
    if not prompt.strip():
        console.print("[red]Error: message must not be blank[/red]")
        raise typer.Exit(code=1)

    async def _send():
        debug_callback = console_debug_callback(log_level, console)
        uid = _require_uid(get_session_store(debug_callback))
        backend = get_backend(debug_callback)
        try:
            await backend.new_chat(character_id, uid)
            console.print(f"[bold yellow]You:[/bold yellow] {escape(prompt.strip())}")
            console.print("[bold green]Reply:[/bold green] ", end="")
            await _stream_to_console(backend, prompt.strip(), character_id, uid)
        except WhispiError as e:
            console.print(f"\n[red]Error sending message: {escape(str(e))}[/red]")
            raise typer.Exit(code=1)
        finally:
            await backend.close()

    asyncio.run(_send())


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
