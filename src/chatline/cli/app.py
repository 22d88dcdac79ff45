"""Main CLI application using Typer."""
import asyncio
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table

from ..config import STORE_KEY_PREFIX, load_settings
from ..identity import resolve_identity
from ..rendering import MessageRenderer, format_model_name, format_response_meta
from ..timeline import Role, Timeline
from .providers import get_store

settings = load_settings()

# Create Typer app
app = typer.Typer(
    name="chatline",
    help="Chat timelines with temporary sessions and markdown rendering",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()


@app.callback()
def main(
    log_level: str = typer.Option(
        settings.log_level,
        "--log-level",
        "-l",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )
):
    """Configure logging for every command."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


@app.command()
def render(
    file: Path = typer.Argument(
        ...,
        exists=True,
        file_okay=True,
        dir_okay=False,
        help="Markdown file with assistant output"
    ),
    normalized: bool = typer.Option(
        False,
        "--normalized",
        "-n",
        help="Print the normalized markdown instead of rendering it"
    )
):
    """Render assistant markdown the way the chat view shows it."""
    renderer = MessageRenderer()
    content = file.read_text(encoding="utf-8")
    if normalized:
        from ..rendering import normalize
        console.print(normalize(content), markup=False, highlight=False)
        return
    console.print(renderer.render(content))


@app.command()
def history(
    conversation_id: str = typer.Argument(..., help="Conversation to show"),
):
    """Show a saved conversation grouped by day."""
    async def _history():
        store = get_store(settings)
        try:
            await store.connect()
            timeline = await Timeline.load(store, conversation_id)
        except Exception as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(code=1)
        finally:
            await store.disconnect()

        if not len(timeline):
            console.print(f"[yellow]No messages in conversation {conversation_id}[/yellow]")
            return

        renderer = MessageRenderer()
        for label, messages in timeline.grouped_by_day().items():
            console.print(Rule(label, style="dim"))
            for message in messages:
                identity = resolve_identity(message.model, message.role, message.agent_type)
                title = f"[bold]{identity.label}[/bold] [dim]{message.timestamp:%H:%M}[/dim]"
                if message.role == Role.USER:
                    console.print(Panel(message.content, title=title, title_align="left", border_style="magenta"))
                    continue
                if message.model:
                    title = f"{title} [dim]{format_model_name(message.model)}[/dim]"
                console.print(Panel(
                    renderer.render_message(message),
                    title=title,
                    title_align="left",
                    subtitle=format_response_meta(message),
                    subtitle_align="right",
                    border_style="blue",
                ))

    asyncio.run(_history())


@app.command()
def conversations():
    """List saved conversations."""
    async def _conversations():
        store = get_store(settings)
        try:
            await store.connect()
            keys = await store.keys(STORE_KEY_PREFIX)
            rows = []
            for key in keys:
                conversation_id = key.removeprefix(STORE_KEY_PREFIX)
                timeline = await Timeline.load(store, conversation_id)
                last = timeline.messages[-1].timestamp if len(timeline) else None
                rows.append((conversation_id, len(timeline), last))
        except Exception as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(code=1)
        finally:
            await store.disconnect()

        if not rows:
            console.print("[dim]No saved conversations.[/dim]")
            return

        table = Table(title="Conversations")
        table.add_column("ID", style="cyan")
        table.add_column("Messages", justify="right")
        table.add_column("Last message", style="dim")
        for conversation_id, count, last in rows:
            table.add_row(conversation_id, str(count), f"{last:%Y-%m-%d %H:%M}" if last else "-")
        console.print(table)

    asyncio.run(_conversations())


@app.command()
def chat(
    conversation_id: str = typer.Option(
        None,
        "--conversation",
        "-c",
        help="Resume a saved conversation (default: start a new one)"
    ),
    temporary: bool = typer.Option(
        False,
        "--temporary",
        "-t",
        help="Start in a temporary chat that is never saved"
    )
):
    """Start the interactive chat TUI."""
    from ..ui import run_chat_tui

    run_chat_tui(get_store(settings), settings, conversation_id=conversation_id, temporary=temporary)


if __name__ == "__main__":
    app()
