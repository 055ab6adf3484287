"""
Note Commands.

Commands for listing, reading, creating, editing, and deleting notes.
Every command opens a session over the configured store, so changes are
persisted before the command returns.
"""

import asyncio

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from localnotes.core.exceptions import ApplicationError, NotFoundError, ValidationError
from localnotes.core.logging import get_logger, log_with_source
from localnotes.services.display import (
    display_title,
    format_timestamp,
    list_empty_state,
    preview,
    stats,
)
from localnotes.services.session import ConfirmProvider, ConfirmRequest, SessionController

app = typer.Typer(help="Note management commands")
console = Console()
logger = get_logger(__name__)


def _prompt_confirm(request: ConfirmRequest) -> bool:
    return typer.confirm(request.message, default=False)


def _accept_all(request: ConfirmRequest) -> bool:
    return True


def _open_session(confirm: ConfirmProvider = _prompt_confirm) -> SessionController:
    from localnotes.core.dependencies import build_session

    return build_session(confirm=confirm)


def _fail(error: ApplicationError) -> None:
    console.print(f"[red]Error: {escape(error.message)}[/red]")
    raise typer.Exit(1)


def _preview_length() -> int:
    from localnotes.core.config import get_app_config

    return get_app_config().editor.preview_length


def _render_list(controller: SessionController) -> None:
    total = len(controller.notes)
    shown = controller.filtered_notes
    empty_title, empty_description = list_empty_state(total, len(shown))

    if empty_title:
        console.print(f"[bold]{empty_title}[/bold]")
        console.print(f"[dim]{empty_description}[/dim]")
    else:
        max_length = _preview_length()
        table = Table(show_header=True)
        table.add_column("ID", style="cyan", no_wrap=True)
        table.add_column("Title", style="bold")
        table.add_column("Updated")
        table.add_column("Preview", style="dim")
        for note in shown:
            table.add_row(
                note.id,
                escape(display_title(note)),
                format_timestamp(note.updated_at),
                escape(preview(note.content, max_length)),
            )
        console.print(table)

    console.print(f"[dim]{stats(total, len(shown))}[/dim]")


@app.command("list")
def list_notes(
    query: str | None = typer.Option(None, "--query", "-q", help="Filter by title or content"),
) -> None:
    """
    List notes in collection order.

    Examples:
        cli.py notes list
        cli.py notes list -q groceries
    """
    controller = _open_session()
    controller.set_query(query)
    _render_list(controller)


@app.command()
def search(
    text: str = typer.Argument(..., help="Text to look for in titles and content"),
) -> None:
    """
    Search notes by title or content (case-insensitive).
    """
    controller = _open_session()
    controller.set_query(text)
    _render_list(controller)


@app.command()
def show(
    note_id: str = typer.Argument(..., help="Note ID"),
) -> None:
    """
    Display a single note.
    """
    controller = _open_session()
    try:
        note = controller.repository.get_by_id(note_id)
    except NotFoundError as e:
        _fail(e)
        return

    console.print(Panel(
        f"{escape(note.content)}\n\n"
        f"[dim]Created: {format_timestamp(note.created_at)} | "
        f"Updated: {format_timestamp(note.updated_at)}[/dim]",
        title=escape(display_title(note)),
        subtitle=note.id,
    ))


@app.command()
def add(
    title: str = typer.Option("", "--title", "-t", help="Note title"),
    content: str = typer.Option("", "--content", "-c", help="Note content"),
) -> None:
    """
    Create a new note.

    Examples:
        cli.py notes add -t "Groceries" -c "milk, eggs"
    """
    asyncio.run(_add(title, content))


async def _add(title: str, content: str) -> None:
    controller = _open_session()
    await controller.start_new()
    controller.update_draft(title=title, content=content)
    note = controller.save()
    if note is None:
        _fail(ApplicationError("Note was not saved"))
        return
    log_with_source(logger, "cli", "info", "Note created", note_id=note.id)
    console.print(f"[green]Created note[/green] [cyan]{note.id}[/cyan]")


@app.command()
def edit(
    note_id: str = typer.Argument(..., help="Note ID"),
    title: str | None = typer.Option(None, "--title", "-t", help="New title"),
    content: str | None = typer.Option(None, "--content", "-c", help="New content"),
) -> None:
    """
    Change the title and/or content of a note.
    """
    asyncio.run(_edit(note_id, title, content))


async def _edit(note_id: str, title: str | None, content: str | None) -> None:
    if title is None and content is None:
        _fail(ValidationError("Nothing to change: pass --title and/or --content"))
        return

    controller = _open_session()
    if not await controller.select(note_id):
        _fail(NotFoundError(f"Note not found: {note_id}"))
        return

    controller.update_draft(title=title, content=content)
    if not controller.dirty:
        console.print("[yellow]No changes[/yellow]")
        return

    note = controller.save()
    if note is None:
        _fail(ApplicationError("Note was not saved"))
        return
    log_with_source(logger, "cli", "info", "Note updated", note_id=note.id)
    console.print(f"[green]Updated note[/green] [cyan]{note.id}[/cyan]")


@app.command()
def delete(
    note_id: str = typer.Argument(..., help="Note ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """
    Delete a note. Asks for confirmation unless --yes is given.
    """
    asyncio.run(_delete(note_id, yes))


async def _delete(note_id: str, yes: bool) -> None:
    controller = _open_session(confirm=_accept_all if yes else _prompt_confirm)
    if not await controller.select(note_id):
        _fail(NotFoundError(f"Note not found: {note_id}"))
        return

    if not await controller.delete(note_id):
        console.print("[yellow]Cancelled[/yellow]")
        return
    log_with_source(logger, "cli", "info", "Note deleted", note_id=note_id)
    console.print(f"[green]Deleted note[/green] [cyan]{note_id}[/cyan]")
