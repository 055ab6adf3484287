"""
Display Helpers.

Presentation-side formatting shared by the CLI and the TUI. Nothing here
changes stored data: titles are trimmed and defaulted only for display.
"""

import re
from datetime import datetime

from localnotes.schemas.note import Note
from localnotes.services.session import Mode

UNTITLED = "Untitled"
ELLIPSIS = "…"

_WHITESPACE = re.compile(r"\s+")

EMPTY_COLLECTION_STATE = (
    "No notes yet",
    "Create your first note with “New Note”. Notes are saved locally.",
)
NO_MATCHES_STATE = (
    "No matches",
    "Try a different search or clear the query.",
)


def display_title(note: Note) -> str:
    """Trimmed title, or 'Untitled' when blank."""
    return note.title.strip() or UNTITLED


def preview(content: str, max_length: int = 90) -> str:
    """Collapse whitespace and truncate to max_length, ending in an ellipsis."""
    text = _WHITESPACE.sub(" ", content or "").strip()
    if len(text) <= max_length:
        return text
    return f"{text[:max_length - 1]}{ELLIPSIS}"


def format_timestamp(value: datetime | None) -> str:
    """Short form like 'Oct 18, 2026 09:30'. Empty for None."""
    if value is None:
        return ""
    return value.strftime("%b %d, %Y %H:%M")


def list_empty_state(total: int, shown: int) -> tuple[str, str]:
    """
    Title and description for the note list placeholder.

    Returns ('', '') when the list has something to show.
    """
    if total == 0:
        return EMPTY_COLLECTION_STATE
    if shown == 0:
        return NO_MATCHES_STATE
    return "", ""


def stats(total: int, shown: int) -> str:
    return f"{total} total • {shown} shown"


def editor_heading(mode: Mode) -> str:
    if mode is Mode.CREATING:
        return "New Note"
    if mode is Mode.EDITING:
        return "Edit Note"
    return "Select a note"


def editor_subheading(mode: Mode, note: Note | None) -> str:
    """Timestamp line shown under the editor heading."""
    if mode is Mode.EMPTY:
        return "Pick a note from the list or create a new one."
    if note is None:
        return "Not saved yet"
    return f"Last updated: {format_timestamp(note.updated_at)}"
