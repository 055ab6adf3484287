"""
Local Notes TUI: Terminal Note Editor.

Two-pane terminal interface over the session controller: a searchable
note list on the left, the editor on the right. Confirmations are shown
as modal dialogs and awaited from workers.

Usage:
    python tui.py
    python tui.py --debug
    python cli.py tui
"""

from __future__ import annotations

import sys

from rich.markup import escape
from textual import events, on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen, Screen
from textual.timer import Timer
from textual.widgets import (
    Button,
    Footer,
    Header,
    Input,
    Label,
    ListItem,
    ListView,
    Static,
    TextArea,
)

from localnotes.core.logging import get_logger, log_with_source
from localnotes.repositories.note import NoteRepository
from localnotes.schemas.note import Note
from localnotes.services.autosave import AutosaveTimer
from localnotes.services.display import (
    display_title,
    editor_heading,
    editor_subheading,
    format_timestamp,
    list_empty_state,
    preview,
    stats,
)
from localnotes.services.session import (
    ConfirmRequest,
    Mode,
    SessionController,
    SessionSnapshot,
)

logger = get_logger(__name__)


class ConfirmScreen(ModalScreen[bool]):
    """Yes/no dialog. Dismisses with True only on an explicit yes."""

    BINDINGS = [
        Binding("y", "answer(True)", "Yes"),
        Binding("n", "answer(False)", "No"),
        Binding("escape", "answer(False)", "Cancel"),
    ]

    def __init__(self, message: str) -> None:
        super().__init__()
        self._message = message

    def compose(self) -> ComposeResult:
        with Vertical(id="confirm-dialog"):
            yield Label(self._message, id="confirm-message")
            with Horizontal(id="confirm-buttons"):
                yield Button("Yes", variant="error", id="confirm-yes")
                yield Button("No", variant="primary", id="confirm-no")

    @on(Button.Pressed, "#confirm-yes")
    def _yes(self) -> None:
        self.dismiss(True)

    @on(Button.Pressed, "#confirm-no")
    def _no(self) -> None:
        self.dismiss(False)

    def action_answer(self, answer: bool) -> None:
        self.dismiss(answer)


class NoteListItem(ListItem):
    """List row remembering which note it shows."""

    def __init__(self, note: Note, preview_length: int) -> None:
        body = escape(preview(note.content, preview_length)) or "[dim]No content[/]"
        super().__init__(
            Static(
                f"[bold]{escape(display_title(note))}[/]  [dim]{format_timestamp(note.updated_at)}[/]\n{body}",
                markup=True,
            )
        )
        self.note_id = note.id


class NotesTUI(App):
    """Terminal client for the local note store."""

    TITLE = "Local Notes"
    SUB_TITLE = "Stored locally on this device"

    CSS = """
    #panes {
        height: 1fr;
    }

    #list-pane {
        width: 40%;
        border: solid $primary;
        padding: 0 1;
    }

    #note-list {
        height: 1fr;
    }

    #list-empty {
        height: auto;
        padding: 1 0;
        color: $text-muted;
    }

    #list-stats {
        height: 1;
        color: $text-muted;
    }

    #editor-pane {
        width: 1fr;
        border: solid $primary;
        padding: 0 1;
    }

    #editor-heading {
        text-style: bold;
    }

    #editor-sub {
        color: $text-muted;
        margin: 0 0 1 0;
    }

    #note-content {
        height: 1fr;
    }

    #editor-buttons {
        height: auto;
    }

    ConfirmScreen {
        align: center middle;
    }

    #confirm-dialog {
        width: 60;
        height: auto;
        padding: 1 2;
        border: thick $warning;
        background: $surface;
    }

    #confirm-buttons {
        height: auto;
        margin: 1 0 0 0;
    }
    """

    # Priority so the shortcuts win over Input/TextArea key bindings.
    BINDINGS = [
        Binding("ctrl+s", "save_note", "Save", priority=True),
        Binding("ctrl+n", "new_note", "New Note", priority=True),
        Binding("ctrl+d", "delete_note", "Delete", priority=True),
        Binding("ctrl+r", "reload", "Reload", priority=True),
        Binding("ctrl+l", "focus_search", "Search", priority=True),
        Binding("ctrl+q", "quit", "Quit", priority=True),
    ]

    def __init__(
        self,
        repository: NoteRepository,
        autosave_seconds: float | None = None,
        save_on_blur: bool = True,
        search_debounce_ms: int = 200,
        preview_length: int = 90,
    ) -> None:
        super().__init__()
        self.controller = SessionController(repository, confirm=self._ask_confirmation)
        self._autosave = (
            AutosaveTimer(self.controller, autosave_seconds) if autosave_seconds else None
        )
        self._save_on_blur = save_on_blur
        self._search_delay = search_debounce_ms / 1000
        self._preview_length = preview_length
        self._search_timer: Timer | None = None
        self._list_signature: tuple | None = None
        self._unsubscribe = None

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="panes"):
            with Vertical(id="list-pane"):
                yield Input(placeholder="Search by title or content…", id="search")
                yield ListView(id="note-list")
                yield Static("", id="list-empty")
                yield Static("", id="list-stats")
            with Vertical(id="editor-pane"):
                yield Static("", id="editor-heading")
                yield Static("", id="editor-sub")
                yield Input(placeholder="Untitled", id="note-title")
                yield TextArea(id="note-content")
                with Horizontal(id="editor-buttons"):
                    yield Button("Save", variant="success", id="save")
                    yield Button("Delete", variant="error", id="delete")
                    yield Button("New Note", variant="primary", id="new")
        yield Footer()

    async def on_mount(self) -> None:
        self._unsubscribe = self.controller.subscribe(self._on_session_change)
        await self._refresh_view()
        if self._autosave is not None:
            self._autosave.start()

    async def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
        if self._autosave is not None:
            await self._autosave.stop()

    # -------------------------------------------------------------------------
    # Confirmation
    # -------------------------------------------------------------------------

    async def _ask_confirmation(self, request: ConfirmRequest) -> bool:
        # Gated operations run in workers, so waiting on the dialog is allowed.
        answer = await self.push_screen_wait(ConfirmScreen(request.message))
        return bool(answer)

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def _on_session_change(self, snapshot: SessionSnapshot) -> None:
        self.call_later(self._refresh_view)

    @property
    def _main(self) -> Screen:
        # Refreshes may fire while a ConfirmScreen is on top.
        return self.screen_stack[0]

    async def _refresh_view(self) -> None:
        snapshot = self.controller.snapshot()
        await self._refresh_list(snapshot)
        self._refresh_editor(snapshot)

    async def _refresh_list(self, snapshot: SessionSnapshot) -> None:
        list_view = self._main.query_one("#note-list", ListView)
        shown = snapshot.filtered_notes

        signature = (
            snapshot.selected_id,
            tuple((n.id, n.title, n.content, n.updated_at) for n in shown),
        )
        if signature != self._list_signature:
            self._list_signature = signature
            await list_view.clear()
            await list_view.extend(NoteListItem(n, self._preview_length) for n in shown)
            ids = [n.id for n in shown]
            if snapshot.selected_id in ids:
                list_view.index = ids.index(snapshot.selected_id)

        empty_title, empty_description = list_empty_state(len(snapshot.notes), len(shown))
        empty = self._main.query_one("#list-empty", Static)
        empty.update(f"[bold]{empty_title}[/]\n{empty_description}" if empty_title else "")
        empty.display = bool(empty_title)
        self._main.query_one("#list-stats", Static).update(stats(len(snapshot.notes), len(shown)))

    def _refresh_editor(self, snapshot: SessionSnapshot) -> None:
        heading = editor_heading(snapshot.mode)
        if snapshot.dirty:
            heading += " [yellow](unsaved)[/]"
        self._main.query_one("#editor-heading", Static).update(heading)
        self._main.query_one("#editor-sub", Static).update(
            escape(editor_subheading(snapshot.mode, self.controller.selected_note))
        )

        editable = snapshot.mode is not Mode.EMPTY
        title = self._main.query_one("#note-title", Input)
        content = self._main.query_one("#note-content", TextArea)
        if title.value != snapshot.draft.title:
            title.value = snapshot.draft.title
        if content.text != snapshot.draft.content:
            content.load_text(snapshot.draft.content)
        title.disabled = not editable
        content.disabled = not editable

        self._main.query_one("#save", Button).disabled = not editable
        self._main.query_one("#delete", Button).disabled = snapshot.mode is not Mode.EDITING

    # -------------------------------------------------------------------------
    # Input handling
    # -------------------------------------------------------------------------

    @on(Input.Changed, "#search")
    def _search_changed(self, event: Input.Changed) -> None:
        if self._search_timer is not None:
            self._search_timer.stop()
            self._search_timer = None
        value = event.value
        if self._search_delay <= 0:
            self.controller.set_query(value)
            return
        self._search_timer = self.set_timer(
            self._search_delay, lambda: self.controller.set_query(value)
        )

    @on(Input.Changed, "#note-title")
    def _title_changed(self, event: Input.Changed) -> None:
        if event.value != self.controller.draft.title:
            self.controller.update_draft(title=event.value)

    @on(TextArea.Changed, "#note-content")
    def _content_changed(self, event: TextArea.Changed) -> None:
        text = event.text_area.text
        if text != self.controller.draft.content:
            self.controller.update_draft(content=text)

    def on_descendant_blur(self, event: events.DescendantBlur) -> None:
        if not self._save_on_blur:
            return
        if event.widget.id in {"note-title", "note-content"}:
            self.controller.autosave()

    @on(ListView.Selected, "#note-list")
    def _note_chosen(self, event: ListView.Selected) -> None:
        if isinstance(event.item, NoteListItem):
            self._select(event.item.note_id)

    @on(Button.Pressed, "#save")
    def _save_pressed(self) -> None:
        self.action_save_note()

    @on(Button.Pressed, "#delete")
    def _delete_pressed(self) -> None:
        self.action_delete_note()

    @on(Button.Pressed, "#new")
    def _new_pressed(self) -> None:
        self.action_new_note()

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    def action_save_note(self) -> None:
        note = self.controller.save()
        if note is not None:
            log_with_source(logger, "tui", "info", "Note saved", note_id=note.id)
            self.notify("Saved", timeout=2)

    def action_new_note(self) -> None:
        self._start_new()

    def action_delete_note(self) -> None:
        note_id = self.controller.selected_id
        if note_id is not None:
            self._delete(note_id)

    def action_reload(self) -> None:
        self.controller.repository.reload()
        self.notify("Reloaded from disk", timeout=2)

    def action_focus_search(self) -> None:
        self.query_one("#search", Input).focus()

    @work(exclusive=True, group="session")
    async def _select(self, note_id: str) -> None:
        if await self.controller.select(note_id):
            log_with_source(logger, "tui", "debug", "Note selected", note_id=note_id)
        else:
            # Put the highlight back on the note still being edited.
            self._list_signature = None
            await self._refresh_view()

    @work(exclusive=True, group="session")
    async def _start_new(self) -> None:
        if await self.controller.start_new():
            self.query_one("#note-title", Input).focus()

    @work(exclusive=True, group="session")
    async def _delete(self, note_id: str) -> None:
        if await self.controller.delete(note_id):
            log_with_source(logger, "tui", "info", "Note deleted", note_id=note_id)
            self.notify("Note deleted", timeout=2)


def run_tui(autosave: bool | None = None) -> None:
    """Build the repository from configuration and run the TUI until quit."""
    from localnotes.core.config import get_app_config
    from localnotes.core.dependencies import build_repository

    editor = get_app_config().editor
    autosave_enabled = editor.autosave.enabled if autosave is None else autosave

    app = NotesTUI(
        build_repository(),
        autosave_seconds=editor.autosave.interval_seconds if autosave_enabled else None,
        save_on_blur=editor.save_on_blur,
        search_debounce_ms=editor.search_debounce_ms,
        preview_length=editor.preview_length,
    )
    app.run()


def main() -> None:
    from localnotes.core.config import validate_project_root
    from localnotes.core.logging import setup_logging

    validate_project_root()
    if "--debug" in sys.argv:
        setup_logging(level="DEBUG", enable_console=False)
    else:
        setup_logging()
    run_tui()


if __name__ == "__main__":
    main()
