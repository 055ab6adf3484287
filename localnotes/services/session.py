"""
Session Controller.

Owns the editing-session state on top of a NoteRepository: the selected
note, the mode (empty / creating / editing), the editor draft and its
dirty flag, and the search query. All mutations from the presentation
layer go through this class.

Lossy transitions (switching notes or starting a new one with unsaved
changes) and deletes pass through a confirmation gate. The confirmation
provider may answer with a bool or with an awaitable resolving to a
bool; the gated call does not take effect until the answer arrives, and
re-checks its preconditions afterwards.

Usage:
    controller = SessionController(repo, confirm=ask_user)
    await controller.start_new()
    controller.update_draft(title="Hi", content="there")
    note = controller.save()
    await controller.delete(note.id)
"""

import inspect
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from enum import Enum

from localnotes.core.logging import get_logger
from localnotes.repositories.note import NoteRepository
from localnotes.schemas.note import Note, NoteDraft
from localnotes.services.query import filter_notes

logger = get_logger(__name__)


class Mode(str, Enum):
    """Editor mode."""

    EMPTY = "empty"
    CREATING = "creating"
    EDITING = "editing"


class ConfirmKind(str, Enum):
    """Why the controller is asking for confirmation."""

    DISCARD_ON_SELECT = "discard_on_select"
    DISCARD_ON_NEW = "discard_on_new"
    DELETE = "delete"


PROMPTS = {
    ConfirmKind.DISCARD_ON_SELECT: "You have unsaved changes. Switch notes anyway?",
    ConfirmKind.DISCARD_ON_NEW: "You have unsaved changes. Discard them and create a new note?",
    ConfirmKind.DELETE: "Delete this note? This cannot be undone.",
}


@dataclass(frozen=True)
class ConfirmRequest:
    """A yes/no question put to the presentation layer."""

    kind: ConfirmKind
    message: str
    note_id: str | None = None


ConfirmProvider = Callable[[ConfirmRequest], bool | Awaitable[bool]]


def decline_all(request: ConfirmRequest) -> bool:
    """Confirmation provider that refuses every lossy or destructive action."""
    return False


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of the session handed to observers."""

    notes: tuple[Note, ...]
    filtered_notes: tuple[Note, ...]
    selected_id: str | None
    mode: Mode
    dirty: bool
    query: str
    draft: NoteDraft


SessionListener = Callable[[SessionSnapshot], None]


class SessionController:
    """
    Single writer for the note collection during a session.

    Keeps its selection valid whenever the repository's collection
    changes, including changes made outside this controller (for
    example a reload): an empty collection forces EMPTY mode, and a
    missing or stale selection moves to the first note.
    """

    def __init__(
        self,
        repository: NoteRepository,
        confirm: ConfirmProvider = decline_all,
    ) -> None:
        self._repo = repository
        self._confirm_provider = confirm
        self._listeners: list[SessionListener] = []
        self._mutating = False

        self._selected_id: str | None = None
        self._mode = Mode.EMPTY
        self._query = ""
        self._title = ""
        self._content = ""
        self._dirty = False

        self._repo.subscribe(self._on_collection_changed)
        self._reconcile(self._repo.notes, notify=False)

    # -------------------------------------------------------------------------
    # Read-only state
    # -------------------------------------------------------------------------

    @property
    def repository(self) -> NoteRepository:
        return self._repo

    @property
    def notes(self) -> tuple[Note, ...]:
        """Full collection, in collection order."""
        return self._repo.notes

    def get_notes(self) -> tuple[Note, ...]:
        return self._repo.notes

    @property
    def filtered_notes(self) -> tuple[Note, ...]:
        """Collection filtered by the current search query."""
        return filter_notes(self._repo.notes, self._query)

    @property
    def query(self) -> str:
        return self._query

    @property
    def selected_id(self) -> str | None:
        return self._selected_id

    @property
    def selected_note(self) -> Note | None:
        if self._mode is not Mode.EDITING:
            return None
        return self._repo.get_by_id_or_none(self._selected_id)

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def draft(self) -> NoteDraft:
        """The editor contents, tagged with the selected id when editing."""
        note_id = self._selected_id if self._mode is Mode.EDITING else None
        return NoteDraft(id=note_id, title=self._title, content=self._content)

    def snapshot(self) -> SessionSnapshot:
        notes = self._repo.notes
        return SessionSnapshot(
            notes=notes,
            filtered_notes=filter_notes(notes, self._query),
            selected_id=self._selected_id,
            mode=self._mode,
            dirty=self._dirty,
            query=self._query,
            draft=self.draft,
        )

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """
        Register a callback receiving a SessionSnapshot after every change.

        Returns:
            A function that unregisters the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -------------------------------------------------------------------------
    # Draft and query
    # -------------------------------------------------------------------------

    def set_query(self, text: str | None) -> None:
        """Set the raw search text. Normalization happens in the query view."""
        text = text or ""
        if text == self._query:
            return
        self._query = text
        self._notify()

    def update_draft(self, title: str | None = None, content: str | None = None) -> bool:
        """
        Record editor input and recompute the dirty flag.

        Ignored in EMPTY mode, where the editor has nothing to edit.

        Returns:
            True if the draft was updated
        """
        if self._mode is Mode.EMPTY:
            return False
        if title is not None:
            self._title = title
        if content is not None:
            self._content = content
        self._dirty = (self._title, self._content) != self._baseline()
        self._notify()
        return True

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    async def select(self, note_id: str) -> bool:
        """
        Select a note for editing.

        With unsaved changes the user is asked first; declining leaves the
        session untouched. Unknown ids are ignored.

        Returns:
            True if the note is now selected
        """
        if not self._repo.exists(note_id):
            logger.debug("Select ignored, unknown note", extra={"note_id": note_id})
            return False

        if self._dirty:
            if not await self._confirm(ConfirmKind.DISCARD_ON_SELECT, note_id):
                return False
            # The collection may have changed while waiting for the answer.
            if not self._repo.exists(note_id):
                return False

        self._enter_editing(self._repo.get_by_id(note_id))
        logger.debug("Note selected", extra={"note_id": note_id})
        return True

    async def start_new(self) -> bool:
        """
        Switch to CREATING with an empty draft and no selection.

        Returns:
            True unless the user declined to discard unsaved changes
        """
        if self._dirty and not await self._confirm(ConfirmKind.DISCARD_ON_NEW, None):
            return False

        self._selected_id = None
        self._mode = Mode.CREATING
        self._title = ""
        self._content = ""
        self._dirty = False
        self._notify()
        return True

    def save(self, draft: NoteDraft | None = None) -> Note | None:
        """
        Persist a draft and select the resulting note.

        Does nothing in EMPTY mode. Without an explicit draft the current
        editor draft is saved (as a new note when CREATING).

        Returns:
            The saved note, or None if nothing was saved
        """
        if self._mode is Mode.EMPTY:
            logger.debug("Save ignored in empty mode")
            return None

        if draft is None:
            draft = self.draft

        self._mutating = True
        try:
            _, note = self._repo.upsert(draft)
        finally:
            self._mutating = False

        self._enter_editing(note)
        return note

    def autosave(self) -> Note | None:
        """Save only if there are unsaved changes. Used by timers and blur handlers."""
        if not self._dirty or self._mode is Mode.EMPTY:
            return None
        note = self.save()
        if note is not None:
            logger.info("Autosaved note", extra={"note_id": note.id})
        return note

    async def delete(self, note_id: str) -> bool:
        """
        Delete the selected note after confirmation.

        Only the note currently selected in EDITING mode can be deleted.
        Afterwards the first remaining note is selected, or the session
        becomes EMPTY.

        Returns:
            True if the note was deleted
        """
        if not self._can_delete(note_id):
            logger.debug("Delete ignored", extra={"note_id": note_id, "mode": self._mode.value})
            return False

        if not await self._confirm(ConfirmKind.DELETE, note_id):
            return False
        if not self._can_delete(note_id):
            return False

        self._mutating = True
        try:
            remaining = self._repo.remove(note_id)
        finally:
            self._mutating = False

        if remaining:
            self._enter_editing(remaining[0])
        else:
            self._enter_empty()
        return True

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _can_delete(self, note_id: str) -> bool:
        return (
            self._mode is Mode.EDITING
            and note_id == self._selected_id
            and self._repo.exists(note_id)
        )

    def _baseline(self) -> tuple[str, str]:
        note = self.selected_note
        if note is None:
            return "", ""
        return note.title, note.content

    def _enter_editing(self, note: Note) -> None:
        self._selected_id = note.id
        self._mode = Mode.EDITING
        self._title = note.title
        self._content = note.content
        self._dirty = False
        self._notify()

    def _enter_empty(self) -> None:
        self._selected_id = None
        self._mode = Mode.EMPTY
        self._title = ""
        self._content = ""
        self._dirty = False
        self._notify()

    def _on_collection_changed(self, notes: tuple[Note, ...]) -> None:
        if self._mutating:
            return
        self._reconcile(notes)

    def _reconcile(self, notes: Sequence[Note], notify: bool = True) -> None:
        # CREATING has no selection, so an outside change moves it to the
        # first note like any other missing selection.
        if not notes:
            self._selected_id = None
            self._mode = Mode.EMPTY
            self._title = ""
            self._content = ""
            self._dirty = False
        elif self._selected_id is None or not self._repo.exists(self._selected_id):
            first = notes[0]
            self._selected_id = first.id
            self._mode = Mode.EDITING
            self._title = first.title
            self._content = first.content
            self._dirty = False
        elif not self._dirty:
            # Pick up outside edits to the selected note.
            current = self._repo.get_by_id(self._selected_id)
            self._title = current.title
            self._content = current.content
        else:
            self._dirty = (self._title, self._content) != self._baseline()

        if notify:
            self._notify()

    async def _confirm(self, kind: ConfirmKind, note_id: str | None) -> bool:
        request = ConfirmRequest(kind=kind, message=PROMPTS[kind], note_id=note_id)
        decision = self._confirm_provider(request)
        if inspect.isawaitable(decision):
            decision = await decision
        if not decision:
            logger.debug("Confirmation declined", extra={"kind": kind.value, "note_id": note_id})
        return bool(decision)

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)
