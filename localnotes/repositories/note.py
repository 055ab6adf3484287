"""
Note Repository.

Owns the canonical in-memory note collection and keeps the durable
store in step with it. Every mutation replaces the collection, writes
the full serialized collection to the store, then notifies listeners,
all before returning to the caller.

Single-writer contract: one repository instance per process, mutated
from one call site at a time. No locking is done.
"""

from collections.abc import Callable
from datetime import datetime

from localnotes.core.exceptions import NotFoundError, StorageError, ValidationError
from localnotes.core.logging import get_logger
from localnotes.core.utils import new_id, unicode_codec, utc_now
from localnotes.schemas.note import Note, NoteDraft, decode_notes, encode_notes
from localnotes.storage.base import BlobStore, validate_key

logger = get_logger(__name__)

DEFAULT_KEY = "notes.app.v1"

CollectionListener = Callable[[tuple[Note, ...]], None]


class NoteRepository:
    """
    Repository for the note collection.

    Collaborators are injected so tests can control time and ids:

        repo = NoteRepository(MemoryBlobStore(), clock=lambda: fixed_time)
        repo.load()
        notes, note = repo.upsert(NoteDraft(title="Hi", content="there"))
    """

    def __init__(
        self,
        store: BlobStore,
        key: str = DEFAULT_KEY,
        encoding: str = "utf-8",
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = new_id,
    ) -> None:
        self.store = store
        self.key = validate_key(key)
        try:
            self.encoding = unicode_codec(encoding)
        except ValueError as e:
            raise ValidationError(str(e), details={"encoding": encoding}) from e
        self._clock = clock
        self._id_factory = id_factory
        self._notes: tuple[Note, ...] = ()
        self._listeners: list[CollectionListener] = []

    @property
    def notes(self) -> tuple[Note, ...]:
        """Current collection snapshot, in collection order."""
        return self._notes

    def count(self) -> int:
        """Number of notes in the collection."""
        return len(self._notes)

    def load(self) -> tuple[Note, ...]:
        """
        Hydrate the collection from the store.

        Missing or corrupt data yields an empty collection; nothing is
        raised to the caller. Listeners are not notified.

        Returns:
            The loaded collection
        """
        self._notes = self._read_store()
        logger.info("Notes loaded", extra={"count": len(self._notes), "key": self.key})
        return self._notes

    def reload(self) -> tuple[Note, ...]:
        """
        Re-read the store and notify listeners of the new collection.

        Use when the blob may have been changed outside this session.
        """
        self._notes = self._read_store()
        logger.info("Notes reloaded", extra={"count": len(self._notes)})
        self._notify()
        return self._notes

    def get_by_id_or_none(self, note_id: str | None) -> Note | None:
        """Get a note by ID, returning None if not found."""
        if note_id is None:
            return None
        for note in self._notes:
            if note.id == note_id:
                return note
        return None

    def get_by_id(self, note_id: str) -> Note:
        """
        Get a note by ID.

        Raises:
            NotFoundError: If no note has this id
        """
        note = self.get_by_id_or_none(note_id)
        if note is None:
            raise NotFoundError(f"Note not found: {note_id}")
        return note

    def exists(self, note_id: str | None) -> bool:
        """Check if a note with this id is in the collection."""
        return self.get_by_id_or_none(note_id) is not None

    def upsert(self, draft: NoteDraft) -> tuple[tuple[Note, ...], Note]:
        """
        Create or update a note from a draft.

        An unknown or missing draft id creates a new note appended to the
        end of the collection. A known id replaces that note's title and
        content in place, keeping its position and created_at.

        Args:
            draft: Title/content with an optional existing id

        Returns:
            Tuple of (updated collection, resulting note)
        """
        now = self._clock()
        existing = self.get_by_id_or_none(draft.id)

        if existing is None:
            note = Note(
                id=self._allocate_id(),
                title=draft.title,
                content=draft.content,
                created_at=now,
                updated_at=now,
            )
            notes = self._notes + (note,)
            operation = "create"
        else:
            note = existing.model_copy(
                update={
                    "title": draft.title,
                    "content": draft.content,
                    "updated_at": max(now, existing.created_at),
                }
            )
            notes = tuple(note if n.id == existing.id else n for n in self._notes)
            operation = "update"

        self._commit(notes)
        logger.info("Note saved", extra={"operation": operation, "note_id": note.id})
        return self._notes, note

    def remove(self, note_id: str) -> tuple[Note, ...]:
        """
        Remove a note by id.

        Removing an id that is not present is a no-op: nothing is written
        and listeners are not notified.

        Returns:
            The remaining collection
        """
        if not self.exists(note_id):
            logger.debug("Remove skipped, note absent", extra={"note_id": note_id})
            return self._notes

        self._commit(tuple(n for n in self._notes if n.id != note_id))
        logger.info("Note removed", extra={"note_id": note_id})
        return self._notes

    def subscribe(self, listener: CollectionListener) -> Callable[[], None]:
        """
        Register a callback invoked with the new collection after each change.

        Returns:
            A function that unregisters the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _allocate_id(self) -> str:
        taken = {n.id for n in self._notes}
        note_id = self._id_factory()
        while note_id in taken:
            logger.warning("Generated id already in use, drawing again", extra={"note_id": note_id})
            note_id = self._id_factory()
        return note_id

    def _read_store(self) -> tuple[Note, ...]:
        try:
            blob = self.store.read(self.key)
        except StorageError as e:
            logger.warning("Store read failed, starting empty", extra={"error": e.message})
            return ()
        return tuple(decode_notes(blob, self.encoding))

    def _commit(self, notes: tuple[Note, ...]) -> None:
        data = encode_notes(notes, self.encoding)
        self._notes = notes
        if not self.store.write(self.key, data):
            logger.warning(
                "Persisting notes failed, keeping in-memory state",
                extra={"key": self.key, "count": len(notes)},
            )
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._notes)
