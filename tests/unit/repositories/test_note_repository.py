"""
Unit Tests for the Note Repository.

Runs against MemoryBlobStore with an injected clock and id factory.
Property tests exercise random operation sequences against the
collection invariants.
"""

import json
from datetime import datetime

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from localnotes.core.exceptions import (
    NotFoundError,
    StorageError,
    StorageReadError,
    ValidationError,
)
from localnotes.repositories.note import DEFAULT_KEY, NoteRepository
from localnotes.schemas.note import NoteDraft, decode_notes
from localnotes.storage.memory import MemoryBlobStore
from tests.factories import FakeClock, SequentialIds


class BrokenReadStore(MemoryBlobStore):
    """Store whose reads always fail."""

    def read(self, key: str) -> bytes | None:
        raise StorageReadError("unreadable")


def _stored(store: MemoryBlobStore, key: str = DEFAULT_KEY):
    return decode_notes(store.read(key))


class TestLoad:
    """Tests for hydrating from the store."""

    def test_empty_store(self, repository):
        assert repository.notes == ()
        assert repository.count() == 0

    def test_loads_in_stored_order(self, seeded_repository):
        assert [n.id for n in seeded_repository.notes] == ["a", "b"]

    def test_corrupt_blob_loads_empty(self, clock, ids):
        repo = NoteRepository(MemoryBlobStore({DEFAULT_KEY: b"{oops"}), clock=clock, id_factory=ids)
        assert repo.load() == ()

    def test_read_failure_loads_empty(self):
        repo = NoteRepository(BrokenReadStore())
        assert repo.load() == ()

    def test_load_does_not_notify(self, seeded_store):
        repo = NoteRepository(seeded_store)
        calls = []
        repo.subscribe(calls.append)
        repo.load()
        assert calls == []

    def test_invalid_key_rejected(self):
        with pytest.raises(StorageError):
            NoteRepository(MemoryBlobStore(), key="../notes")


class TestLookup:
    """Tests for id lookups."""

    def test_get_by_id(self, seeded_repository):
        assert seeded_repository.get_by_id("b").title == "Ideas"

    def test_get_by_id_missing_raises(self, seeded_repository):
        with pytest.raises(NotFoundError, match="zzz"):
            seeded_repository.get_by_id("zzz")

    def test_get_by_id_or_none(self, seeded_repository):
        assert seeded_repository.get_by_id_or_none("zzz") is None
        assert seeded_repository.get_by_id_or_none(None) is None

    def test_exists(self, seeded_repository):
        assert seeded_repository.exists("a")
        assert not seeded_repository.exists("zzz")


class TestUpsertCreate:
    """Tests for creating notes."""

    def test_appends_new_note(self, seeded_repository, clock):
        notes, note = seeded_repository.upsert(NoteDraft(title="New", content="body"))

        assert note.id == "note-1"
        assert [n.id for n in notes] == ["a", "b", "note-1"]
        assert note.created_at == note.updated_at == clock.now

    def test_persists_before_returning(self, repository, store):
        _, note = repository.upsert(NoteDraft(title="Hi", content="there"))
        assert _stored(store) == [note]

    def test_unknown_draft_id_creates(self, repository):
        _, note = repository.upsert(NoteDraft(id="ghost", title="x"))
        assert note.id == "note-1"
        assert not repository.exists("ghost")

    def test_empty_draft_is_saved(self, repository):
        _, note = repository.upsert(NoteDraft())
        assert note.title == ""
        assert repository.count() == 1

    def test_colliding_generated_id_is_redrawn(self, seeded_store, clock):
        issued = iter(["a", "b", "fresh"])
        repo = NoteRepository(seeded_store, clock=clock, id_factory=lambda: next(issued))
        repo.load()

        _, note = repo.upsert(NoteDraft(title="x"))
        assert note.id == "fresh"


class TestUpsertUpdate:
    """Tests for updating notes."""

    def test_replaces_in_place(self, seeded_repository, clock):
        clock.advance(hours=1)
        notes, note = seeded_repository.upsert(NoteDraft(id="a", title="Shopping", content="bread"))

        assert [n.id for n in notes] == ["a", "b"]
        assert note.title == "Shopping"
        assert note.content == "bread"
        assert note.created_at == datetime(2026, 1, 1, 9, 0)
        assert note.updated_at == clock.now

    def test_updated_at_never_precedes_created_at(self, seeded_store):
        early = FakeClock(datetime(2000, 1, 1))
        repo = NoteRepository(seeded_store, clock=early)
        repo.load()

        _, note = repo.upsert(NoteDraft(id="a", title="back in time"))
        assert note.updated_at == note.created_at

    def test_other_notes_unchanged(self, seeded_repository):
        before = seeded_repository.get_by_id("b")
        seeded_repository.upsert(NoteDraft(id="a", title="x"))
        assert seeded_repository.get_by_id("b") == before

    def test_write_failure_keeps_memory_state(self, seeded_repository, seeded_store):
        seeded_store.fail_writes = True
        seeded_repository.upsert(NoteDraft(id="a", title="not persisted"))

        assert seeded_repository.get_by_id("a").title == "not persisted"
        assert _stored(seeded_store)[0].title == "Groceries"


class TestRemove:
    """Tests for removing notes."""

    def test_removes_and_persists(self, seeded_repository, seeded_store):
        remaining = seeded_repository.remove("a")
        assert [n.id for n in remaining] == ["b"]
        assert [n.id for n in _stored(seeded_store)] == ["b"]

    def test_absent_id_is_noop(self, seeded_repository, seeded_store):
        before = seeded_store.write_count
        calls = []
        seeded_repository.subscribe(calls.append)

        remaining = seeded_repository.remove("zzz")

        assert [n.id for n in remaining] == ["a", "b"]
        assert seeded_store.write_count == before
        assert calls == []

    def test_second_remove_changes_nothing(self, seeded_repository, seeded_store):
        before = seeded_store.write_count

        once = seeded_repository.remove("a")
        blob = seeded_store.read(DEFAULT_KEY)
        twice = seeded_repository.remove("a")

        assert once == twice
        assert [n.id for n in twice] == ["b"]
        assert seeded_store.read(DEFAULT_KEY) == blob
        assert seeded_store.write_count == before + 1


class TestEncoding:
    """Tests for the blob text encoding."""

    def test_non_unicode_encoding_rejected(self):
        with pytest.raises(ValidationError):
            NoteRepository(MemoryBlobStore(), encoding="latin-1")

    def test_unknown_encoding_rejected(self):
        with pytest.raises(ValidationError):
            NoteRepository(MemoryBlobStore(), encoding="no-such-codec")

    def test_any_character_is_persisted(self, clock, ids):
        store = MemoryBlobStore()
        repo = NoteRepository(store, encoding="utf-16", clock=clock, id_factory=ids)
        calls = []
        repo.subscribe(calls.append)

        _, note = repo.upsert(NoteDraft(title="snowman \u2603"))

        assert repo.count() == 1
        assert len(calls) == 1
        assert decode_notes(store.read(DEFAULT_KEY), "utf-16") == [note]


class TestReloadAndSubscribe:
    """Tests for change notification."""

    def test_listener_receives_new_collection(self, repository):
        calls = []
        repository.subscribe(calls.append)
        notes, _ = repository.upsert(NoteDraft(title="x"))
        assert calls == [notes]

    def test_unsubscribe(self, repository):
        calls = []
        unsubscribe = repository.subscribe(calls.append)
        unsubscribe()
        unsubscribe()
        repository.upsert(NoteDraft(title="x"))
        assert calls == []

    def test_reload_picks_up_outside_changes(self, seeded_repository, seeded_store):
        records = json.loads(seeded_store.read(DEFAULT_KEY))
        seeded_store.write(DEFAULT_KEY, json.dumps(records[1:]).encode())

        calls = []
        seeded_repository.subscribe(calls.append)
        notes = seeded_repository.reload()

        assert [n.id for n in notes] == ["b"]
        assert calls == [notes]


# =============================================================================
# Properties
# =============================================================================

_text = st.text(max_size=20)
_operations = st.lists(
    st.one_of(
        st.tuples(st.just("create"), _text, _text),
        st.tuples(st.just("update"), st.integers(min_value=0, max_value=9), _text),
        st.tuples(st.just("remove"), st.integers(min_value=0, max_value=9), st.none()),
        st.tuples(st.just("remove_missing"), st.none(), st.none()),
    ),
    max_size=25,
)


class TestCollectionProperties:
    """Invariants that hold after any sequence of operations."""

    @settings(max_examples=75, deadline=None)
    @given(operations=_operations)
    def test_invariants_hold(self, operations):
        clock = FakeClock(datetime(2026, 1, 1))
        store = MemoryBlobStore()
        repo = NoteRepository(store, clock=clock, id_factory=SequentialIds())
        repo.load()

        for op, first, second in operations:
            clock.advance(seconds=1)
            before = repo.count()
            if op == "create":
                repo.upsert(NoteDraft(title=first, content=second))
                assert repo.count() == before + 1
            elif op == "update" and repo.notes:
                target = repo.notes[first % before]
                position = repo.notes.index(target)
                repo.upsert(NoteDraft(id=target.id, title=second, content=target.content))
                assert repo.count() == before
                assert repo.notes[position].id == target.id
                assert repo.notes[position].created_at == target.created_at
            elif op == "remove" and repo.notes:
                repo.remove(repo.notes[first % before].id)
                assert repo.count() == before - 1
            elif op == "remove_missing":
                repo.remove("missing")
                assert repo.count() == before

            ids = [n.id for n in repo.notes]
            assert len(ids) == len(set(ids))
            assert all(n.created_at <= n.updated_at for n in repo.notes)
            assert decode_notes(store.read(DEFAULT_KEY)) == list(repo.notes)
