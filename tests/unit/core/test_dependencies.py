"""
Unit Tests for Application Wiring.

Factories read real configuration; LOCALNOTES_* variables point the data
directory at tmp_path so the project's data/ directory is never touched.
"""

import pytest

from localnotes.core.dependencies import build_repository, build_session, build_store
from localnotes.repositories.note import NoteRepository
from localnotes.schemas.note import NoteDraft
from localnotes.services.session import Mode, SessionController
from localnotes.storage.file import FileBlobStore
from localnotes.storage.memory import MemoryBlobStore


@pytest.fixture(autouse=True)
def _isolated_data_dir(tmp_path, monkeypatch, clear_config_cache):
    monkeypatch.setenv("LOCALNOTES_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("LOCALNOTES_STORAGE_BACKEND", raising=False)


class TestBuildStore:
    """Tests for backend selection."""

    def test_file_backend_uses_data_dir(self, tmp_path):
        store = build_store()
        assert isinstance(store, FileBlobStore)
        assert store.directory == tmp_path

    def test_memory_backend_override(self, monkeypatch):
        monkeypatch.setenv("LOCALNOTES_STORAGE_BACKEND", "memory")
        assert isinstance(build_store(), MemoryBlobStore)


class TestBuildRepository:
    """Tests for repository construction."""

    def test_uses_configured_key(self):
        repo = build_repository(MemoryBlobStore())
        assert isinstance(repo, NoteRepository)
        assert repo.key == "notes.app.v1"
        assert repo.encoding == "utf-8"

    def test_loads_existing_notes(self, tmp_path):
        first = build_repository()
        first.upsert(NoteDraft(title="Persisted"))

        second = build_repository()
        assert [n.title for n in second.notes] == ["Persisted"]
        assert (tmp_path / "notes.app.v1.json").exists()


class TestBuildSession:
    """Tests for session construction."""

    def test_empty_store_starts_empty(self):
        controller = build_session(store=MemoryBlobStore())
        assert isinstance(controller, SessionController)
        assert controller.mode is Mode.EMPTY

    def test_existing_notes_select_first(self):
        build_repository().upsert(NoteDraft(title="First"))
        controller = build_session()
        assert controller.mode is Mode.EDITING
        assert controller.selected_note.title == "First"
