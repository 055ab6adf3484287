"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

Notes are kept in an in-memory blob store by default. Time and ids are
injected so that timestamps and generated ids are predictable:

    def test_something(repository, clock):
        _, note = repository.upsert(NoteDraft(title="a"))
        assert note.id == "note-1"
        assert note.created_at == clock.now
"""

from datetime import datetime

import pytest

from localnotes.core.config import get_app_config, get_settings
from localnotes.repositories.note import NoteRepository
from localnotes.services.session import SessionController
from localnotes.storage.memory import MemoryBlobStore
from tests.factories import FakeClock, ScriptedConfirm, SequentialIds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 1, 1, 12, 0))


@pytest.fixture
def ids() -> SequentialIds:
    return SequentialIds()


@pytest.fixture
def store() -> MemoryBlobStore:
    return MemoryBlobStore()


@pytest.fixture
def repository(store, clock, ids) -> NoteRepository:
    """Loaded repository over an empty in-memory store."""
    repo = NoteRepository(store, clock=clock, id_factory=ids)
    repo.load()
    return repo


@pytest.fixture
def confirm() -> ScriptedConfirm:
    """Provider that accepts every confirmation. Set .answer to change."""
    return ScriptedConfirm(answer=True)


@pytest.fixture
def controller(repository, confirm) -> SessionController:
    return SessionController(repository, confirm=confirm)


@pytest.fixture
def clear_config_cache():
    """Clear lru_cache between tests so each test gets a fresh load."""
    get_settings.cache_clear()
    get_app_config.cache_clear()
    yield
    get_settings.cache_clear()
    get_app_config.cache_clear()
