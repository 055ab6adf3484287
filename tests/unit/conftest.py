"""
Unit Test Fixtures.

Unit tests run against in-memory stores or tmp_path directories and
never touch the project's data directory.
"""

import pytest

from localnotes.repositories.note import DEFAULT_KEY, NoteRepository
from localnotes.schemas.note import encode_notes
from localnotes.services.session import SessionController
from localnotes.storage.memory import MemoryBlobStore
from tests.factories import make_note


@pytest.fixture
def seeded_store() -> MemoryBlobStore:
    """Store holding two notes: 'Groceries' (id a) then 'Ideas' (id b)."""
    blob = encode_notes([
        make_note("a", title="Groceries", content="milk, eggs"),
        make_note("b", title="Ideas", content="write a novel"),
    ])
    return MemoryBlobStore({DEFAULT_KEY: blob})


@pytest.fixture
def seeded_repository(seeded_store, clock, ids) -> NoteRepository:
    repo = NoteRepository(seeded_store, clock=clock, id_factory=ids)
    repo.load()
    return repo


@pytest.fixture
def seeded_controller(seeded_repository, confirm) -> SessionController:
    return SessionController(seeded_repository, confirm=confirm)
