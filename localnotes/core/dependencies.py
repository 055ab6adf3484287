"""
Application Wiring.

Builds the store, repository, and session controller from configuration.
Core classes never read configuration themselves; entry points (CLI, TUI)
call these factories once per process.

Usage:
    from localnotes.core.dependencies import build_session

    controller = build_session(confirm=ask_user)
"""

from localnotes.core.config import get_app_config, get_data_dir, get_storage_backend
from localnotes.core.logging import get_logger
from localnotes.repositories.note import NoteRepository
from localnotes.services.session import ConfirmProvider, SessionController, decline_all
from localnotes.storage.base import BlobStore
from localnotes.storage.file import FileBlobStore
from localnotes.storage.memory import MemoryBlobStore

logger = get_logger(__name__)


def build_store() -> BlobStore:
    """Create the blob store selected by storage.yaml / LOCALNOTES_STORAGE_BACKEND."""
    backend = get_storage_backend()
    if backend == "memory":
        logger.info("Using in-memory store, notes will not persist")
        return MemoryBlobStore()
    data_dir = get_data_dir()
    logger.debug("Using file store", extra={"data_dir": str(data_dir)})
    return FileBlobStore(data_dir)


def build_repository(store: BlobStore | None = None) -> NoteRepository:
    """Create and hydrate the note repository."""
    storage = get_app_config().storage
    repository = NoteRepository(
        store if store is not None else build_store(),
        key=storage.key,
        encoding=storage.encoding,
    )
    repository.load()
    return repository


def build_session(
    confirm: ConfirmProvider = decline_all,
    store: BlobStore | None = None,
) -> SessionController:
    """Create a session controller over a freshly loaded repository."""
    return SessionController(build_repository(store), confirm=confirm)
