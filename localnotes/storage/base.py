"""
Blob Store Interface.

The durable store is a plain key-value blob store with no knowledge of
notes: one key maps to one opaque byte string.

Usage:
    from localnotes.storage.base import BlobStore

    def persist(store: BlobStore, data: bytes) -> None:
        if not store.write("notes.app.v1", data):
            ...  # best effort: the in-memory state stays authoritative
"""

import re
from typing import Protocol, runtime_checkable

from localnotes.core.exceptions import StorageError

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9._-]+$")


@runtime_checkable
class BlobStore(Protocol):
    """Key-value blob store used to persist the note collection."""

    def read(self, key: str) -> bytes | None:
        """Return the blob stored under key, or None if absent."""
        ...

    def write(self, key: str, data: bytes) -> bool:
        """Store data under key. Returns False if the write failed."""
        ...


def validate_key(key: str) -> str:
    """
    Check that a key is safe to use as a file name.

    Raises:
        StorageError: If the key is empty or contains other characters
            than letters, digits, '.', '_' and '-'
    """
    if not _KEY_PATTERN.fullmatch(key) or key in {".", ".."}:
        raise StorageError(f"Invalid storage key: {key!r}")
    return key
