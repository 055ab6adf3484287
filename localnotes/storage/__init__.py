# Durable blob stores
from localnotes.storage.base import BlobStore, validate_key
from localnotes.storage.file import FileBlobStore
from localnotes.storage.memory import MemoryBlobStore

__all__ = [
    "BlobStore",
    "FileBlobStore",
    "MemoryBlobStore",
    "validate_key",
]
