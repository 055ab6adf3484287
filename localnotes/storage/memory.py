"""
In-Memory Blob Store.

Non-durable store for tests and throwaway sessions. Contents live only
as long as the process.
"""

from localnotes.storage.base import validate_key


class MemoryBlobStore:
    """Dict-backed blob store."""

    def __init__(self, initial: dict[str, bytes] | None = None) -> None:
        self._blobs: dict[str, bytes] = dict(initial or {})
        self.fail_writes = False
        self.write_count = 0

    def read(self, key: str) -> bytes | None:
        return self._blobs.get(validate_key(key))

    def write(self, key: str, data: bytes) -> bool:
        validate_key(key)
        if self.fail_writes:
            return False
        self._blobs[key] = bytes(data)
        self.write_count += 1
        return True
