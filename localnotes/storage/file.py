"""
File Blob Store.

Stores each key as <directory>/<key>.json. Writes go to a temporary file
in the same directory which is then renamed over the target, so readers
only ever see the previous blob or the complete new one.
"""

import os
import tempfile
from pathlib import Path

from localnotes.core.exceptions import StorageReadError
from localnotes.core.logging import get_logger
from localnotes.storage.base import validate_key

logger = get_logger(__name__)


class FileBlobStore:
    """Directory-backed blob store with atomic replace on write."""

    suffix = ".json"

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        """Return the file path backing a key."""
        return self.directory / f"{validate_key(key)}{self.suffix}"

    def read(self, key: str) -> bytes | None:
        """
        Read the blob for key.

        Returns:
            File contents, or None if the file does not exist

        Raises:
            StorageReadError: If the file exists but cannot be read
        """
        path = self.path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageReadError(f"Cannot read {path}: {e}") from e

    def write(self, key: str, data: bytes) -> bool:
        """
        Atomically replace the blob for key.

        Returns:
            True on success, False if any filesystem step failed
        """
        path = self.path_for(key)
        tmp_path: str | None = None
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=str(self.directory),
                prefix=".tmp_",
                suffix=self.suffix,
            )
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, path)
            tmp_path = None
        except OSError as e:
            logger.warning(
                "Blob write failed",
                extra={"path": str(path), "error": str(e), "source": "storage"},
            )
            return False
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                try:
                    os.unlink(tmp_path)
                except OSError:
                    logger.debug("Could not remove temp file", extra={"path": tmp_path})

        logger.debug("Blob written", extra={"path": str(path), "bytes": len(data)})
        return True
