"""
Note Schemas.

Pydantic models for the persisted note record and the editor draft,
plus the codec for the serialized collection blob.

Wire format (one JSON array under a single store key):
    [{"id": "...", "title": "...", "content": "...",
      "createdAt": "2026-01-01T09:30:00", "updatedAt": "..."}]
"""

import json
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from localnotes.core.logging import get_logger
from localnotes.core.utils import to_naive_utc

logger = get_logger(__name__)


class Note(BaseModel):
    """A persisted note. Instances are immutable; updates produce copies."""

    id: str = Field(min_length=1, description="Note unique identifier")
    title: str = Field(default="", description="Note title, stored untrimmed")
    content: str = Field(default="", description="Note body")
    created_at: datetime = Field(alias="createdAt", description="Creation timestamp")
    updated_at: datetime = Field(alias="updatedAt", description="Last save timestamp")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator("title", "content", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("created_at", "updated_at")
    @classmethod
    def _naive_utc(cls, value: datetime) -> datetime:
        return to_naive_utc(value)

    @model_validator(mode="before")
    @classmethod
    def _default_updated_at(cls, data: Any) -> Any:
        if isinstance(data, dict):
            has_updated = data.get("updatedAt") is not None or data.get("updated_at") is not None
            if not has_updated:
                created = data.get("createdAt", data.get("created_at"))
                if created is not None:
                    data = {**data, "updatedAt": created}
        return data

    @model_validator(mode="after")
    def _ordered_timestamps(self) -> "Note":
        if self.updated_at < self.created_at:
            # frozen model: bypass __setattr__ during validation
            object.__setattr__(self, "updated_at", self.created_at)
        return self

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r})>"


class NoteDraft(BaseModel):
    """Title/content pair submitted for saving. A missing id means a new note."""

    id: str | None = Field(default=None, description="Existing note id, if any")
    title: str = Field(default="", description="Draft title")
    content: str = Field(default="", description="Draft content")

    model_config = ConfigDict(frozen=True)

    @field_validator("title", "content", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


def encode_notes(notes: Iterable[Note], encoding: str = "utf-8") -> bytes:
    """Serialize the collection in order, using the camelCase wire keys."""
    records = [note.model_dump(mode="json", by_alias=True) for note in notes]
    return json.dumps(records, ensure_ascii=False).encode(encoding, "surrogatepass")


def decode_notes(blob: bytes | None, encoding: str = "utf-8") -> list[Note]:
    """
    Deserialize a stored blob into an ordered, id-unique list of notes.

    Never raises. A missing blob, undecodable bytes, invalid JSON, or a
    top-level value that is not an array all yield an empty list.
    Records that fail validation are skipped; later records repeating an
    id already seen are dropped.

    Args:
        blob: Raw bytes from the store, or None when the key is absent
        encoding: Text encoding of the blob

    Returns:
        Notes in stored order
    """
    if blob is None:
        return []

    try:
        raw = json.loads(blob.decode(encoding, "surrogatepass"))
    except (LookupError, UnicodeDecodeError, ValueError) as e:
        logger.warning("Stored notes are unreadable, starting empty", extra={"error": str(e)})
        return []

    if not isinstance(raw, list):
        logger.warning(
            "Stored notes are not a list, starting empty",
            extra={"found_type": type(raw).__name__},
        )
        return []

    notes: list[Note] = []
    seen: set[str] = set()
    skipped = 0
    for index, record in enumerate(raw):
        try:
            note = Note.model_validate(record)
        except ValidationError as e:
            skipped += 1
            logger.warning(
                "Skipping invalid stored note",
                extra={"index": index, "errors": e.error_count()},
            )
            continue
        if note.id in seen:
            skipped += 1
            logger.warning("Skipping duplicate stored note", extra={"note_id": note.id})
            continue
        seen.add(note.id)
        notes.append(note)

    if skipped:
        logger.info("Recovered stored notes", extra={"kept": len(notes), "skipped": skipped})
    return notes
