# Pydantic schemas package
from localnotes.schemas.note import (
    Note,
    NoteDraft,
    decode_notes,
    encode_notes,
)

__all__ = [
    "Note",
    "NoteDraft",
    "decode_notes",
    "encode_notes",
]
