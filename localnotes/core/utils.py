"""
Core Utilities.

Shared utility functions used across the application.
All modules should import utilities from this module.
"""

import codecs
from datetime import datetime, timezone
from uuid import uuid4


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-naive datetime.

    All datetime values in the application are timezone-naive and
    assumed to be UTC. Persisted timestamps are normalized to this
    form when they are read back.

    Returns:
        Current UTC time with tzinfo stripped
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values pass through."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def new_id() -> str:
    """Return a fresh random identifier (32 hex characters)."""
    return uuid4().hex


def unicode_codec(encoding: str) -> str:
    """
    Return the canonical name of a Unicode text encoding.

    Notes may hold any character, so only the UTF family can store them.

    Raises:
        ValueError: If the codec is unknown or is not a UTF encoding
    """
    try:
        name = codecs.lookup(encoding).name
    except LookupError as e:
        raise ValueError(f"Unknown text encoding: {encoding}") from e
    if not name.startswith("utf"):
        raise ValueError(f"Encoding cannot store every character: {encoding}")
    return name
