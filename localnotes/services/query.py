"""
Query View.

Pure functions deriving the search-filtered view of a note collection.
Matching is a case-insensitive substring test on title or content after
the query is trimmed and lowercased. Input order is preserved.
"""

from collections.abc import Sequence

from localnotes.schemas.note import Note


def normalize_query(query: str | None) -> str:
    """Trim surrounding whitespace and lowercase. None becomes ''."""
    return (query or "").strip().lower()


def matches_query(note: Note, normalized: str) -> bool:
    """
    Test one note against an already-normalized query.

    An empty query matches every note.
    """
    if not normalized:
        return True
    return normalized in note.title.lower() or normalized in note.content.lower()


def filter_notes(notes: Sequence[Note], query: str | None) -> tuple[Note, ...]:
    """
    Return the notes matching query, in their original relative order.

    Args:
        notes: Collection to filter (not modified)
        query: Raw search text; normalized here

    Returns:
        Order-preserving subsequence of notes
    """
    normalized = normalize_query(query)
    if not normalized:
        return tuple(notes)
    return tuple(note for note in notes if matches_query(note, normalized))
