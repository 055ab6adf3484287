"""Unit tests for display helpers."""

from datetime import datetime

import pytest

from localnotes.services.display import (
    ELLIPSIS,
    display_title,
    editor_heading,
    editor_subheading,
    format_timestamp,
    list_empty_state,
    preview,
    stats,
)
from localnotes.services.session import Mode
from tests.factories import make_note


class TestDisplayTitle:
    """Tests for display_title."""

    @pytest.mark.parametrize("title", ["", "   ", "\n\t"])
    def test_blank_title_shows_untitled(self, title):
        assert display_title(make_note("1", title=title)) == "Untitled"

    def test_title_is_trimmed_for_display_only(self):
        note = make_note("1", title="  Hello  ")
        assert display_title(note) == "Hello"
        assert note.title == "  Hello  "


class TestPreview:
    """Tests for content previews."""

    def test_short_content_unchanged(self):
        assert preview("hello world") == "hello world"

    def test_whitespace_collapsed(self):
        assert preview("line one\n\n  line   two\t") == "line one line two"

    def test_long_content_truncated_with_ellipsis(self):
        result = preview("x" * 200, max_length=90)
        assert len(result) == 90
        assert result.endswith(ELLIPSIS)

    def test_exact_length_not_truncated(self):
        assert preview("y" * 10, max_length=10) == "y" * 10

    def test_empty(self):
        assert preview("") == ""


class TestFormatTimestamp:
    """Tests for format_timestamp."""

    def test_format(self):
        assert format_timestamp(datetime(2026, 10, 18, 9, 5)) == "Oct 18, 2026 09:05"

    def test_none(self):
        assert format_timestamp(None) == ""


class TestListState:
    """Tests for empty states and stats."""

    def test_no_notes(self):
        title, description = list_empty_state(0, 0)
        assert title == "No notes yet"
        assert "saved locally" in description

    def test_no_matches(self):
        assert list_empty_state(3, 0)[0] == "No matches"

    def test_has_rows(self):
        assert list_empty_state(3, 1) == ("", "")

    def test_stats(self):
        assert stats(3, 1) == "3 total • 1 shown"


class TestEditorHeadings:
    """Tests for editor headings."""

    @pytest.mark.parametrize(
        "mode, expected",
        [(Mode.CREATING, "New Note"), (Mode.EDITING, "Edit Note"), (Mode.EMPTY, "Select a note")],
    )
    def test_heading(self, mode, expected):
        assert editor_heading(mode) == expected

    def test_subheading_for_unsaved_note(self):
        assert editor_subheading(Mode.CREATING, None) == "Not saved yet"

    def test_subheading_for_saved_note(self):
        note = make_note("1", created_at=datetime(2026, 10, 18, 9, 5))
        assert editor_subheading(Mode.EDITING, note) == "Last updated: Oct 18, 2026 09:05"
