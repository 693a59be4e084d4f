"""Tests for daybook.journal.presentation."""

from datetime import datetime

from daybook.journal.models import Entry
from daybook.journal.presentation import (
    ADD_HEADING,
    EDIT_HEADING,
    LOADING_MESSAGE,
    editor_heading,
    format_date,
    format_entry_card,
    format_entry_list,
    last_change_label,
    render_editor,
)
from daybook.journal.reconciler import DraftReconciler


class TestFormatting:
    def test_format_date(self):
        assert format_date(datetime(2026, 3, 5, 9, 7)) == "Mar 05, 2026"
        assert format_date(None) == ""

    def test_last_change_label(self):
        assert last_change_label(datetime(2026, 3, 5, 9, 7)) == "last change at 09:07"
        assert last_change_label(None) == ""

    def test_entry_card(self):
        entry = Entry(id=3, title="Walk", content="By the river.", timestamp=datetime(2026, 3, 5))
        assert format_entry_card(entry) == "#3 Walk\nMar 05, 2026\nBy the river."

    def test_entry_card_without_content(self):
        entry = Entry(id=4, title="", timestamp=datetime(2026, 3, 5))
        assert format_entry_card(entry) == "#4\nMar 05, 2026"

    def test_entry_list(self):
        assert format_entry_list([]) == "No entries yet."
        entries = [Entry(id=2, title="b"), Entry(id=1, title="a")]
        assert format_entry_list(entries).split("\n\n")[0].startswith("#2 b")

    def test_editor_heading(self):
        assert editor_heading(Entry(id=1, is_draft=True)) == ADD_HEADING
        assert editor_heading(Entry(id=1)) == EDIT_HEADING
        assert editor_heading(None) == EDIT_HEADING


class TestRenderEditor:
    async def test_loading_placeholder(self, repository, autosave):
        session = DraftReconciler(repository, 99, autosave)
        session.start()
        assert render_editor(session) == f"{EDIT_HEADING}\n{LOADING_MESSAGE}"
        await session.close()

    async def test_prefilled_entry(self, repository, autosave):
        session = DraftReconciler(repository, 3, autosave)
        session.start()
        assert render_editor(session).splitlines() == [
            EDIT_HEADING,
            "last change at 11:00",
            "Title: A",
            "Content: B",
        ]
        await session.close()

    async def test_draft_shows_add_heading(self, repository, autosave):
        session = DraftReconciler(repository, 1, autosave)
        session.start()
        assert render_editor(session).startswith(ADD_HEADING)
        await session.close()
