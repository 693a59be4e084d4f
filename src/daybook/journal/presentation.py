"""Plain-text rendering for the entry list and the editor header."""

from __future__ import annotations

from datetime import datetime

from .models import Entry
from .reconciler import DraftReconciler

LOADING_MESSAGE = "Loading Entry …"
ADD_HEADING = "Add Entry"
EDIT_HEADING = "Edit Entry"


def format_date(ts: datetime | None) -> str:
    """``MMM dd, yyyy`` (e.g. ``Mar 05, 2026``)."""
    return ts.strftime("%b %d, %Y") if ts else ""


def last_change_label(ts: datetime | None) -> str:
    if ts is None:
        return ""
    return f"last change at {ts.strftime('%H:%M')}"


def format_entry_card(entry: Entry) -> str:
    """Title, date and content, one per line, as shown in the list."""
    lines = [f"#{entry.id} {entry.title}".rstrip(), format_date(entry.timestamp)]
    if entry.content:
        lines.append(entry.content)
    return "\n".join(lines)


def format_entry_list(entries: list[Entry]) -> str:
    if not entries:
        return "No entries yet."
    return "\n\n".join(format_entry_card(e) for e in entries)


def editor_heading(entry: Entry | None) -> str:
    """``Add Entry`` while the entry is still a draft, else ``Edit Entry``."""
    return ADD_HEADING if entry is not None and entry.is_draft else EDIT_HEADING


def render_editor(session: DraftReconciler) -> str:
    """Header plus buffer, or the loading placeholder before prefill."""
    heading = editor_heading(session.stored)
    if session.is_loading:
        return f"{heading}\n{LOADING_MESSAGE}"
    stored = session.stored
    lines = [heading]
    if stored is not None and stored.timestamp is not None:
        lines.append(last_change_label(stored.timestamp))
    lines.append(f"Title: {session.title}")
    lines.append(f"Content: {session.content}")
    return "\n".join(lines)
