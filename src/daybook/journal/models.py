"""Core data model for journal entries.

An Entry is the only persisted record. It is immutable; edits produce
copies via :meth:`Entry.with_text`.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any

SCHEMA_VERSION = 1


def _parse_timestamp(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


@dataclass(frozen=True)
class Entry:
    """A single journal record.

    Attributes:
        id: Store-assigned identifier. ``0`` means "not yet persisted".
        title: Title text, may be empty.
        content: Body text, may be empty.
        timestamp: Creation or last-change instant; stamped by the store on
            insert when missing.
        is_draft: Placeholder created by "add entry" and not yet saved with text.
    """

    id: int = 0
    title: str = ""
    content: str = ""
    timestamp: datetime | None = None
    is_draft: bool = False

    @property
    def is_persisted(self) -> bool:
        return self.id != 0

    @property
    def is_empty(self) -> bool:
        """Both fields are empty strings. Empty entries are hidden from listings."""
        return self.title == "" and self.content == ""

    @property
    def is_blank(self) -> bool:
        """Both fields are empty or whitespace-only."""
        return is_blank(self.title, self.content)

    def with_text(self, title: str, content: str, timestamp: datetime | None = None) -> Entry:
        """Copy with new text. The copy is no longer a draft."""
        return replace(
            self,
            title=title,
            content=content,
            is_draft=False,
            timestamp=timestamp if timestamp is not None else self.timestamp,
        )

    def sort_key(self) -> tuple[datetime, int]:
        return (self.timestamp or datetime.min, self.id)

    def to_frontmatter(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "is_draft": self.is_draft,
            "schema_version": SCHEMA_VERSION,
        }

    @classmethod
    def from_frontmatter(cls, front: dict[str, Any], body: str) -> Entry:
        version = front.get("schema_version", SCHEMA_VERSION)
        if version != SCHEMA_VERSION:
            raise ValueError(f"Unsupported entry schema version: {version}")
        return cls(
            id=int(front["id"]),
            title=str(front.get("title") or ""),
            content=body,
            timestamp=_parse_timestamp(front.get("timestamp")),
            is_draft=bool(front.get("is_draft", False)),
        )

    def __repr__(self) -> str:
        preview = self.title[:30] + "..." if len(self.title) > 30 else self.title
        return f"Entry(id={self.id}, title='{preview}', draft={self.is_draft})"


def is_blank(title: str, content: str) -> bool:
    return not title.strip() and not content.strip()


def display_order(entries: list[Entry]) -> list[Entry]:
    """Newest first; equal timestamps fall back to the higher id first."""
    return sorted(entries, key=Entry.sort_key, reverse=True)
