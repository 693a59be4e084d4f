"""Fixtures for journal tests: recording and misbehaving stores."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta

import pytest

from daybook.core.exceptions import StoreError
from daybook.journal.config import AutosaveConfig
from daybook.journal.models import Entry
from daybook.journal.repository import EntryRepository
from daybook.journal.store import InMemoryEntryStore

DEBOUNCE_MS = 50
SETTLE = 0.15  # comfortably longer than the debounce window


class FakeClock:
    """Deterministic clock: each call is one minute after the previous one."""

    def __init__(self, start: datetime = datetime(2026, 3, 5, 9, 0)):
        self.now = start

    def __call__(self) -> datetime:
        self.now += timedelta(minutes=1)
        return self.now


class RecordingStore(InMemoryEntryStore):
    """In-memory store that records every upsert and delete it receives."""

    def __init__(self, entries=None, clock=None):
        super().__init__(entries, clock=clock)
        self.calls: list[tuple[str, Entry]] = []

    async def upsert(self, entry: Entry) -> None:
        self.calls.append(("upsert", entry))
        await super().upsert(entry)

    async def delete(self, entry: Entry) -> None:
        self.calls.append(("delete", entry))
        await super().delete(entry)

    def ops(self, name: str) -> list[Entry]:
        return [entry for op, entry in self.calls if op == name]


class SlowStore(RecordingStore):
    """Upserts of a given title take *delay* seconds; records when each one lands."""

    def __init__(self, entries=None, slow_title: str = "", delay: float = 0.1):
        super().__init__(entries)
        self.slow_title = slow_title
        self.delay = delay
        self.applied: list[str] = []

    async def upsert(self, entry: Entry) -> None:
        if entry.title == self.slow_title:
            await asyncio.sleep(self.delay)
        await super().upsert(entry)
        self.applied.append(entry.title)


class FailingStore(RecordingStore):
    """Every write fails."""

    async def upsert(self, entry: Entry) -> None:
        self.calls.append(("upsert", entry))
        raise StoreError("disk full")

    async def delete(self, entry: Entry) -> None:
        self.calls.append(("delete", entry))
        raise StoreError("disk full")


class FlakyStore(RecordingStore):
    """The first upsert fails, later ones succeed."""

    def __init__(self, entries=None):
        super().__init__(entries)
        self.failures_left = 1

    async def upsert(self, entry: Entry) -> None:
        if self.failures_left:
            self.failures_left -= 1
            self.calls.append(("upsert", entry))
            raise StoreError("disk full")
        await super().upsert(entry)


def seed_entry(entry_id: int, title: str = "", content: str = "", *, is_draft: bool = False) -> Entry:
    return Entry(
        id=entry_id,
        title=title,
        content=content,
        timestamp=datetime(2026, 3, 1, 8, 0) + timedelta(hours=entry_id),
        is_draft=is_draft,
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def autosave():
    return AutosaveConfig(debounce_ms=DEBOUNCE_MS)


@pytest.fixture
def store(clock):
    return RecordingStore(
        [
            seed_entry(1, "", "", is_draft=True),
            seed_entry(2, "", "", is_draft=True),
            seed_entry(3, "A", "B"),
        ],
        clock=clock,
    )


@pytest.fixture
def repository(store):
    return EntryRepository(store)
