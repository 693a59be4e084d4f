"""Repository for journal entries.

A thin façade over an :class:`~daybook.journal.store.EntryStore` so the
rest of the application talks to one object regardless of backend.
"""

from __future__ import annotations

from daybook.core.exceptions import EntryNotFoundError

from .feed import LiveFeed
from .models import Entry
from .store import EntryStore


class EntryRepository:
    def __init__(self, store: EntryStore):
        self._store = store

    @property
    def store(self) -> EntryStore:
        return self._store

    def all_entries(self) -> LiveFeed[list[Entry]]:
        """Live feed of all non-empty entries, newest first."""
        return self._store.subscribe_all()

    def get_by_id(self, entry_id: int) -> LiveFeed[Entry | None]:
        """Live feed of one entry, ``None`` while it does not exist."""
        return self._store.subscribe(entry_id)

    async def get(self, entry_id: int) -> Entry | None:
        return await self._store.get(entry_id)

    async def require(self, entry_id: int) -> Entry:
        """Like :meth:`get` but raises EntryNotFoundError for a missing id."""
        entry = await self._store.get(entry_id)
        if entry is None:
            raise EntryNotFoundError(entry_id)
        return entry

    async def list_entries(self) -> list[Entry]:
        return await self._store.list_entries()

    async def insert(self, entry: Entry) -> int:
        return await self._store.insert(entry)

    async def update(self, entry: Entry) -> None:
        await self._store.update(entry)

    async def delete(self, entry: Entry) -> None:
        await self._store.delete(entry)

    async def upsert(self, entry: Entry) -> None:
        await self._store.upsert(entry)
