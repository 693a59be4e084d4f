"""Entry stores — the durable home of journal entries.

``EntryStore`` is the contract the rest of daybook relies on. Reads are
exposed as live feeds (one per entry id, plus the ordered listing) so
that editors and list views see every write as it lands. Writes are
async.

Two backends ship with daybook:

* :class:`InMemoryEntryStore` — dict only, for tests and scratch use.
* :class:`MarkdownEntryStore` — one ``<id>.md`` file per entry with YAML
  frontmatter, the same shape a human would write by hand.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Protocol, runtime_checkable

from loguru import logger

from daybook.core.exceptions import FileIOError, StoreError
from daybook.core.utils.file_io import (
    atomic_write_text,
    parse_frontmatter,
    read_text,
    remove_file,
    render_frontmatter,
)

from .feed import LiveFeed
from .models import Entry, display_order

Clock = Callable[[], datetime]


@runtime_checkable
class EntryStore(Protocol):
    """Protocol for reading and writing journal entries."""

    def subscribe(self, entry_id: int) -> LiveFeed[Entry | None]:
        """Live feed of one entry; the value is ``None`` while it does not exist."""
        ...

    def subscribe_all(self) -> LiveFeed[list[Entry]]:
        """Live feed of all non-empty entries, newest first."""
        ...

    async def get(self, entry_id: int) -> Entry | None: ...

    async def list_entries(self) -> list[Entry]: ...

    async def insert(self, entry: Entry) -> int:
        """Persist *entry*, assigning an id when it has none. Returns the id."""
        ...

    async def update(self, entry: Entry) -> None: ...

    async def delete(self, entry: Entry) -> None: ...

    async def upsert(self, entry: Entry) -> None:
        """Insert when ``entry.id`` is unset, otherwise update."""
        ...


class BaseEntryStore:
    """Shared bookkeeping: the id counter, the cache, and the live feeds.

    Subclasses only decide how an entry reaches durable storage by
    overriding :meth:`_persist` and :meth:`_remove`.
    """

    def __init__(self, clock: Clock | None = None):
        self._clock = clock or datetime.now
        self._entries: dict[int, Entry] = {}
        self._next_id = 1
        self._write_lock = asyncio.Lock()
        self._all_feed: LiveFeed[list[Entry]] = LiveFeed([], name="entries")
        self._entry_feeds: dict[int, LiveFeed[Entry | None]] = {}

    # -- Reads ----------------------------------------------------------------

    def subscribe(self, entry_id: int) -> LiveFeed[Entry | None]:
        feed = self._entry_feeds.get(entry_id)
        if feed is None:
            feed = LiveFeed(
                self._entries.get(entry_id),
                name=f"entry-{entry_id}",
                on_idle=lambda f, eid=entry_id: self._drop_feed(eid, f),
            )
            self._entry_feeds[entry_id] = feed
        return feed

    def subscribe_all(self) -> LiveFeed[list[Entry]]:
        return self._all_feed

    async def get(self, entry_id: int) -> Entry | None:
        return self._entries.get(entry_id)

    async def list_entries(self) -> list[Entry]:
        return self._visible()

    # -- Writes ---------------------------------------------------------------

    async def insert(self, entry: Entry) -> int:
        async with self._write_lock:
            if not entry.is_persisted:
                entry = replace(entry, id=self._next_id)
            if entry.timestamp is None:
                entry = replace(entry, timestamp=self._clock())
            self._next_id = max(self._next_id, entry.id + 1)
            await self._persist(entry)
            self._entries[entry.id] = entry
            self._publish(entry.id)
        logger.debug(f"Inserted entry {entry.id}")
        return entry.id

    async def update(self, entry: Entry) -> None:
        async with self._write_lock:
            current = self._entries.get(entry.id)
            if current is None:
                logger.debug(f"Update skipped, entry {entry.id} does not exist")
                return
            if entry.timestamp is None:
                entry = replace(entry, timestamp=current.timestamp)
            await self._persist(entry)
            self._entries[entry.id] = entry
            self._publish(entry.id)
        logger.debug(f"Updated entry {entry.id}")

    async def delete(self, entry: Entry) -> None:
        async with self._write_lock:
            if entry.id not in self._entries:
                logger.debug(f"Delete skipped, entry {entry.id} does not exist")
                return
            await self._remove(entry.id)
            del self._entries[entry.id]
            self._publish(entry.id)
        logger.debug(f"Deleted entry {entry.id}")

    async def upsert(self, entry: Entry) -> None:
        if entry.is_persisted:
            await self.update(entry)
        else:
            await self.insert(entry)

    # -- Backend hooks ----------------------------------------------------------

    async def _persist(self, entry: Entry) -> None:
        """Write *entry* durably. Raise StoreError on failure."""

    async def _remove(self, entry_id: int) -> None:
        """Remove an entry durably. Raise StoreError on failure."""

    # -- Internal -------------------------------------------------------------

    def _visible(self) -> list[Entry]:
        return display_order([e for e in self._entries.values() if not e.is_empty])

    def _publish(self, entry_id: int) -> None:
        feed = self._entry_feeds.get(entry_id)
        if feed is not None:
            feed.publish(self._entries.get(entry_id))
        self._all_feed.publish(self._visible())

    def _drop_feed(self, entry_id: int, feed: LiveFeed) -> None:
        if self._entry_feeds.get(entry_id) is feed:
            del self._entry_feeds[entry_id]


class InMemoryEntryStore(BaseEntryStore):
    """Entry store that keeps everything in memory."""

    def __init__(self, entries: list[Entry] | None = None, clock: Clock | None = None):
        super().__init__(clock=clock)
        for entry in entries or []:
            if not entry.is_persisted:
                raise ValueError("Seed entries need an id")
            self._entries[entry.id] = entry
            self._next_id = max(self._next_id, entry.id + 1)
        self._all_feed.publish(self._visible())


class MarkdownEntryStore(BaseEntryStore):
    """File-backed entry store: ``<entries_dir>/<id>.md`` with YAML frontmatter.

    Call :meth:`load` (or construct through :meth:`open`) before use; it
    reads the directory once; afterwards the in-memory cache is the read path.
    """

    def __init__(self, entries_dir: str | Path, clock: Clock | None = None):
        super().__init__(clock=clock)
        self.entries_dir = Path(entries_dir).expanduser()
        self._loaded = False

    @classmethod
    async def open(cls, entries_dir: str | Path, clock: Clock | None = None) -> MarkdownEntryStore:
        store = cls(entries_dir, clock=clock)
        await store.load()
        return store

    def _entry_path(self, entry_id: int) -> Path:
        return self.entries_dir / f"{entry_id}.md"

    async def load(self) -> int:
        """Read every entry file. Unreadable files are skipped. Returns the entry count."""
        self.entries_dir.mkdir(parents=True, exist_ok=True)
        self._entries.clear()
        for path in sorted(self.entries_dir.glob("*.md")):
            try:
                front, body = parse_frontmatter(await read_text(path))
                entry = Entry.from_frontmatter(front, body)
            except (FileIOError, KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping unreadable entry file {path.name}: {e}")
                continue
            if path.stem != str(entry.id):
                logger.warning(f"Skipping {path.name}: frontmatter id {entry.id} does not match filename")
                continue
            self._entries[entry.id] = entry
            self._next_id = max(self._next_id, entry.id + 1)
        self._loaded = True
        self._all_feed.publish(self._visible())
        for entry_id, feed in self._entry_feeds.items():
            feed.publish(self._entries.get(entry_id))
        logger.info(f"Loaded {len(self._entries)} entries from {self.entries_dir}")
        return len(self._entries)

    async def _persist(self, entry: Entry) -> None:
        self._require_loaded()
        text = render_frontmatter(entry.to_frontmatter(), entry.content)
        try:
            await atomic_write_text(self._entry_path(entry.id), text)
        except FileIOError as e:
            raise StoreError(f"Cannot save entry {entry.id}: {e}") from e

    async def _remove(self, entry_id: int) -> None:
        self._require_loaded()
        try:
            await remove_file(self._entry_path(entry_id))
        except FileIOError as e:
            raise StoreError(f"Cannot delete entry {entry_id}: {e}") from e

    def _require_loaded(self) -> None:
        if not self._loaded:
            raise StoreError("MarkdownEntryStore.load() must run before writing")
