"""Draft reconciler — keeps one entry's editor buffer in sync with the store.

One reconciler serves one editing session for one entry id:

* **Prefill once.** The first stored value seen on the entry feed fills the
  title/content buffer. Later stored values never overwrite the buffer, so
  a write from elsewhere cannot clobber text being typed.
* **Debounced autosave.** Every buffer change restarts a quiet-period timer.
  When it settles, the buffer is upserted unless it matches the last
  settled value or the stored entry. Writes run in issue order on a
  per-session :class:`~daybook.journal.writer.OrderedWriter` and never block
  the caller.
* **Save or delete on close.** :meth:`DraftReconciler.close` cancels the
  pending timer and compares the latest buffer (not the debounced value)
  with the stored entry: blank text deletes the entry, changed text is
  saved once more, identical text does nothing. That action is the last
  write of the session.

States: ``LOADING -> PREFILLED -> EDITING -> CLOSED``.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import datetime
from enum import Enum

from loguru import logger

from daybook.core.events import (
    ENTRY_DELETED,
    ENTRY_SAVED,
    ENTRY_WRITE_FAILED,
    SESSION_CLOSED,
    SESSION_OPENED,
    Event,
    EventBus,
)
from daybook.core.exceptions import SessionStateError

from .config import AutosaveConfig, TimestampPolicy
from .debounce import Debouncer
from .feed import LiveFeed, Subscription
from .models import Entry, is_blank
from .repository import EntryRepository
from .writer import OrderedWriter

Buffer = tuple[str, str]


class DraftState(Enum):
    LOADING = "loading"
    PREFILLED = "prefilled"
    EDITING = "editing"
    CLOSED = "closed"


class ReconcileOutcome(Enum):
    """What :meth:`DraftReconciler.close` did to the stored entry."""

    SAVED = "saved"
    DELETED = "deleted"
    UNCHANGED = "unchanged"
    SKIPPED = "skipped"  # nothing was ever loaded, or already closed


class DraftReconciler:
    """Owns the editable buffer of one entry for one editing session.

    Args:
        repository: Where the entry is read from and written to.
        entry_id: The entry being edited.
        config: Autosave settings. Defaults to a 500 ms debounce.
        bus: Optional event bus notified about saves, deletes and failures.
        clock: Time source for refreshed timestamps.
    """

    def __init__(
        self,
        repository: EntryRepository,
        entry_id: int,
        config: AutosaveConfig | None = None,
        *,
        bus: EventBus | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.repository = repository
        self.entry_id = entry_id
        self.config = config or AutosaveConfig()
        self._bus = bus
        self._clock = clock or datetime.now
        self._state = DraftState.LOADING
        self._title = ""
        self._content = ""
        self._stored: Entry | None = None
        self._feed: LiveFeed[Entry | None] | None = None
        self._subscription: Subscription | None = None
        self._debouncer: Debouncer[Buffer] | None = None
        self._writer = OrderedWriter(self.session_key, on_error=self._on_write_failed)
        self._write_errors: list[str] = []

    # -- Read-only views --------------------------------------------------------

    @property
    def session_key(self) -> str:
        return f"entry-{self.entry_id}"

    @property
    def state(self) -> DraftState:
        return self._state

    @property
    def is_loading(self) -> bool:
        return self._state is DraftState.LOADING

    @property
    def title(self) -> str:
        return self._title

    @property
    def content(self) -> str:
        return self._content

    @property
    def stored(self) -> Entry | None:
        """Last known stored entry, including saves still in flight."""
        return self._stored

    @property
    def writer(self) -> OrderedWriter:
        return self._writer

    @property
    def write_errors(self) -> list[str]:
        return list(self._write_errors)

    # -- Lifecycle --------------------------------------------------------------

    def start(self) -> None:
        """Subscribe to the entry. Must be called from a running event loop."""
        if self._subscription is not None or self._state is DraftState.CLOSED:
            raise SessionStateError(f"Session {self.session_key} was already started")
        self._debouncer = Debouncer(
            self.config.delay,
            self._on_settled,
            key=self.session_key,
            loop=asyncio.get_running_loop(),
        )
        self._feed = self.repository.get_by_id(self.entry_id)
        self._subscription = self._feed.subscribe(self._on_stored)
        logger.debug(f"Session {self.session_key} started ({self._state.value})")
        self._notify(SESSION_OPENED)

    async def close(self) -> ReconcileOutcome:
        """End the session with one final save-or-delete pass.

        Only the first call does anything; later calls return SKIPPED.
        """
        if self._state is DraftState.CLOSED:
            return ReconcileOutcome.SKIPPED
        self._state = DraftState.CLOSED
        if self._debouncer is not None:
            self._debouncer.cancel()
        if self._subscription is not None:
            self._subscription.cancel()

        outcome = self._reconcile_on_exit()
        await self._writer.aclose()
        logger.debug(f"Session {self.session_key} closed: {outcome.value}")
        self._notify(SESSION_CLOSED, outcome=outcome.value)
        return outcome

    # -- Editing ----------------------------------------------------------------

    def set_title(self, title: str) -> None:
        self.edit(title=title)

    def set_content(self, content: str) -> None:
        self.edit(content=content)

    def edit(self, *, title: str | None = None, content: str | None = None) -> None:
        """Change the buffer. Only allowed once the entry has been loaded."""
        if self._state is DraftState.LOADING:
            raise SessionStateError(f"Entry {self.entry_id} is still loading")
        if self._state is DraftState.CLOSED:
            raise SessionStateError(f"Session {self.session_key} is closed")

        new_title = self._title if title is None else title
        new_content = self._content if content is None else content
        if (new_title, new_content) == (self._title, self._content):
            return
        self._title, self._content = new_title, new_content
        self._state = DraftState.EDITING
        self._debouncer.push((new_title, new_content))

    # -- Store side -------------------------------------------------------------

    def _on_stored(self, entry: Entry | None) -> None:
        if self._state is DraftState.CLOSED:
            return
        if self._writer.busy:
            # Our own saves are still landing; the optimistic copy is newer.
            return
        self._stored = entry
        if entry is not None and self._state is DraftState.LOADING:
            self._title, self._content = entry.title, entry.content
            self._state = DraftState.PREFILLED
            self._debouncer.seed((entry.title, entry.content))
            logger.debug(f"Session {self.session_key} prefilled")

    def _on_settled(self, buffer: Buffer) -> None:
        stored = self._stored
        if stored is None or self._state is DraftState.CLOSED:
            return
        title, content = buffer
        if (title, content) == (stored.title, stored.content):
            return
        self._save(stored, title, content)

    def _reconcile_on_exit(self) -> ReconcileOutcome:
        stored = self._stored
        if stored is None:
            return ReconcileOutcome.SKIPPED
        title, content = self._title, self._content
        if is_blank(title, content):
            self._stored = None
            self._writer.submit(f"delete entry {stored.id}", lambda: self._write_delete(stored))
            return ReconcileOutcome.DELETED
        if (title, content) != (stored.title, stored.content):
            self._save(stored, title, content)
            return ReconcileOutcome.SAVED
        return ReconcileOutcome.UNCHANGED

    def _save(self, stored: Entry, title: str, content: str) -> None:
        timestamp = self._clock() if self.config.timestamp_policy is TimestampPolicy.REFRESH else None
        entry = stored.with_text(title, content, timestamp=timestamp)
        self._stored = entry
        self._writer.submit(f"upsert entry {entry.id}", lambda: self._write_upsert(entry))

    async def _write_upsert(self, entry: Entry) -> None:
        await self.repository.upsert(entry)
        await self._emit(ENTRY_SAVED, title=entry.title)

    async def _write_delete(self, entry: Entry) -> None:
        await self.repository.delete(entry)
        await self._emit(ENTRY_DELETED)

    async def _on_write_failed(self, label: str, exc: Exception) -> None:
        self._write_errors.append(f"{label}: {exc}")
        if self._state is not DraftState.CLOSED and self._feed is not None:
            # Forget the optimistic copy so the next settle writes the diff again.
            self._stored = self._feed.value
            if self._stored is not None and self._debouncer is not None:
                self._debouncer.seed((self._stored.title, self._stored.content))
        await self._emit(ENTRY_WRITE_FAILED, operation=label, error=str(exc))

    # -- Events -----------------------------------------------------------------

    def _event(self, name: str, payload: dict[str, object]) -> Event:
        return Event(name=name, payload={"entry_id": self.entry_id, **payload}, source=self.session_key)

    async def _emit(self, name: str, **payload: object) -> None:
        if self._bus is not None:
            await self._bus.emit(self._event(name, payload))

    def _notify(self, name: str, **payload: object) -> None:
        if self._bus is not None:
            self._bus.emit_sync(self._event(name, payload))

    def __repr__(self) -> str:
        return f"DraftReconciler(entry_id={self.entry_id}, state={self._state.value})"
