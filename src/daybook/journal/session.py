"""Editing session manager.

Owns the one active :class:`~daybook.journal.reconciler.DraftReconciler`
and guarantees its exit reconciliation runs: when another entry is
opened, when the editor is left, when the ``editing()`` block exits for
any reason, and on :meth:`SessionManager.shutdown`.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from datetime import datetime

from loguru import logger

from daybook.core.events import EventBus

from .config import AutosaveConfig
from .models import Entry
from .reconciler import DraftReconciler, ReconcileOutcome
from .repository import EntryRepository


class SessionManager:
    """At most one editing session at a time, always closed through reconciliation.

    Args:
        repository: Entry repository shared with the list view.
        config: Autosave settings handed to every session.
        bus: Optional event bus handed to every session.
        clock: Time source handed to every session.
    """

    def __init__(
        self,
        repository: EntryRepository,
        config: AutosaveConfig | None = None,
        *,
        bus: EventBus | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.repository = repository
        self.config = config or AutosaveConfig()
        self.bus = bus
        self._clock = clock
        self._active: DraftReconciler | None = None
        self.last_outcome: ReconcileOutcome | None = None

    @property
    def active(self) -> DraftReconciler | None:
        return self._active

    async def open(self, entry_id: int) -> DraftReconciler:
        """Close the current session (if any) and start one for *entry_id*."""
        await self.close()
        session = DraftReconciler(
            self.repository,
            entry_id,
            self.config,
            bus=self.bus,
            clock=self._clock,
        )
        session.start()
        self._active = session
        logger.info(f"Editing entry {entry_id}")
        return session

    async def open_new(self) -> DraftReconciler:
        """Create a blank draft entry and open it."""
        entry_id = await self.repository.insert(Entry(is_draft=True))
        logger.debug(f"Created draft entry {entry_id}")
        return await self.open(entry_id)

    async def close(self) -> ReconcileOutcome | None:
        """Reconcile and drop the active session. Returns None when none was open."""
        session, self._active = self._active, None
        if session is None:
            return None
        self.last_outcome = await session.close()
        if self.last_outcome is ReconcileOutcome.DELETED:
            logger.info(f"Discarded blank entry {session.entry_id}")
        return self.last_outcome

    @asynccontextmanager
    async def editing(self, entry_id: int | None = None) -> AsyncIterator[DraftReconciler]:
        """Edit one entry for the duration of the block (a new draft when *entry_id* is None).

        Exit reconciliation runs however the block ends.
        """
        session = await (self.open_new() if entry_id is None else self.open(entry_id))
        try:
            yield session
        finally:
            if self._active is session:
                await self.close()
            else:
                await session.close()

    async def shutdown(self) -> None:
        """Process-exit hook: reconcile whatever is still open."""
        if self._active is not None:
            logger.debug("Closing active session on shutdown")
        await self.close()
