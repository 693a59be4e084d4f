"""Ordered fire-and-forget writes.

Callers hand over a write with :meth:`OrderedWriter.submit` and carry on;
a single background task runs the writes one at a time in the order they
were submitted, so later writes for an entry can never overtake earlier
ones. Failed writes are logged and kept as dead letters, never retried.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable

from loguru import logger

from daybook.core.exceptions import SessionStateError

WriteFactory = Callable[[], Awaitable[None]]
"""Zero-arg callable producing the awaitable that performs one write."""

ErrorHandler = Callable[[str, Exception], Awaitable[None]]
"""Async callback ``(label, exception) -> None`` for failed writes."""

_SENTINEL = object()


class OrderedWriter:
    """Serialized write queue backed by one consumer task.

    The consumer starts lazily on the first :meth:`submit`, which must
    therefore happen inside a running event loop.

    Args:
        name: Label used for the consumer task and in log messages.
        on_error: Optional async callback invoked after a write fails.
    """

    def __init__(self, name: str, on_error: ErrorHandler | None = None):
        self.name = name
        self._on_error = on_error
        self._queue: asyncio.Queue[object] = asyncio.Queue()
        self._consumer_task: asyncio.Task | None = None
        self._pending = 0
        self._closed = False
        self._dead_letters: list[tuple[str, str, float]] = []

    # ── Public API ─────────────────────────────────────────────────

    @property
    def busy(self) -> bool:
        """Writes were submitted that have not finished yet."""
        return self._pending > 0

    @property
    def closed(self) -> bool:
        return self._closed

    def submit(self, label: str, factory: WriteFactory) -> None:
        """Queue a write without waiting for it."""
        if self._closed:
            raise SessionStateError(f"Writer {self.name} is closed")
        if self._consumer_task is None or self._consumer_task.done():
            self._consumer_task = asyncio.get_running_loop().create_task(
                self._consume_loop(), name=f"writer-{self.name}"
            )
        self._pending += 1
        self._queue.put_nowait((label, factory))
        logger.debug(f"Queued write '{label}' on {self.name}")

    async def drain(self) -> None:
        """Wait until every submitted write has run."""
        await self._queue.join()

    async def aclose(self) -> None:
        """Run the remaining writes, then stop the consumer.

        The consumer is shielded, so cancelling the caller does not abort
        writes that are already queued.
        """
        if self._closed:
            return
        self._closed = True
        if self._consumer_task is None:
            return
        self._queue.put_nowait(_SENTINEL)
        await asyncio.shield(self._consumer_task)
        self._consumer_task = None

    # ── Dead letter introspection ──────────────────────────────────

    @property
    def dead_letter_count(self) -> int:
        return len(self._dead_letters)

    def get_dead_letters(self) -> list[tuple[str, str, float]]:
        """Return failed writes as (label, error_message, timestamp)."""
        return list(self._dead_letters)

    # ── Internal ───────────────────────────────────────────────────

    async def _consume_loop(self) -> None:
        while True:
            item = await self._queue.get()
            if item is _SENTINEL:
                self._queue.task_done()
                break
            label, factory = item  # type: ignore[misc]
            try:
                await factory()
            except Exception as exc:
                self._dead_letters.append((label, str(exc), time.time()))
                logger.error(f"Write '{label}' on {self.name} failed: {exc}")
                await self._report(label, exc)
            finally:
                self._pending -= 1
                self._queue.task_done()

    async def _report(self, label: str, exc: Exception) -> None:
        if self._on_error is None:
            return
        try:
            await self._on_error(label, exc)
        except Exception:
            logger.exception(f"Write error handler failed on {self.name}")
