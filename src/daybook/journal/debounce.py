"""Cancellable debounce timer.

Values pushed in quick succession are coalesced: the callback only sees
a value once nothing new has been pushed for ``delay`` seconds, and
never sees the same settled value twice in a row.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Generic, TypeVar

from loguru import logger

T = TypeVar("T")

_NOTHING = object()


class Debouncer(Generic[T]):
    """Debounce timer on the running event loop.

    Args:
        delay: Quiet period in seconds.
        callback: Called with the settled value.
        key: Owner label (the editing session), used in log messages.
        loop: Event loop to schedule on. Defaults to the running loop.
    """

    def __init__(
        self,
        delay: float,
        callback: Callable[[T], None],
        *,
        key: str = "",
        loop: asyncio.AbstractEventLoop | None = None,
    ):
        if delay < 0:
            raise ValueError("Debounce delay cannot be negative")
        self.delay = delay
        self.key = key
        self._callback = callback
        self._loop = loop or asyncio.get_running_loop()
        self._handle: asyncio.TimerHandle | None = None
        self._last_settled: T | object = _NOTHING

    @property
    def pending(self) -> bool:
        """A value is waiting for the quiet period to end."""
        return self._handle is not None

    def seed(self, value: T) -> None:
        """Set the distinct-until-changed baseline without firing."""
        self._last_settled = value

    def push(self, value: T) -> None:
        """Restart the timer with *value* as the candidate."""
        if self._handle is not None:
            self._handle.cancel()
        self._handle = self._loop.call_later(self.delay, self._fire, value)

    def cancel(self) -> bool:
        """Drop the pending value, if any. Returns True when one was dropped."""
        if self._handle is None:
            return False
        self._handle.cancel()
        self._handle = None
        logger.debug(f"Debounce timer cancelled for {self.key}")
        return True

    def _fire(self, value: T) -> None:
        self._handle = None
        if self._last_settled is not _NOTHING and self._last_settled == value:
            return
        self._last_settled = value
        try:
            self._callback(value)
        except Exception:
            logger.exception(f"Debounce callback failed for {self.key}")
