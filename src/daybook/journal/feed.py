"""Live single-value feeds.

A :class:`LiveFeed` holds the latest value of something in the store
(one entry, or the ordered entry list) and pushes every change to its
observers. Observers are registered with :meth:`LiveFeed.subscribe` and
removed with :meth:`Subscription.cancel`; nothing is cleaned up implicitly.
"""

from __future__ import annotations

import itertools
from collections.abc import Callable
from typing import Generic, TypeVar

from loguru import logger

T = TypeVar("T")

Observer = Callable[[T], None]

_UNSET = object()


class Subscription:
    """Handle returned by :meth:`LiveFeed.subscribe`."""

    def __init__(self, feed: LiveFeed, token: int):
        self._feed: LiveFeed | None = feed
        self._token = token

    @property
    def active(self) -> bool:
        return self._feed is not None

    def cancel(self) -> None:
        """Stop receiving values. Safe to call more than once."""
        if self._feed is None:
            return
        feed, self._feed = self._feed, None
        feed._unregister(self._token)

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.cancel()


class LiveFeed(Generic[T]):
    """Push-based holder of a latest value with distinct-until-changed publishing.

    Args:
        initial: Starting value. Omit it for a feed that has not emitted yet.
        name: Label used in log messages.
        on_idle: Called with the feed when its last subscription is cancelled.
    """

    def __init__(
        self,
        initial: T | object = _UNSET,
        *,
        name: str = "feed",
        on_idle: Callable[[LiveFeed[T]], None] | None = None,
    ):
        self._value = initial
        self.name = name
        self._on_idle = on_idle
        self._observers: dict[int, Observer] = {}
        self._tokens = itertools.count(1)

    @property
    def has_value(self) -> bool:
        return self._value is not _UNSET

    @property
    def value(self) -> T | None:
        """Latest value, or ``None`` before the first publish."""
        return None if self._value is _UNSET else self._value  # type: ignore[return-value]

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    def publish(self, value: T) -> bool:
        """Store *value* and push it to observers.

        Returns False (and notifies nobody) when *value* equals the current value.
        """
        if self._value is not _UNSET and self._value == value:
            return False
        self._value = value
        for observer in list(self._observers.values()):
            self._deliver(observer, value)
        return True

    def subscribe(self, observer: Observer) -> Subscription:
        """Register *observer*; it receives the current value right away if there is one."""
        token = next(self._tokens)
        self._observers[token] = observer
        if self._value is not _UNSET:
            self._deliver(observer, self._value)  # type: ignore[arg-type]
        return Subscription(self, token)

    def _unregister(self, token: int) -> None:
        self._observers.pop(token, None)
        if not self._observers and self._on_idle is not None:
            self._on_idle(self)

    def _deliver(self, observer: Observer, value: T) -> None:
        try:
            observer(value)
        except Exception as exc:
            logger.warning(f"Observer of {self.name} failed: {exc}")

    def __repr__(self) -> str:
        return f"LiveFeed(name='{self.name}', observers={len(self._observers)})"
