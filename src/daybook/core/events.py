"""Event bus for loose-coupled notifications.

Editing sessions announce what they did to the store (saved, deleted,
write failed) without knowing who listens. Hooks can be sync or async
and are registered and removed explicitly.

Usage::

    from daybook.core.events import ENTRY_SAVED, Event, EventBus

    bus = EventBus()

    def on_saved(event: Event) -> None:
        print(f"saved entry {event.payload['entry_id']}")

    bus.on(ENTRY_SAVED, on_saved)
    await bus.emit(Event(name=ENTRY_SAVED, payload={"entry_id": 3}, source="session-3"))
"""

from __future__ import annotations

import asyncio
import inspect
from collections import defaultdict
from dataclasses import dataclass, field
from time import time
from typing import Any

from loguru import logger

# ---------------------------------------------------------------------------
# Well-known event names
# ---------------------------------------------------------------------------

ENTRY_SAVED = "entry.saved"
ENTRY_DELETED = "entry.deleted"
ENTRY_WRITE_FAILED = "entry.write_failed"
SESSION_OPENED = "session.opened"
SESSION_CLOSED = "session.closed"

# Type alias for hook callables (sync or async)
Hook = Any  # Callable[[Event], None] | Callable[[Event], Awaitable[None]]


@dataclass(frozen=True)
class Event:
    """An immutable event that flows through the bus."""

    name: str
    payload: dict[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=time)
    source: str = ""


class EventBus:
    """Simple pub/sub event bus supporting sync and async hooks."""

    def __init__(self) -> None:
        self._hooks: dict[str, list[Hook]] = defaultdict(list)
        self._wildcard_hooks: list[Hook] = []
        self._background_tasks: set[asyncio.Task] = set()

    def on(self, event_name: str, hook: Hook) -> None:
        """Register *hook* for a specific event name."""
        self._hooks[event_name].append(hook)

    def on_all(self, hook: Hook) -> None:
        """Register *hook* for all events (wildcard)."""
        self._wildcard_hooks.append(hook)

    def off(self, event_name: str, hook: Hook) -> None:
        """Unregister *hook* from a specific event name."""
        try:
            self._hooks[event_name].remove(hook)
        except ValueError:
            pass

    def _hooks_for(self, event: Event) -> list[Hook]:
        hooks = list(self._hooks.get(event.name, []))
        hooks.extend(self._wildcard_hooks)
        return hooks

    async def emit(self, event: Event) -> None:
        """Emit an event, running all matching hooks in registration order."""
        for hook in self._hooks_for(event):
            try:
                if inspect.iscoroutinefunction(hook):
                    await hook(event)
                else:
                    hook(event)
            except Exception as exc:
                logger.warning(f"Event hook failed for {event.name}: {exc}")

    def emit_sync(self, event: Event) -> None:
        """Emit from a sync context.

        Async hooks are scheduled as tasks on the running loop; without a
        running loop they are skipped.
        """
        loop: asyncio.AbstractEventLoop | None = None
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            pass

        for hook in self._hooks_for(event):
            try:
                if inspect.iscoroutinefunction(hook):
                    if loop is not None:
                        task = loop.create_task(hook(event))
                        self._background_tasks.add(task)
                        task.add_done_callback(self._background_tasks.discard)
                    else:
                        logger.debug(f"Skipping async hook {hook!r}: no running event loop")
                else:
                    hook(event)
            except Exception as exc:
                logger.warning(f"Event hook failed for {event.name}: {exc}")
