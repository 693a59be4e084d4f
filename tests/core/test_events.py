"""Tests for daybook.core.events — EventBus and Event."""

from __future__ import annotations

import asyncio
from dataclasses import FrozenInstanceError

import pytest

from daybook.core.events import ENTRY_DELETED, ENTRY_SAVED, Event, EventBus

pytestmark = pytest.mark.smoke


async def test_hook_receives_named_events_until_removed():
    bus = EventBus()
    received: list[Event] = []
    bus.on(ENTRY_SAVED, received.append)

    saved = Event(name=ENTRY_SAVED, payload={"entry_id": 3}, source="entry-3")
    await bus.emit(saved)
    await bus.emit(Event(name=ENTRY_DELETED, payload={"entry_id": 3}))
    bus.off(ENTRY_SAVED, received.append)
    await bus.emit(saved)

    assert received == [saved]


def test_off_unknown_hook_is_ignored():
    EventBus().off(ENTRY_SAVED, print)


async def test_wildcard_hooks_see_everything_after_named_hooks():
    bus = EventBus()
    order: list[str] = []
    bus.on_all(lambda event: order.append(f"*{event.name}"))
    bus.on(ENTRY_SAVED, lambda event: order.append(event.name))

    await bus.emit(Event(name=ENTRY_SAVED))
    await bus.emit(Event(name=ENTRY_DELETED))

    assert order == [ENTRY_SAVED, f"*{ENTRY_SAVED}", f"*{ENTRY_DELETED}"]


async def test_async_hooks_are_awaited():
    bus = EventBus()
    received: list[int] = []

    async def hook(event: Event) -> None:
        await asyncio.sleep(0)
        received.append(event.payload["entry_id"])

    bus.on(ENTRY_SAVED, hook)
    await bus.emit(Event(name=ENTRY_SAVED, payload={"entry_id": 7}))
    assert received == [7]


async def test_failing_hooks_do_not_block_others():
    bus = EventBus()
    received: list[str] = []

    def bad_sync(event: Event) -> None:
        raise RuntimeError("boom")

    async def bad_async(event: Event) -> None:
        raise RuntimeError("async boom")

    bus.on(ENTRY_SAVED, bad_sync)
    bus.on(ENTRY_SAVED, bad_async)
    bus.on(ENTRY_SAVED, lambda event: received.append("ok"))

    await bus.emit(Event(name=ENTRY_SAVED))
    assert received == ["ok"]


async def test_emit_sync_schedules_async_hooks():
    bus = EventBus()
    received: list[str] = []

    async def hook(event: Event) -> None:
        received.append("async")

    bus.on(ENTRY_DELETED, hook)
    bus.on(ENTRY_DELETED, lambda event: received.append("sync"))
    bus.emit_sync(Event(name=ENTRY_DELETED))

    assert received == ["sync"]
    await asyncio.sleep(0.01)
    assert received == ["sync", "async"]


def test_emit_sync_without_loop_skips_async_hooks():
    bus = EventBus()
    received: list[str] = []

    async def hook(event: Event) -> None:
        received.append("async")

    bus.on(ENTRY_SAVED, hook)
    bus.on(ENTRY_SAVED, lambda event: received.append("sync"))
    bus.emit_sync(Event(name=ENTRY_SAVED))

    assert received == ["sync"]


def test_event_is_frozen():
    event = Event(name=ENTRY_SAVED, payload={"entry_id": 1}, source="entry-1")
    assert event.timestamp > 0
    with pytest.raises(FrozenInstanceError):
        event.name = "changed"  # type: ignore[misc]
