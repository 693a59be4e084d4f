"""Journal entries and the autosaving editor.

Provides the Entry model, pluggable entry stores with live feeds, the
repository façade, and the draft reconciler that keeps an editor buffer
in sync with the store.
"""

from .config import AutosaveConfig, TimestampPolicy
from .feed import LiveFeed, Subscription
from .models import Entry
from .navigation import Navigator, parse_route
from .reconciler import DraftReconciler, DraftState, ReconcileOutcome
from .repository import EntryRepository
from .session import SessionManager
from .store import EntryStore, InMemoryEntryStore, MarkdownEntryStore

__all__ = [
    "AutosaveConfig",
    "DraftReconciler",
    "DraftState",
    "Entry",
    "EntryRepository",
    "EntryStore",
    "InMemoryEntryStore",
    "LiveFeed",
    "MarkdownEntryStore",
    "Navigator",
    "ReconcileOutcome",
    "SessionManager",
    "Subscription",
    "TimestampPolicy",
    "parse_route",
]
