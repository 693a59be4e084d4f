"""
daybook exception hierarchy.

All daybook exceptions inherit from DaybookError, so callers can catch
library-level errors while still telling specific failure modes apart.
"""


class DaybookError(Exception):
    """Base exception class for all daybook errors."""


class ConfigurationError(DaybookError):
    """Raised for configuration errors (missing keys, invalid values)."""


class StoreError(DaybookError):
    """Raised when the entry store cannot read or write an entry."""


class EntryNotFoundError(StoreError, KeyError):
    """Raised when a required entry does not exist."""

    def __init__(self, entry_id: int):
        super().__init__(f"Entry not found: {entry_id}")
        self.entry_id = entry_id

    def __str__(self) -> str:
        return f"Entry not found: {self.entry_id}"


class SessionStateError(DaybookError):
    """Raised when an editing session is used in a state that does not allow it."""


class FileIOError(DaybookError):
    """Raised for file I/O errors."""
