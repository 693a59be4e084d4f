"""Configuration dataclasses for journal editing.

Pure data containers with sensible defaults. Build them from the
hierarchical :class:`~daybook.core.config.Config` with ``from_config``
or pass values directly.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from daybook.core.exceptions import ConfigurationError


class TimestampPolicy(StrEnum):
    """What an autosave does to the entry timestamp."""

    REFRESH = "refresh"  # every save stamps the current time
    PRESERVE = "preserve"  # keep the timestamp set at creation


@dataclass
class AutosaveConfig:
    """Settings for the draft autosave pipeline.

    Attributes:
        debounce_ms: Quiet period after the last keystroke before a save is issued.
        timestamp_policy: Whether saves refresh the entry timestamp.
    """

    debounce_ms: int = 500
    timestamp_policy: TimestampPolicy = TimestampPolicy.REFRESH

    def __post_init__(self):
        try:
            self.debounce_ms = int(self.debounce_ms)
        except (TypeError, ValueError):
            raise ConfigurationError(f"autosave.debounce_ms must be an integer, got {self.debounce_ms!r}") from None
        if self.debounce_ms < 0:
            raise ConfigurationError("autosave.debounce_ms cannot be negative")
        try:
            self.timestamp_policy = TimestampPolicy(str(self.timestamp_policy).lower())
        except ValueError:
            choices = ", ".join(p.value for p in TimestampPolicy)
            raise ConfigurationError(
                f"autosave.timestamp_policy must be one of {choices}, got {self.timestamp_policy!r}"
            ) from None

    @property
    def delay(self) -> float:
        """Debounce window in seconds."""
        return self.debounce_ms / 1000

    @classmethod
    def from_config(cls, config: Any) -> AutosaveConfig:
        """Read ``autosave.*`` from a Config-like object with dot-notation ``get``."""
        return cls(
            debounce_ms=config.get("autosave.debounce_ms", 500),
            timestamp_policy=config.get("autosave.timestamp_policy", TimestampPolicy.REFRESH.value),
        )
