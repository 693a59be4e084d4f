"""daybook — a small local journal with autosaving drafts."""

__version__ = "0.1.0"
