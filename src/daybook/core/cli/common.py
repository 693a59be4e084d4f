"""Shared setup logic for CLI commands."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import click

from daybook.core.config import Config
from daybook.core.exceptions import ConfigurationError
from daybook.core.utils.logging import setup_logging_from_config
from daybook.journal.config import AutosaveConfig
from daybook.journal.repository import EntryRepository
from daybook.journal.store import MarkdownEntryStore

DAYBOOK_DIR = Path.home() / ".daybook"
CONFIG_PATH = DAYBOOK_DIR / "config.yaml"


@dataclass
class CliContext:
    config: Config
    autosave: AutosaveConfig

    async def open_repository(self) -> EntryRepository:
        store = await MarkdownEntryStore.open(self.config.get_entries_dir())
        return EntryRepository(store)


def load_config(config_file: str | None = None, data_dir: str | None = None) -> Config:
    """Load config from *config_file*, falling back to ~/.daybook/config.yaml.

    An explicit *data_dir* (the ``--data-dir`` flag) wins over the file and env.
    """
    if config_file is None and CONFIG_PATH.exists():
        config_file = str(CONFIG_PATH)
    config = Config(config_file=config_file)
    if data_dir:
        config.set("paths.data_dir", data_dir)
    return config


def build_context(config_file: str | None, data_dir: str | None, log_level: str | None) -> CliContext:
    try:
        config = load_config(config_file, data_dir)
        autosave = AutosaveConfig.from_config(config)
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e
    config.ensure_directories()
    setup_logging_from_config(config, level=log_level)
    return CliContext(config=config, autosave=autosave)


def split_editor_text(text: str) -> tuple[str, str]:
    """First line is the title, everything after the following blank line is the content."""
    title, _, rest = text.partition("\n")
    return title.strip(), rest.lstrip("\n").rstrip("\n")


def join_editor_text(title: str, content: str) -> str:
    return f"{title}\n\n{content}"
