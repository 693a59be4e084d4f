"""
Logging configuration using loguru.

daybook modules log through ``from loguru import logger`` directly.
Call setup_logging() (or setup_logging_from_config()) once at startup
to pick the level and an optional rotating log file.
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from daybook.core.config import Config

LOG_FILE_NAME = "daybook.log"


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    fmt: str = "<level>[{level.name}]</level> {message}",
    rotation: str = "5 MB",
    retention: str = "14 days",
) -> None:
    """
    Configure loguru with console and optional file output.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR).
        log_file: Path to log file. If None, only logs to stderr.
        fmt: Loguru format string for the console sink.
        rotation: Log file rotation size.
        retention: How long to keep rotated logs.
    """
    level = level.upper()
    logger.remove()
    logger.add(sys.stderr, level=level, format=fmt)

    if log_file:
        os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
        logger.add(
            log_file,
            level=level,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{line} | {message}",
            rotation=rotation,
            retention=retention,
        )


def setup_logging_from_config(config: Config, level: str | None = None, to_file: bool = True) -> None:
    """Configure logging from ``logging.level`` and the config's log directory.

    An explicit *level* (e.g. from a ``--log-level`` flag) wins over config.
    """
    log_file = os.path.join(config.get_log_dir(), LOG_FILE_NAME) if to_file else None
    setup_logging(level=level or config.get("logging.level", "WARNING"), log_file=log_file)
