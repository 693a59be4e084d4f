"""
File I/O utilities: frontmatter handling and atomic async writes.

All functions operate on explicit paths.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import aiofiles
import aiofiles.os
import yaml
from loguru import logger

from daybook.core.exceptions import FileIOError

_FRONTMATTER_RE = re.compile(r"\A---\r?\n(.*?)\r?\n---(?:\r?\n)?(.*)", re.DOTALL)


def parse_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """
    Split markdown text into its YAML frontmatter and body.

    Returns:
        (frontmatter_dict, body). Without frontmatter, returns ({}, text).
        The body is returned verbatim (line endings included) apart from
        the single blank line written after the closing fence.
    """
    m = _FRONTMATTER_RE.match(text)
    if not m:
        return {}, text
    try:
        front = yaml.safe_load(m.group(1)) or {}
    except yaml.YAMLError as e:
        logger.warning(f"Failed to parse markdown frontmatter: {e}")
        return {}, text
    if not isinstance(front, dict):
        return {}, text
    body = m.group(2)
    if body.startswith("\r\n"):
        body = body[2:]
    elif body.startswith("\n"):
        body = body[1:]
    return front, body


def render_frontmatter(front: dict[str, Any], body: str) -> str:
    """Serialize frontmatter and body back into markdown text."""
    yaml_content = yaml.safe_dump(front, default_flow_style=False, sort_keys=False, allow_unicode=True)
    return f"---\n{yaml_content}---\n\n{body}"


async def read_text(path: str | Path, encoding: str = "utf-8") -> str:
    """Read a whole text file."""
    try:
        async with aiofiles.open(path, encoding=encoding, newline="") as f:
            return await f.read()
    except OSError as e:
        raise FileIOError(f"Cannot read {path}: {e}") from e


async def atomic_write_text(path: str | Path, content: str, encoding: str = "utf-8") -> None:
    """Write text via a temp file and rename, so readers never see a torn file."""
    path = Path(path)
    tmp_path = path.with_name(f".{path.name}.tmp")
    try:
        os.makedirs(path.parent, exist_ok=True)
        async with aiofiles.open(tmp_path, "w", encoding=encoding, newline="") as f:
            await f.write(content)
        await aiofiles.os.replace(tmp_path, path)
    except OSError as e:
        raise FileIOError(f"Cannot write {path}: {e}") from e


async def remove_file(path: str | Path) -> bool:
    """Delete a file. Returns False when it did not exist."""
    try:
        await aiofiles.os.remove(path)
    except FileNotFoundError:
        return False
    except OSError as e:
        raise FileIOError(f"Cannot delete {path}: {e}") from e
    return True
