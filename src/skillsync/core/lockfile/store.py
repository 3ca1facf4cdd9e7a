"""Lock store: reading, writing and mutating ``skills-lock.json``.

Reads never fail. A missing file, undecodable bytes, invalid JSON (merge
conflict markers included), a schema mismatch, or a version older than
``CURRENT_VERSION`` all degrade to an empty lock. The next sync then
reinstalls everything, which is conservative but always safe.

Writes go through a temporary file in the same directory followed by
``os.replace`` so readers never observe a half-written document.

``add_skill_to_local_lock`` and ``remove_skill_from_local_lock`` are
whole-file read-modify-write cycles. Nothing here guards against another
process writing the same file concurrently; callers running several syncs
against one project must serialize them.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path

import aiofiles

from skillsync.core.lockfile.models import (
    CURRENT_VERSION,
    LOCAL_LOCK_FILE,
    LocalLock,
    LockEntry,
)
from skillsync.exceptions import LockfileError

logger = logging.getLogger(__name__)


def get_local_lock_path(cwd: str | Path | None = None) -> Path:
    """Return the lock file path for a project directory (default: cwd)."""
    return Path(cwd if cwd is not None else os.getcwd()) / LOCAL_LOCK_FILE


def parse_local_lock(text: str) -> LocalLock:
    """Parse lock file text, degrading any defect to an empty lock.

    Args:
        text: Raw document text.

    Returns:
        The parsed lock, or ``LocalLock.empty()`` if the text is not valid
        JSON, does not match the schema, or declares an older version.
    """
    try:
        lock = LocalLock.from_dict(json.loads(text))
    except (ValueError, LockfileError) as exc:
        logger.debug("Ignoring unreadable lock file content: %s", exc)
        return LocalLock.empty()

    if lock.version < CURRENT_VERSION:
        logger.debug(
            "Lock file version %d is older than %d; treating as empty",
            lock.version, CURRENT_VERSION,
        )
        return LocalLock.empty()
    return lock


async def read_local_lock(cwd: str | Path | None = None) -> LocalLock:
    """Read the project lock file.

    Args:
        cwd: Project directory holding ``skills-lock.json``.

    Returns:
        The stored lock, or an empty lock when the file is absent or
        corrupt. Never raises for bad content.
    """
    lock_path = get_local_lock_path(cwd)
    try:
        async with aiofiles.open(lock_path, "r", encoding="utf-8") as fh:
            text = await fh.read()
    except FileNotFoundError:
        return LocalLock.empty()
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Could not read %s: %s", lock_path, exc)
        return LocalLock.empty()
    return parse_local_lock(text)


def _replace_file(path: Path, content: str) -> None:
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as fh:
            fh.write(content)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


async def write_local_lock(lock: LocalLock, cwd: str | Path | None = None) -> None:
    """Persist a full lock structure.

    Entries are re-sorted by name regardless of insertion order; the output
    ends with a single newline.

    Raises:
        OSError: If the file cannot be written.
    """
    lock_path = get_local_lock_path(cwd)
    await asyncio.to_thread(_replace_file, lock_path, lock.to_json())


async def add_skill_to_local_lock(
    skill_name: str,
    entry: LockEntry,
    cwd: str | Path | None = None,
) -> None:
    """Add or replace one entry (read, mutate, write back)."""
    lock = await read_local_lock(cwd)
    lock.skills[skill_name] = entry
    await write_local_lock(lock, cwd)


async def remove_skill_from_local_lock(
    skill_name: str,
    cwd: str | Path | None = None,
) -> bool:
    """Remove one entry.

    Returns:
        True if the entry existed and the lock was rewritten, False if the
        name was not present (nothing is written in that case).
    """
    lock = await read_local_lock(cwd)
    if skill_name not in lock.skills:
        return False
    del lock.skills[skill_name]
    await write_local_lock(lock, cwd)
    return True
