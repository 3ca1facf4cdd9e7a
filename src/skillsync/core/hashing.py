"""Content hashing for skill folders.

A skill folder's digest is SHA-256 over every regular file beneath it:
for each file, in sorted relative-path order, the bytes of the relative
path (``/`` separated) followed by the file's raw content. Including the
path means a rename with identical bytes still changes the digest.

Paths are encoded as UTF-8 with ``surrogateescape``, so a file name that is
not valid UTF-8 hashes as its original bytes instead of failing.

Determinism depends entirely on the sort. ``os.walk`` makes no ordering
promise, so the collected files are always sorted by their relative path
string before anything is hashed.

Directories named ``.git`` or ``node_modules`` are skipped at every depth
so that VCS metadata and nested dependency installs never mark a skill as
changed. Symlinked directories are not followed; a symlink to a regular
file is hashed by its target's content.

Files are read one at a time, so hashing holds at most one file descriptor
open. The async entry point runs the walk in a worker thread; concurrent
hashes are bounded by the default executor's worker count.
"""

from __future__ import annotations

import asyncio
import hashlib
import os
from collections.abc import Iterable
from pathlib import Path

# Directory names excluded from hashing (and from copies made by the installer).
EXCLUDED_DIR_NAMES: frozenset[str] = frozenset({".git", "node_modules"})

_READ_CHUNK = 1024 * 1024


def is_excluded_path(parts: Iterable[str]) -> bool:
    """Return True if any path segment names an excluded directory.

    Args:
        parts: Path segments, e.g. ``Path("a/.git/HEAD").parts``.

    Returns:
        True when the path lies inside ``.git`` or ``node_modules``.
    """
    return any(part in EXCLUDED_DIR_NAMES for part in parts)


def _encode_path(relative_path: str) -> bytes:
    return relative_path.encode("utf-8", "surrogateescape")


def _raise(err: OSError) -> None:
    raise err


def _collect_files(base: Path) -> list[tuple[str, Path]]:
    collected: list[tuple[str, Path]] = []
    for root, dirnames, filenames in os.walk(base, onerror=_raise):
        dirnames[:] = [d for d in dirnames if not is_excluded_path((d,))]
        root_path = Path(root)
        for filename in filenames:
            path = root_path / filename
            if path.is_file():
                collected.append((path.relative_to(base).as_posix(), path))
    collected.sort(key=lambda item: item[0])
    return collected


def compute_skill_folder_hash_sync(skill_dir: str | Path) -> str:
    """Compute the SHA-256 content digest of a skill folder (blocking).

    Args:
        skill_dir: Root of the skill folder.

    Returns:
        64-character lowercase hex digest.

    Raises:
        FileNotFoundError: If ``skill_dir`` does not exist.
        OSError: If any directory or file under it cannot be read. A
            partial digest is never returned.
    """
    base = Path(skill_dir)
    if not base.is_dir():
        raise FileNotFoundError(f"Skill folder not found: {base}")

    digest = hashlib.sha256()
    for relative_path, path in _collect_files(base):
        digest.update(_encode_path(relative_path))
        with path.open("rb") as fh:
            for chunk in iter(lambda: fh.read(_READ_CHUNK), b""):
                digest.update(chunk)
    return digest.hexdigest()


async def compute_skill_folder_hash(skill_dir: str | Path) -> str:
    """Compute the digest of a skill folder without blocking the event loop.

    Same result and errors as :func:`compute_skill_folder_hash_sync`.
    """
    return await asyncio.to_thread(compute_skill_folder_hash_sync, skill_dir)
