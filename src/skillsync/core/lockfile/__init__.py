"""Project lock file: ``skills-lock.json``.

The package is split into focused submodules:

- ``models``: ``LockEntry`` and ``LocalLock`` with their deterministic JSON
  forms, plus the file name and schema version constants.
- ``store``: tolerant reads, atomic writes and single-entry
  read-modify-write helpers.

All public names are re-exported here.
"""

from skillsync.core.lockfile.models import (
    CURRENT_VERSION,
    LOCAL_LOCK_FILE,
    SOURCE_TYPE_LOCAL,
    SOURCE_TYPE_NODE_MODULES,
    LocalLock,
    LockEntry,
)
from skillsync.core.lockfile.store import (
    add_skill_to_local_lock,
    get_local_lock_path,
    parse_local_lock,
    read_local_lock,
    remove_skill_from_local_lock,
    write_local_lock,
)

__all__ = [
    "CURRENT_VERSION",
    "LOCAL_LOCK_FILE",
    "SOURCE_TYPE_LOCAL",
    "SOURCE_TYPE_NODE_MODULES",
    "LocalLock",
    "LockEntry",
    "add_skill_to_local_lock",
    "get_local_lock_path",
    "parse_local_lock",
    "read_local_lock",
    "remove_skill_from_local_lock",
    "write_local_lock",
]
