"""Lock file data models: LockEntry and LocalLock.

Defines the structures persisted in ``skills-lock.json``. The format is
intentionally minimal and free of timestamps: two branches that each add a
different skill produce disjoint JSON keys, which version control merges
without conflict.

Serialization is deterministic. Skill entries are emitted in ascending
name order, entry fields keep a fixed order, indentation is two spaces, and the
document ends with exactly one newline. Re-writing an unchanged lock
produces byte-identical output.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from skillsync.exceptions import LockfileError

LOCAL_LOCK_FILE = "skills-lock.json"
CURRENT_VERSION = 1

# Provenance tags for the ``sourceType`` field.
SOURCE_TYPE_NODE_MODULES = "node_modules"
SOURCE_TYPE_LOCAL = "local"

_ENTRY_FIELDS = ("source", "sourceType", "computedHash")


@dataclass(frozen=True)
class LockEntry:
    """A single skill entry in the lock file.

    Attributes:
        source: Where the skill came from: npm package name, ``owner/repo``,
            a local path. Opaque to this package.
        source_type: Provenance class, e.g. ``"node_modules"`` or ``"local"``.
        computed_hash: SHA-256 content digest of the skill folder at the last
            successful install.
    """

    source: str
    source_type: str
    computed_hash: str

    def to_dict(self) -> dict[str, str]:
        return {
            "source": self.source,
            "sourceType": self.source_type,
            "computedHash": self.computed_hash,
        }

    @classmethod
    def from_dict(cls, data: Any) -> LockEntry:
        """Build an entry from its JSON object form.

        Raises:
            LockfileError: If ``data`` is not an object with string
                ``source``, ``sourceType`` and ``computedHash`` fields.
        """
        if not isinstance(data, dict):
            raise LockfileError(f"Lock entry must be an object, got {type(data).__name__}")
        for key in _ENTRY_FIELDS:
            if not isinstance(data.get(key), str):
                raise LockfileError(f"Lock entry field {key!r} missing or not a string")
        return cls(
            source=data["source"],
            source_type=data["sourceType"],
            computed_hash=data["computedHash"],
        )


@dataclass
class LocalLock:
    """The project-scoped lock file.

    Attributes:
        version: Schema version of the document.
        skills: Mapping of skill name to its entry.
    """

    version: int = CURRENT_VERSION
    skills: dict[str, LockEntry] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> LocalLock:
        return cls(version=CURRENT_VERSION, skills={})

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "skills": {name: self.skills[name].to_dict() for name in sorted(self.skills)},
        }

    def to_json(self) -> str:
        """Serialize to the on-disk text form, trailing newline included."""
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False) + "\n"

    @classmethod
    def from_dict(cls, data: Any) -> LocalLock:
        """Deserialize from parsed JSON.

        Raises:
            LockfileError: If ``version`` is not an integer, ``skills`` is
                not an object, or any entry is malformed.
        """
        if not isinstance(data, dict):
            raise LockfileError("Lock file root must be an object")
        version = data.get("version")
        # bool is an int subclass; reject it explicitly.
        if not isinstance(version, int) or isinstance(version, bool):
            raise LockfileError("Lock file 'version' missing or not an integer")
        skills = data.get("skills")
        if not isinstance(skills, dict):
            raise LockfileError("Lock file 'skills' missing or not an object")
        return cls(
            version=version,
            skills={name: LockEntry.from_dict(entry) for name, entry in skills.items()},
        )
