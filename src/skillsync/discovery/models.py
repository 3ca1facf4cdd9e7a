"""Data models for the discovery module."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from skillsync.parsers.base import SkillRecord


@dataclass(frozen=True)
class DiscoveredSkill:
    """A skill found inside a dependency tree.

    Attributes:
        name: Skill name from its manifest.
        path: The skill folder.
        package_name: Owning package, ``@scope/name`` for scoped packages.
        description: Manifest description, possibly empty.
    """

    name: str
    path: Path
    package_name: str
    description: str = ""

    @classmethod
    def from_record(cls, record: SkillRecord, package_name: str) -> DiscoveredSkill:
        return cls(
            name=record.name,
            path=record.path,
            package_name=package_name,
            description=record.description,
        )
