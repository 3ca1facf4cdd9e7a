"""Discovery of skills embedded in a project's dependency directory.

Public API::

    from skillsync.discovery import discover_dependency_skills

    skills = asyncio.run(discover_dependency_skills(Path.cwd()))
    for skill in skills:
        print(f"{skill.name} from {skill.package_name}")
"""

from __future__ import annotations

from skillsync.discovery.dependency_scanner import (
    DEPENDENCY_DIR,
    PACKAGE_SKILL_DIRS,
    DependencyScanner,
    discover_dependency_skills,
)
from skillsync.discovery.models import DiscoveredSkill

__all__ = [
    "DEPENDENCY_DIR",
    "PACKAGE_SKILL_DIRS",
    "DependencyScanner",
    "DiscoveredSkill",
    "discover_dependency_skills",
]
