"""Scanner for skills shipped inside ``node_modules``.

Discovery Algorithm:
    1. List the immediate children of ``<project>/node_modules``. Hidden
       entries (leading ``.``) and non-directories are skipped.
    2. A child named ``@scope`` is a scope: each directory inside it is a
       package named ``@scope/<child>``. Any other child is a package named
       after the directory.
    3. For each package, a ``SKILL.md`` at the package root is the package's
       only skill. Otherwise every immediate child directory of the package
       root, of ``skills/`` and of ``.agents/skills/`` holding a valid
       ``SKILL.md`` is a skill. One package may contribute many skills.

The tree belongs to the package manager, not to us, so discovery is best
effort: a missing ``node_modules``, an unreadable scope, or a search
location that does not exist yields nothing for that subtree rather than
an error.

Scopes and packages are scanned concurrently with ``asyncio.gather``. The
order of the returned list is unspecified; callers sort for display.
"""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path

from skillsync.discovery.models import DiscoveredSkill
from skillsync.parsers.base import MANIFEST_FILENAME, ManifestParser
from skillsync.parsers.skill_manifest import parse_skill_manifest

logger = logging.getLogger(__name__)

DEPENDENCY_DIR = "node_modules"

# Locations inside a package whose child directories may hold skills,
# relative to the package root ("" is the root itself).
PACKAGE_SKILL_DIRS: tuple[str, ...] = ("", "skills", os.path.join(".agents", "skills"))


def _list_dirs(directory: Path) -> list[Path]:
    """Return the child directories of ``directory`` (symlinks followed)."""
    found: list[Path] = []
    with os.scandir(directory) as entries:
        for entry in entries:
            try:
                if entry.is_dir():
                    found.append(Path(entry.path))
            except OSError:
                continue
    return found


class DependencyScanner:
    """Finds skills inside a dependency directory.

    Usage::

        scanner = DependencyScanner()
        skills = await scanner.scan(Path("node_modules"))

    Attributes:
        parser: Manifest parser, ``path -> SkillRecord | None``.
        skill_dirs: Package-relative search locations, tried in order.
    """

    def __init__(
        self,
        parser: ManifestParser = parse_skill_manifest,
        skill_dirs: tuple[str, ...] = PACKAGE_SKILL_DIRS,
    ) -> None:
        self.parser = parser
        self.skill_dirs = skill_dirs

    async def _parse(self, manifest_path: Path, package_name: str) -> DiscoveredSkill | None:
        try:
            record = await asyncio.to_thread(self.parser, manifest_path)
        except Exception:
            logger.warning("Failed to parse manifest: %s", manifest_path, exc_info=True)
            return None
        if record is None:
            return None
        return DiscoveredSkill.from_record(record, package_name)

    async def _list_dirs(self, directory: Path) -> list[Path]:
        try:
            return await asyncio.to_thread(_list_dirs, directory)
        except OSError:
            return []

    async def scan_package(self, package_dir: Path, package_name: str) -> list[DiscoveredSkill]:
        """Collect the skills of one package directory.

        Args:
            package_dir: The package's root folder.
            package_name: Identifier recorded as the skills' origin.

        Returns:
            The root skill alone if the package has one, otherwise every
            skill found one level inside the conventional locations.
        """
        root_skill = await self._parse(package_dir / MANIFEST_FILENAME, package_name)
        if root_skill is not None:
            return [root_skill]

        skills: list[DiscoveredSkill] = []
        for rel in self.skill_dirs:
            search_dir = package_dir / rel if rel else package_dir
            for child in sorted(await self._list_dirs(search_dir)):
                skill = await self._parse(child / MANIFEST_FILENAME, package_name)
                if skill is not None:
                    skills.append(skill)
        return skills

    async def _scan_scope(self, scope_dir: Path) -> list[DiscoveredSkill]:
        packages = await self._list_dirs(scope_dir)
        batches = await asyncio.gather(
            *(self.scan_package(pkg, f"{scope_dir.name}/{pkg.name}") for pkg in packages)
        )
        return [skill for batch in batches for skill in batch]

    async def scan(self, dependency_dir: Path) -> list[DiscoveredSkill]:
        """Scan a dependency directory.

        Args:
            dependency_dir: Usually ``<project>/node_modules``.

        Returns:
            Every skill found, in no particular order. Empty when the
            directory is missing or unreadable.
        """
        children = await self._list_dirs(dependency_dir)

        tasks = []
        for child in children:
            if child.name.startswith("."):
                continue
            if child.name.startswith("@"):
                tasks.append(self._scan_scope(child))
            else:
                tasks.append(self.scan_package(child, child.name))

        batches = await asyncio.gather(*tasks)
        skills = [skill for batch in batches for skill in batch]
        logger.debug("Discovered %d skills under %s", len(skills), dependency_dir)
        return skills


async def discover_dependency_skills(
    cwd: str | Path,
    *,
    parser: ManifestParser = parse_skill_manifest,
    dependency_dir: str = DEPENDENCY_DIR,
) -> list[DiscoveredSkill]:
    """Discover every skill in ``<cwd>/node_modules``.

    Args:
        cwd: Project directory.
        parser: Manifest parser to use.
        dependency_dir: Name of the dependency directory under ``cwd``.

    Returns:
        Discovered skills with their owning package names, unordered.
    """
    scanner = DependencyScanner(parser=parser)
    return await scanner.scan(Path(cwd) / dependency_dir)
