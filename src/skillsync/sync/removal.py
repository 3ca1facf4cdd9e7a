"""Explicit removal of skills: installed copies and lock entries."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from skillsync.agents.installer import SkillInstaller
from skillsync.agents.registry import agent_names
from skillsync.core.lockfile import remove_skill_from_local_lock

logger = logging.getLogger(__name__)


@dataclass
class RemoveReport:
    """Result of a removal.

    Attributes:
        removed: Skill name to the filesystem paths deleted for it.
        unlocked: Skill names whose lock entry was dropped.
        not_found: Names with neither an installation nor a lock entry.
    """

    removed: dict[str, list[Path]] = field(default_factory=dict)
    unlocked: list[str] = field(default_factory=list)
    not_found: list[str] = field(default_factory=list)


async def remove_skills(
    names: list[str],
    *,
    cwd: str | Path,
    installer: SkillInstaller | None = None,
    agents: list[str] | None = None,
) -> RemoveReport:
    """Uninstall skills from every agent and drop their lock entries.

    Args:
        names: Skill names to remove.
        cwd: Project directory.
        installer: Installer used for uninstalling (default ``SkillInstaller``).
        agents: Agents to clean up; defaults to every known agent.

    Returns:
        A ``RemoveReport``.

    Raises:
        OSError: If an existing installation cannot be deleted. Lock entries
            of skills processed before the failure stay removed.
    """
    installer = installer if installer is not None else SkillInstaller()
    targets = agents if agents is not None else agent_names()
    report = RemoveReport()

    for name in names:
        paths = await installer.uninstall(name, targets, cwd=cwd)
        if paths:
            report.removed[name] = paths
        if await remove_skill_from_local_lock(name, cwd):
            report.unlocked.append(name)
        if not paths and name not in report.unlocked:
            report.not_found.append(name)
        logger.debug("Removed %s: %d path(s)", name, len(paths))

    return report
