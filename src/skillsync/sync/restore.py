"""Restoring a project's skills from ``skills-lock.json``.

A fresh checkout has the lock file but none of the installed copies.
Restoring walks the lock and reinstalls into the universal
``.agents/skills`` directory:

- ``node_modules`` entries are restored by a non-interactive sync, which
  rediscovers them in the dependency tree (and picks up any new ones).
- ``local`` entries point at a directory on disk. The named skills are
  looked up there with the same package layout rules discovery uses,
  reinstalled, and their lock entries refreshed.
- Any other source type needs a network fetch and is reported as skipped.

Source groups are independent: one failing group is logged and recorded,
and the remaining groups still run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from skillsync.agents.registry import get_universal_agents
from skillsync.core.hashing import compute_skill_folder_hash
from skillsync.core.lockfile import (
    SOURCE_TYPE_LOCAL,
    SOURCE_TYPE_NODE_MODULES,
    LockEntry,
    add_skill_to_local_lock,
    read_local_lock,
)
from skillsync.discovery.dependency_scanner import DependencyScanner
from skillsync.exceptions import SkillSyncError
from skillsync.sync.models import SyncOptions, SyncReport
from skillsync.sync.orchestrator import SyncOrchestrator

logger = logging.getLogger(__name__)


@dataclass
class SourceGroup:
    """Lock entries sharing one source."""

    source: str
    source_type: str
    skills: list[str] = field(default_factory=list)


@dataclass
class RestoreReport:
    """Result of restoring from the lock file.

    Attributes:
        lock_empty: The lock had no entries; nothing was attempted.
        restored: Skill names reinstalled from local sources.
        missing: Local skill names no longer present at their source.
        skipped: Skill names whose source type cannot be restored offline.
        failed: ``(source, error)`` pairs for groups or skills that failed.
        lock_failures: Restored skill names whose lock entry could not be
            refreshed.
        sync_report: Report of the node_modules sync, if one ran.
    """

    lock_empty: bool = False
    restored: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: list[tuple[str, str]] = field(default_factory=list)
    lock_failures: list[str] = field(default_factory=list)
    sync_report: SyncReport | None = None


def group_by_source(entries: dict[str, LockEntry]) -> tuple[list[str], list[SourceGroup]]:
    """Split lock entries into node_modules names and per-source groups.

    Returns:
        ``(node_module_names, groups)``; groups keep first-seen source order
        over the sorted entry names.
    """
    node_modules: list[str] = []
    groups: dict[str, SourceGroup] = {}
    for name in sorted(entries):
        entry = entries[name]
        if entry.source_type == SOURCE_TYPE_NODE_MODULES:
            node_modules.append(name)
            continue
        group = groups.get(entry.source)
        if group is None:
            group = groups[entry.source] = SourceGroup(entry.source, entry.source_type)
        group.skills.append(name)
    return node_modules, list(groups.values())


class LockRestorer:
    """Reinstalls the skills recorded in a project's lock file.

    Attributes:
        orchestrator: Used both for the node_modules sync and as the source
            of the installer and telemetry collaborators.
    """

    def __init__(self, orchestrator: SyncOrchestrator) -> None:
        self.orchestrator = orchestrator

    @property
    def cwd(self) -> Path:
        return self.orchestrator.cwd

    def _resolve_source(self, source: str) -> Path:
        path = Path(source).expanduser()
        return path if path.is_absolute() else self.cwd / path

    async def _restore_local(
        self, group: SourceGroup, targets: list[str], report: RestoreReport,
    ) -> None:
        scanner = DependencyScanner()
        found = await scanner.scan_package(self._resolve_source(group.source), group.source)
        by_name = {skill.name: skill for skill in found}

        for name in group.skills:
            skill = by_name.get(name)
            if skill is None:
                logger.warning("Skill %r no longer present in %s", name, group.source)
                report.missing.append(name)
                continue

            results = [
                await self.orchestrator.installer.install(skill, agent, cwd=self.cwd)
                for agent in targets
            ]
            if not any(r.success for r in results):
                errors = "; ".join(r.error or "unknown error" for r in results)
                report.failed.append((name, errors))
                continue

            report.restored.append(name)
            try:
                computed_hash = await compute_skill_folder_hash(skill.path)
                await add_skill_to_local_lock(
                    name,
                    LockEntry(group.source, SOURCE_TYPE_LOCAL, computed_hash),
                    self.cwd,
                )
            except (OSError, ValueError) as exc:
                logger.warning("Failed to update lock entry for %s: %s", name, exc)
                report.lock_failures.append(name)

    async def restore(self, *, force: bool = False) -> RestoreReport:
        """Restore every skill in the lock file into the universal agents.

        Args:
            force: Passed to the node_modules sync to reinstall unchanged skills.
        """
        lock = await read_local_lock(self.cwd)
        if not lock.skills:
            return RestoreReport(lock_empty=True)

        report = RestoreReport()
        targets = get_universal_agents()
        node_module_names, groups = group_by_source(lock.skills)

        for group in groups:
            if group.source_type != SOURCE_TYPE_LOCAL:
                logger.info(
                    "Skipping %d skill(s) from %s (%s sources need a network fetch)",
                    len(group.skills), group.source, group.source_type,
                )
                report.skipped.extend(group.skills)
                continue
            try:
                await self._restore_local(group, targets, report)
            except (OSError, SkillSyncError) as exc:
                logger.error("Failed to restore from %s: %s", group.source, exc)
                report.failed.append((group.source, str(exc)))

        if node_module_names:
            try:
                report.sync_report = await self.orchestrator.run(
                    SyncOptions(agents=tuple(targets), yes=True, force=force)
                )
            except (OSError, SkillSyncError) as exc:
                logger.error("Failed to sync node_modules skills: %s", exc)
                report.failed.append((SOURCE_TYPE_NODE_MODULES, str(exc)))

        return report
