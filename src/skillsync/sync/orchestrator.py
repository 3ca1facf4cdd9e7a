"""Sync orchestration: discover, diff against the lock, install, record.

Algorithm:
    1. Discover skills under ``<project>/node_modules``. None found ends the
       run with ``NOTHING_TO_DO``.
    2. Read the lock once. Unless forced, a skill is up to date when it has
       a lock entry and its current content digest equals the stored one.
       Everything else is to be installed. Nothing to install ends the run
       with ``UP_TO_DATE``.
    3. Resolve target agents. Invalid explicit names raise
       ``InvalidAgentError``; a cancelled selection or declined
       confirmation ends the run with ``CANCELLED``. Nothing has been
       written at that point.
    4. Install every (skill, agent) pair. Skills are installed concurrently;
       the agents of one skill are handled in sequence because they share
       the canonical copy. Failures are recorded, never raised.
    5. Once every install has settled, each skill with at least one success
       gets its digest recomputed from the source folder and its lock entry
       written. Lock writes run one after another; a failed write is logged
       and the remaining entries still proceed.

Running twice against an unchanged tree installs nothing and does not touch
the lock file on the second run.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Protocol

from skillsync import __version__
from skillsync.agents.installer import InstallMode, InstallResult, SkillInstaller
from skillsync.agents.registry import detect_installed_agents
from skillsync.agents.selection import AutoPrompter, SyncPrompter, resolve_target_agents
from skillsync.core.hashing import compute_skill_folder_hash
from skillsync.core.lockfile import (
    SOURCE_TYPE_NODE_MODULES,
    LocalLock,
    LockEntry,
    add_skill_to_local_lock,
    read_local_lock,
)
from skillsync.discovery.dependency_scanner import DependencyScanner
from skillsync.discovery.models import DiscoveredSkill
from skillsync.parsers.base import ManifestParser
from skillsync.parsers.skill_manifest import parse_skill_manifest
from skillsync.sync.models import (
    InstallAttempt,
    SyncOptions,
    SyncOutcome,
    SyncPlan,
    SyncReport,
)
from skillsync.telemetry import TelemetryClient

logger = logging.getLogger(__name__)

SYNC_EVENT = "experimental_sync"


class Installer(Protocol):
    async def install(
        self,
        skill: DiscoveredSkill,
        agent: str,
        *,
        cwd: str | Path,
        mode: InstallMode = InstallMode.SYMLINK,
    ) -> InstallResult: ...


def dedupe_skills(skills: list[DiscoveredSkill]) -> tuple[list[DiscoveredSkill], list[DiscoveredSkill]]:
    """Keep one skill per name.

    Skills are ordered by package name then path, and the first occurrence
    of each name wins, so the choice does not depend on discovery order.

    Returns:
        ``(kept, dropped)``; ``kept`` is sorted by skill name.
    """
    kept: dict[str, DiscoveredSkill] = {}
    dropped: list[DiscoveredSkill] = []
    for skill in sorted(skills, key=lambda s: (s.package_name, str(s.path))):
        if skill.name in kept:
            logger.warning(
                "Skill %r from %s shadowed by the one from %s",
                skill.name, skill.package_name, kept[skill.name].package_name,
            )
            dropped.append(skill)
            continue
        kept[skill.name] = skill
    return sorted(kept.values(), key=lambda s: s.name), dropped


class SyncOrchestrator:
    """Synchronizes dependency-shipped skills into agent directories.

    Usage::

        orchestrator = SyncOrchestrator(Path.cwd())
        report = asyncio.run(orchestrator.run(SyncOptions(yes=True)))

    Attributes:
        cwd: Project directory (holds ``node_modules`` and the lock file).
        installer: Performs single (skill, agent) installs.
        prompter: Supplies interactive decisions.
        telemetry: Receives the end-of-run event.
        home: Home directory used for agent detection.
        source_type: ``sourceType`` recorded in lock entries.
    """

    def __init__(
        self,
        cwd: str | Path,
        *,
        installer: Installer | None = None,
        prompter: SyncPrompter | None = None,
        telemetry: TelemetryClient | None = None,
        parser: ManifestParser = parse_skill_manifest,
        home: Path | None = None,
        version: str = __version__,
        source_type: str = SOURCE_TYPE_NODE_MODULES,
    ) -> None:
        self.cwd = Path(cwd)
        self.installer = installer if installer is not None else SkillInstaller()
        self.prompter = prompter if prompter is not None else AutoPrompter()
        self.telemetry = telemetry if telemetry is not None else TelemetryClient(version)
        self.scanner = DependencyScanner(parser=parser)
        self.home = home
        self.source_type = source_type

    async def discover(self) -> list[DiscoveredSkill]:
        """Discover skills in the project's dependency directory (unordered)."""
        return await self.scanner.scan(self.cwd / "node_modules")

    async def _is_up_to_date(self, skill: DiscoveredSkill, lock: LocalLock) -> bool:
        entry = lock.skills.get(skill.name)
        if entry is None:
            return False
        try:
            current = await compute_skill_folder_hash(skill.path)
        except (OSError, ValueError) as exc:
            logger.warning("Could not hash %s: %s", skill.path, exc)
            return False
        return current == entry.computed_hash

    async def plan(self, options: SyncOptions | None = None) -> SyncPlan:
        """Discover skills and partition them against one lock snapshot.

        Nothing is written.
        """
        options = options or SyncOptions()
        discovered, duplicates = dedupe_skills(await self.discover())
        plan = SyncPlan(discovered=discovered, duplicates=duplicates)
        if not discovered:
            return plan

        if options.force:
            plan.to_install = list(discovered)
            return plan

        lock = await read_local_lock(self.cwd)
        fresh = await asyncio.gather(*(self._is_up_to_date(s, lock) for s in discovered))
        for skill, is_fresh in zip(discovered, fresh):
            (plan.up_to_date if is_fresh else plan.to_install).append(skill)
        return plan

    async def select_targets(self, options: SyncOptions, plan: SyncPlan) -> list[str] | None:
        """Resolve target agents and confirm; None means the user cancelled.

        Raises:
            InvalidAgentError: If ``options.agents`` names an unknown agent.
        """
        requested = list(options.agents) if options.agents else None
        installed: list[str] = []
        if not requested:
            installed = await asyncio.to_thread(detect_installed_agents, self.home)

        targets = resolve_target_agents(
            requested, yes=options.yes, installed=installed, prompter=self.prompter,
        )
        if not targets:
            return None

        if not options.yes:
            names = ", ".join(skill.name for skill in plan.to_install)
            if not self.prompter.confirm(f"Sync {names} into {', '.join(targets)}?"):
                return None
        return targets

    async def _install_skill(
        self, skill: DiscoveredSkill, targets: list[str], mode: InstallMode,
    ) -> list[InstallAttempt]:
        attempts: list[InstallAttempt] = []
        for agent in targets:
            result = await self.installer.install(skill, agent, cwd=self.cwd, mode=mode)
            attempts.append(InstallAttempt(skill=skill, agent=agent, result=result))
        return attempts

    async def _record(self, skill: DiscoveredSkill) -> bool:
        try:
            computed_hash = await compute_skill_folder_hash(skill.path)
            await add_skill_to_local_lock(
                skill.name,
                LockEntry(
                    source=skill.package_name,
                    source_type=self.source_type,
                    computed_hash=computed_hash,
                ),
                self.cwd,
            )
        except (OSError, ValueError) as exc:
            logger.warning("Failed to update lock entry for %s: %s", skill.name, exc)
            return False
        return True

    async def run(self, options: SyncOptions | None = None) -> SyncReport:
        """Run a full sync.

        Returns:
            The ``SyncReport``; its ``outcome`` distinguishes an empty
            dependency tree, an already synchronized tree, a cancelled run
            and a completed one.

        Raises:
            InvalidAgentError: If ``options.agents`` names an unknown agent.
        """
        options = options or SyncOptions()
        plan = await self.plan(options)

        if not plan.discovered:
            return SyncReport(outcome=SyncOutcome.NOTHING_TO_DO, plan=plan)
        if not plan.to_install:
            return SyncReport(outcome=SyncOutcome.UP_TO_DATE, plan=plan)

        targets = await self.select_targets(options, plan)
        if targets is None:
            logger.info("Sync cancelled before installation")
            return SyncReport(outcome=SyncOutcome.CANCELLED, plan=plan)

        batches = await asyncio.gather(
            *(self._install_skill(skill, targets, options.mode) for skill in plan.to_install)
        )
        report = SyncReport(
            outcome=SyncOutcome.COMPLETED,
            plan=plan,
            targets=targets,
            attempts=[attempt for batch in batches for attempt in batch],
        )

        succeeded = set(report.installed_skills)
        for skill in plan.to_install:
            if skill.name not in succeeded:
                continue
            if await self._record(skill):
                report.locked.append(skill.name)
            else:
                report.lock_failures.append(skill.name)

        self.telemetry.track(
            SYNC_EVENT,
            skillCount=len(plan.to_install),
            successCount=len(succeeded),
            agents=",".join(targets),
        )
        return report
