"""Data models for sync runs: options, plan, attempts and the final report."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from skillsync.agents.installer import InstallMode, InstallResult
from skillsync.discovery.models import DiscoveredSkill


class SyncOutcome(enum.Enum):
    """How a sync run ended.

    NOTHING_TO_DO: no skills were discovered at all.
    UP_TO_DATE: skills were discovered but every one matches the lock.
    CANCELLED: the user aborted target selection or confirmation.
    COMPLETED: installation ran (possibly with per-item failures).
    """

    NOTHING_TO_DO = "nothing_to_do"
    UP_TO_DATE = "up_to_date"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


@dataclass(frozen=True)
class SyncOptions:
    """Caller-supplied settings for one sync run.

    Attributes:
        agents: Requested agent names (``*`` for all); None to detect/prompt.
        yes: Skip prompts and accept defaults.
        force: Reinstall every discovered skill regardless of the lock.
        mode: Install mode for non-universal agents.
    """

    agents: tuple[str, ...] | None = None
    yes: bool = False
    force: bool = False
    mode: InstallMode = InstallMode.SYMLINK


@dataclass
class SyncPlan:
    """Partition of discovered skills against a single lock snapshot.

    Attributes:
        discovered: Every discovered skill, duplicates removed, sorted by name.
        up_to_date: Skills whose current digest equals the locked digest.
        to_install: Skills that are new, changed, or forced.
        duplicates: Skills dropped because an earlier package used the name.
    """

    discovered: list[DiscoveredSkill] = field(default_factory=list)
    up_to_date: list[DiscoveredSkill] = field(default_factory=list)
    to_install: list[DiscoveredSkill] = field(default_factory=list)
    duplicates: list[DiscoveredSkill] = field(default_factory=list)


@dataclass(frozen=True)
class InstallAttempt:
    """One (skill, agent) installation and its result."""

    skill: DiscoveredSkill
    agent: str
    result: InstallResult

    @property
    def success(self) -> bool:
        return self.result.success


@dataclass
class SyncReport:
    """Everything a sync run did.

    Attributes:
        outcome: How the run ended.
        plan: The partition the run acted on.
        targets: Agents installed into (empty unless COMPLETED).
        attempts: Every (skill, agent) installation attempt.
        locked: Skill names whose lock entry was written.
        lock_failures: Skill names whose lock entry could not be written.
    """

    outcome: SyncOutcome
    plan: SyncPlan
    targets: list[str] = field(default_factory=list)
    attempts: list[InstallAttempt] = field(default_factory=list)
    locked: list[str] = field(default_factory=list)
    lock_failures: list[str] = field(default_factory=list)

    @property
    def installed_skills(self) -> list[str]:
        """Distinct names of skills with at least one successful install."""
        return sorted({a.skill.name for a in self.attempts if a.success})

    @property
    def installed_count(self) -> int:
        return len(self.installed_skills)

    @property
    def failed_attempts(self) -> list[InstallAttempt]:
        return [a for a in self.attempts if not a.success]

    @property
    def failed_count(self) -> int:
        return len(self.failed_attempts)

    def attempts_by_skill(self) -> dict[str, list[InstallAttempt]]:
        """Group attempts by skill name, preserving attempt order."""
        grouped: dict[str, list[InstallAttempt]] = {}
        for attempt in self.attempts:
            grouped.setdefault(attempt.skill.name, []).append(attempt)
        return grouped
