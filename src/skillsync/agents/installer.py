"""Installation of a skill folder into an agent's skills directory.

Every install first materializes the skill in the canonical, agent-neutral
location ``<project>/.agents/skills/<name>``. Universal agents read that
directory directly. Other agents get either:

- ``symlink`` mode: a relative symlink from their own skills directory to
  the canonical copy. If the platform refuses the symlink, the folder is
  copied instead and the result reports ``copy`` mode.
- ``copy`` mode: an independent copy in their own skills directory, with
  no canonical copy.

``.git`` and ``node_modules`` are never copied.

``SkillInstaller.install`` never raises. Failures come back as an
``InstallResult`` with ``success=False`` and an error message, so one bad
(skill, agent) pair cannot abort a batch.
"""

from __future__ import annotations

import asyncio
import enum
import logging
import os
import re
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from skillsync.agents.registry import UNIVERSAL_SKILLS_DIR, AgentProfile, get_agent
from skillsync.core.hashing import EXCLUDED_DIR_NAMES
from skillsync.exceptions import InstallError

logger = logging.getLogger(__name__)

_UNSAFE_NAME_CHARS = re.compile(r"[^a-z0-9._]+")
_MAX_NAME_LENGTH = 255


class InstallMode(str, enum.Enum):
    """How a skill reaches a non-universal agent's directory."""

    SYMLINK = "symlink"
    COPY = "copy"


class InstallableSkill(Protocol):
    name: str
    path: Path


@dataclass(frozen=True)
class InstallResult:
    """Outcome of installing one skill for one agent.

    Attributes:
        success: Whether the skill is now available to the agent.
        path: Where the agent sees the skill.
        canonical_path: The canonical copy, when one was written.
        mode: The mode actually used (may fall back from symlink to copy).
        error: Failure description when ``success`` is False.
    """

    success: bool
    path: Path | None
    canonical_path: Path | None = None
    mode: InstallMode | None = None
    error: str | None = None


def sanitize_skill_name(name: str) -> str:
    """Turn a skill name into a safe single directory name.

    Lowercases, collapses runs of unsafe characters into ``-`` and strips
    leading/trailing dots and dashes, so the result can never escape the
    skills directory.
    """
    cleaned = _UNSAFE_NAME_CHARS.sub("-", name.lower()).strip(".-")
    return cleaned[:_MAX_NAME_LENGTH] or "unnamed-skill"


def get_canonical_path(skill_name: str, *, cwd: str | Path) -> Path:
    """Return the canonical install location for a skill."""
    return Path(cwd) / UNIVERSAL_SKILLS_DIR / sanitize_skill_name(skill_name)


def get_agent_skill_path(skill_name: str, agent: AgentProfile, *, cwd: str | Path) -> Path:
    """Return where ``agent`` looks for the skill."""
    return Path(cwd) / agent.skills_dir / sanitize_skill_name(skill_name)


def _ignore_excluded(_directory: str, names: list[str]) -> set[str]:
    return {name for name in names if name in EXCLUDED_DIR_NAMES}


def _remove_path(path: Path) -> bool:
    """Remove a file, symlink or directory tree. Returns True if something was removed."""
    if path.is_symlink() or path.is_file():
        path.unlink()
        return True
    if path.is_dir():
        shutil.rmtree(path)
        return True
    return False


def _copy_tree(source: Path, destination: Path) -> None:
    if not source.is_dir():
        raise InstallError(f"Skill folder not found: {source}")
    if destination.resolve() == source.resolve():
        return
    _remove_path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.copytree(source, destination, ignore=_ignore_excluded)


def _link_or_copy(canonical: Path, agent_path: Path) -> InstallMode:
    _remove_path(agent_path)
    agent_path.parent.mkdir(parents=True, exist_ok=True)
    target = os.path.relpath(canonical, agent_path.parent)
    try:
        os.symlink(target, agent_path, target_is_directory=True)
        return InstallMode.SYMLINK
    except OSError as exc:
        logger.debug("Symlink %s -> %s failed (%s); copying instead", agent_path, target, exc)
        shutil.copytree(canonical, agent_path, ignore=_ignore_excluded)
        return InstallMode.COPY


class SkillInstaller:
    """Default installer for skill folders (project scope)."""

    def _install_blocking(
        self,
        skill: InstallableSkill,
        agent: AgentProfile,
        cwd: Path,
        mode: InstallMode,
    ) -> InstallResult:
        agent_path = get_agent_skill_path(skill.name, agent, cwd=cwd)
        canonical = get_canonical_path(skill.name, cwd=cwd)
        source = Path(skill.path)

        if mode is InstallMode.COPY and not agent.is_universal:
            _copy_tree(source, agent_path)
            return InstallResult(success=True, path=agent_path, mode=InstallMode.COPY)

        _copy_tree(source, canonical)
        if agent_path == canonical:
            return InstallResult(
                success=True, path=canonical, canonical_path=canonical, mode=mode,
            )
        used = _link_or_copy(canonical, agent_path)
        return InstallResult(success=True, path=agent_path, canonical_path=canonical, mode=used)

    async def install(
        self,
        skill: InstallableSkill,
        agent: str,
        *,
        cwd: str | Path,
        mode: InstallMode = InstallMode.SYMLINK,
    ) -> InstallResult:
        """Install ``skill`` for ``agent``.

        Args:
            skill: Anything with ``name`` and ``path`` (the skill folder).
            agent: Agent name from the registry.
            cwd: Project directory.
            mode: ``symlink`` or ``copy``.

        Returns:
            An ``InstallResult``; never raises.
        """
        try:
            profile = get_agent(agent)
        except KeyError:
            return InstallResult(success=False, path=None, error=f"Unknown agent: {agent}")

        try:
            return await asyncio.to_thread(
                self._install_blocking, skill, profile, Path(cwd), InstallMode(mode),
            )
        except (OSError, InstallError) as exc:
            logger.warning("Failed to install %s for %s: %s", skill.name, agent, exc)
            return InstallResult(success=False, path=None, error=str(exc))

    def _uninstall_blocking(self, skill_name: str, agents: list[str], cwd: Path) -> list[Path]:
        removed: list[Path] = []
        for name in agents:
            profile = get_agent(name)
            if profile.is_universal:
                continue
            agent_path = get_agent_skill_path(skill_name, profile, cwd=cwd)
            if _remove_path(agent_path):
                removed.append(agent_path)
        canonical = get_canonical_path(skill_name, cwd=cwd)
        if _remove_path(canonical):
            removed.append(canonical)
        return removed

    async def uninstall(self, skill_name: str, agents: list[str], *, cwd: str | Path) -> list[Path]:
        """Remove a skill from the given agents and from the canonical location.

        Returns:
            The paths that were removed.

        Raises:
            KeyError: If an agent name is unknown.
            OSError: If an existing installation cannot be removed.
        """
        return await asyncio.to_thread(
            self._uninstall_blocking, skill_name, agents, Path(cwd),
        )
