"""Coding agents: registry, target selection and skill installation.

Public API::

    from skillsync.agents import SkillInstaller, resolve_target_agents

    targets = resolve_target_agents(["claude-code"], yes=True, installed=[],
                                    prompter=AutoPrompter())
    result = await SkillInstaller().install(skill, "claude-code", cwd=project)
"""

from __future__ import annotations

from skillsync.agents.installer import (
    InstallMode,
    InstallResult,
    SkillInstaller,
    get_agent_skill_path,
    get_canonical_path,
    sanitize_skill_name,
)
from skillsync.agents.registry import (
    AGENTS,
    UNIVERSAL_SKILLS_DIR,
    AgentProfile,
    agent_names,
    detect_installed_agents,
    get_agent,
    get_non_universal_agents,
    get_universal_agents,
)
from skillsync.agents.selection import (
    ALL_AGENTS_TOKEN,
    AutoPrompter,
    SyncPrompter,
    resolve_target_agents,
    validate_agent_names,
)

__all__ = [
    "AGENTS",
    "ALL_AGENTS_TOKEN",
    "AgentProfile",
    "AutoPrompter",
    "InstallMode",
    "InstallResult",
    "SkillInstaller",
    "SyncPrompter",
    "UNIVERSAL_SKILLS_DIR",
    "agent_names",
    "detect_installed_agents",
    "get_agent",
    "get_agent_skill_path",
    "get_canonical_path",
    "get_non_universal_agents",
    "get_universal_agents",
    "resolve_target_agents",
    "sanitize_skill_name",
    "validate_agent_names",
]
