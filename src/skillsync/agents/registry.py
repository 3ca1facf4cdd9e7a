"""Static registry of coding agents and where they load skills from.

Each ``AgentProfile`` describes one agent: the project-relative directory
it reads skills from, the equivalent directory under the home directory,
and the dot-directories whose presence means the agent is installed.

Agents whose project skills directory is ``.agents/skills`` are
"universal": they read the canonical copy every install writes, so
installing for them needs no extra link or copy.

Detection is a cheap existence probe per dot-directory. Checking for a
directory that is not there costs one syscall, so the list errs on the
generous side.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

# Canonical, agent-neutral skills directory (relative to the project or home).
UNIVERSAL_SKILLS_DIR = ".agents/skills"


@dataclass(frozen=True)
class AgentProfile:
    """Describes where a coding agent reads its skills.

    Attributes:
        name: Machine identifier accepted by ``--agent`` (e.g. "claude-code").
        display_name: Human-readable name (e.g. "Claude Code").
        skills_dir: Project-relative skills directory.
        dot_dirs: Home-relative directories whose presence marks the agent
            as installed.
    """

    name: str
    display_name: str
    skills_dir: str
    dot_dirs: list[str] = field(default_factory=list)

    @property
    def is_universal(self) -> bool:
        """True when the agent reads the canonical ``.agents/skills`` directory."""
        return self.skills_dir == UNIVERSAL_SKILLS_DIR


def _build_profiles() -> list[AgentProfile]:
    """Build the list of known agent profiles, ordered by name."""
    return [
        AgentProfile(
            name="amp",
            display_name="Amp",
            skills_dir=UNIVERSAL_SKILLS_DIR,
            dot_dirs=[".config/amp"],
        ),
        AgentProfile(
            name="claude-code",
            display_name="Claude Code",
            skills_dir=".claude/skills",
            dot_dirs=[".claude"],
        ),
        AgentProfile(
            name="cline",
            display_name="Cline",
            skills_dir=".cline/skills",
            dot_dirs=[".cline"],
        ),
        AgentProfile(
            name="codex",
            display_name="Codex",
            skills_dir=UNIVERSAL_SKILLS_DIR,
            dot_dirs=[".codex"],
        ),
        AgentProfile(
            name="continue",
            display_name="Continue",
            skills_dir=".continue/skills",
            dot_dirs=[".continue"],
        ),
        AgentProfile(
            name="cursor",
            display_name="Cursor",
            skills_dir=".cursor/skills",
            dot_dirs=[".cursor"],
        ),
        AgentProfile(
            name="gemini-cli",
            display_name="Gemini CLI",
            skills_dir=UNIVERSAL_SKILLS_DIR,
            dot_dirs=[".gemini"],
        ),
        AgentProfile(
            name="github-copilot",
            display_name="GitHub Copilot",
            skills_dir=".github/skills",
            dot_dirs=[".copilot"],
        ),
        AgentProfile(
            name="goose",
            display_name="Goose",
            skills_dir=".goose/skills",
            dot_dirs=[".config/goose"],
        ),
        AgentProfile(
            name="junie",
            display_name="Junie",
            skills_dir=".junie/skills",
            dot_dirs=[".junie"],
        ),
        AgentProfile(
            name="kiro",
            display_name="Kiro",
            skills_dir=".kiro/skills",
            dot_dirs=[".kiro"],
        ),
        AgentProfile(
            name="opencode",
            display_name="OpenCode",
            skills_dir=UNIVERSAL_SKILLS_DIR,
            dot_dirs=[".config/opencode", ".opencode"],
        ),
        AgentProfile(
            name="roo",
            display_name="Roo Code",
            skills_dir=".roo/skills",
            dot_dirs=[".roo"],
        ),
        AgentProfile(
            name="trae",
            display_name="Trae",
            skills_dir=".trae/skills",
            dot_dirs=[".trae"],
        ),
        AgentProfile(
            name="windsurf",
            display_name="Windsurf",
            skills_dir=".windsurf/skills",
            dot_dirs=[".codeium/windsurf"],
        ),
    ]


# Module-level constant: every known agent, keyed by name.
AGENTS: dict[str, AgentProfile] = {profile.name: profile for profile in _build_profiles()}


def get_agent(name: str) -> AgentProfile:
    """Look up an agent profile.

    Raises:
        KeyError: If no agent has that name.
    """
    return AGENTS[name]


def agent_names() -> list[str]:
    """Return all known agent names in registry order."""
    return list(AGENTS)


def get_universal_agents() -> list[str]:
    """Return the names of agents that read ``.agents/skills``."""
    return [name for name, profile in AGENTS.items() if profile.is_universal]


def get_non_universal_agents() -> list[str]:
    """Return the names of agents with their own skills directory."""
    return [name for name, profile in AGENTS.items() if not profile.is_universal]


def detect_installed_agents(home: Path | None = None) -> list[str]:
    """Return the agents whose dot-directories exist under ``home``.

    Args:
        home: Override the home directory (for testing).

    Returns:
        Names of detected agents in registry order.
    """
    home_dir = home if home is not None else Path.home()
    detected: list[str] = []
    for name, profile in AGENTS.items():
        for dot_dir in profile.dot_dirs:
            try:
                if (home_dir / dot_dir).is_dir():
                    detected.append(name)
                    break
            except OSError:
                continue
    logger.debug("Detected agents: %s", ", ".join(detected) or "none")
    return detected
