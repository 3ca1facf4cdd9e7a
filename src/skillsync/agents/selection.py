"""Choosing which agents a sync installs into.

Resolution order:

1. ``*`` among the requested names selects every known agent.
2. Explicitly requested names are validated; any unknown name raises
   ``InvalidAgentError`` before anything touches the filesystem.
3. With no request, the detected agents drive the choice:

   - none detected: ``yes`` picks the universal agents, otherwise the user
     is prompted over the non-universal agents;
   - one detected, or ``yes``: the detected agents plus the universal ones;
   - several detected: the user is prompted with the detected ones
     preselected.

Prompted selections always include the universal agents. A prompter that
returns ``None`` cancels the sync, and so does a resolution that ends up
empty.
"""

from __future__ import annotations

from typing import Protocol

from skillsync.agents.registry import (
    AGENTS,
    AgentProfile,
    get_non_universal_agents,
    get_universal_agents,
)
from skillsync.exceptions import InvalidAgentError

ALL_AGENTS_TOKEN = "*"


class SyncPrompter(Protocol):
    """Interactive decisions a sync may need from the user."""

    def select_agents(
        self,
        choices: list[AgentProfile],
        initial: list[str],
        locked: list[AgentProfile],
    ) -> list[str] | None:
        """Return the chosen agent names from ``choices``, or None to cancel.

        ``locked`` agents are always installed and only shown for context.
        """

    def confirm(self, message: str) -> bool:
        """Return True to proceed."""


class AutoPrompter:
    """Prompter for non-interactive runs: accepts defaults, always confirms."""

    def select_agents(
        self,
        choices: list[AgentProfile],
        initial: list[str],
        locked: list[AgentProfile],
    ) -> list[str] | None:
        return list(initial)

    def confirm(self, message: str) -> bool:
        return True


def validate_agent_names(requested: list[str]) -> list[str]:
    """Return ``requested`` unchanged if every name is known.

    Raises:
        InvalidAgentError: Listing the unknown names and the valid ones.
    """
    invalid = [name for name in requested if name not in AGENTS]
    if invalid:
        raise InvalidAgentError(invalid, list(AGENTS))
    return list(dict.fromkeys(requested))


def _with_universal(names: list[str]) -> list[str]:
    merged = list(names)
    for name in get_universal_agents():
        if name not in merged:
            merged.append(name)
    return merged


def resolve_target_agents(
    requested: list[str] | None,
    *,
    yes: bool,
    installed: list[str],
    prompter: SyncPrompter,
) -> list[str] | None:
    """Decide the target agents for a sync.

    Args:
        requested: Agent names given by the caller (``--agent``), if any.
        yes: Skip prompts and accept defaults.
        installed: Agents detected on this machine.
        prompter: Source of interactive decisions.

    Returns:
        The ordered, de-duplicated agent names, or None when the user
        cancelled or nothing was selected.

    Raises:
        InvalidAgentError: If ``requested`` names an unknown agent.
    """
    if requested and ALL_AGENTS_TOKEN in requested:
        return list(AGENTS)
    if requested:
        return validate_agent_names(requested)

    universal = [AGENTS[name] for name in get_universal_agents()]

    if not installed:
        if yes:
            return [agent.name for agent in universal] or None
        choices = [AGENTS[name] for name in get_non_universal_agents()]
        selected = prompter.select_agents(choices, [], universal)
    elif len(installed) == 1 or yes:
        return _with_universal(installed)
    else:
        choices = [
            AGENTS[name] for name in get_non_universal_agents() if name in installed
        ]
        initial = [name for name in installed if not AGENTS[name].is_universal]
        selected = prompter.select_agents(choices, initial, universal)

    if selected is None:
        return None
    targets = _with_universal(validate_agent_names(selected))
    return targets or None
