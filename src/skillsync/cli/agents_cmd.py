"""``skillsync agents`` — List known agents and which ones are installed."""

from __future__ import annotations

import click

from skillsync.agents.registry import detect_installed_agents
from skillsync.cli.output import print_agents


@click.command("agents")
def agents_command() -> None:
    """List every agent skillsync can install into."""
    print_agents(detect_installed_agents())
