"""skillsync CLI — Sync agent skills shipped in node_modules.

Entry point for the ``skillsync`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    sync     — Install new or changed node_modules skills into agents.
    status   — Show which node_modules skills would be installed.
    install  — Restore the skills recorded in skills-lock.json.
    remove   — Uninstall skills and drop their lock entries.
    agents   — List known agents.

Usage::

    skillsync sync                      # Detect agents, prompt, install
    skillsync sync -y -a claude-code    # Non-interactive, one agent
    skillsync sync --force              # Reinstall everything
    skillsync status
    skillsync install
    skillsync remove my-skill
    skillsync agents
"""

from __future__ import annotations

import logging

import click
from rich.logging import RichHandler

from skillsync import __version__
from skillsync.cli.agents_cmd import agents_command
from skillsync.cli.install_cmd import install_command
from skillsync.cli.output import err_console
from skillsync.cli.remove_cmd import remove_command
from skillsync.cli.sync_cmd import status_command, sync_command


def configure_logging(verbose: bool) -> None:
    """Route log records to stderr through Rich; DEBUG when verbose."""
    handler = RichHandler(console=err_console, show_time=False, show_path=False)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[handler],
        force=True,
    )


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging.")
def cli(verbose: bool) -> None:
    """skillsync: Sync agent skills shipped in node_modules.

    Discovers SKILL.md skills inside your dependencies, installs the new or
    changed ones into your coding agents, and tracks them in a
    merge-friendly skills-lock.json.
    """
    configure_logging(verbose)


# Register all subcommands
cli.add_command(sync_command)
cli.add_command(status_command)
cli.add_command(install_command)
cli.add_command(remove_command)
cli.add_command(agents_command)
