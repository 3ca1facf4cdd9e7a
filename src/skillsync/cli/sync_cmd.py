"""``skillsync sync`` and ``skillsync status`` — Sync skills from node_modules.

``sync`` discovers skills shipped in the project's ``node_modules``,
installs the new or changed ones into the selected agents, and records
them in ``skills-lock.json``. ``status`` shows the same plan without
installing anything.

Exit Codes:
    0 — Sync finished, nothing to do, already up to date, or cancelled.
    1 — An unknown agent name was given with ``--agent``.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import click

from skillsync import __version__
from skillsync.agents.installer import InstallMode
from skillsync.agents.registry import AGENTS
from skillsync.agents.selection import AutoPrompter
from skillsync.cli.output import (
    REVIEW_NOTICE,
    console,
    print_discovered,
    print_plan,
    print_sync_results,
)
from skillsync.cli.prompts import ClickPrompter
from skillsync.exceptions import InvalidAgentError
from skillsync.sync.models import SyncOptions, SyncOutcome
from skillsync.sync.orchestrator import SyncOrchestrator
from skillsync.telemetry import TelemetryClient


def split_agent_args(values: tuple[str, ...]) -> tuple[str, ...] | None:
    """Flatten repeated and comma-separated ``--agent`` values."""
    names = [part.strip() for value in values for part in value.split(",") if part.strip()]
    return tuple(names) or None


_cwd_option = click.option(
    "--cwd",
    type=click.Path(exists=True, file_okay=False),
    default=".",
    help="Project directory (default: current directory).",
)


@click.command("sync")
@click.option(
    "--agent", "-a", "agents",
    multiple=True,
    help="Agent to install into (repeatable, comma-separated, '*' for all).",
)
@click.option("--yes", "-y", is_flag=True, help="Skip prompts and accept defaults.")
@click.option("--force", "-f", is_flag=True, help="Reinstall every skill, even unchanged ones.")
@click.option("--copy", "copy_mode", is_flag=True, help="Copy into agent directories instead of symlinking.")
@_cwd_option
def sync_command(
    agents: tuple[str, ...],
    yes: bool,
    force: bool,
    copy_mode: bool,
    cwd: str,
) -> None:
    """Install skills shipped in node_modules into your agents.

    Only skills that are new or changed since the last sync (according to
    skills-lock.json) are installed, unless --force is given.
    """
    project = Path(cwd).resolve()
    options = SyncOptions(
        agents=split_agent_args(agents),
        yes=yes,
        force=force,
        mode=InstallMode.COPY if copy_mode else InstallMode.SYMLINK,
    )
    orchestrator = SyncOrchestrator(
        project,
        prompter=AutoPrompter() if yes else ClickPrompter(),
        telemetry=TelemetryClient(__version__),
    )

    try:
        report = asyncio.run(orchestrator.run(options))
    except InvalidAgentError as exc:
        console.print(f"[red]Invalid agents: {', '.join(exc.invalid)}[/red]")
        console.print(f"Valid agents: {', '.join(exc.valid)}")
        sys.exit(1)

    if report.outcome is SyncOutcome.NOTHING_TO_DO:
        console.print("[yellow]No skills found[/yellow]")
        console.print("[dim]No SKILL.md files found in node_modules.[/dim]")
        sys.exit(0)

    print_discovered(report.plan.discovered)
    up_to_date = len(report.plan.up_to_date)
    if up_to_date:
        console.print(f"[dim]{up_to_date} skill{'' if up_to_date == 1 else 's'} already up to date[/dim]")

    if report.outcome is SyncOutcome.UP_TO_DATE:
        console.print("[green]All skills are up to date.[/green]")
        sys.exit(0)

    if force:
        console.print("[dim]Force mode: reinstalling all skills[/dim]")
    pending = len(report.plan.to_install)
    console.print(f"{pending} skill{'' if pending == 1 else 's'} to install/update")

    if report.outcome is SyncOutcome.CANCELLED:
        console.print("Sync cancelled")
        sys.exit(0)

    names = ", ".join(AGENTS[a].display_name for a in report.targets)
    console.print(f"[dim]Agents: {names}[/dim]")
    print_sync_results(report, project)
    console.print(f"[green]Done![/green] [dim]{REVIEW_NOTICE}[/dim]")
    sys.exit(0)


@click.command("status")
@_cwd_option
def status_command(cwd: str) -> None:
    """Show which node_modules skills are up to date and which would be installed."""
    project = Path(cwd).resolve()
    plan = asyncio.run(SyncOrchestrator(project).plan())
    if not plan.discovered:
        console.print("[yellow]No skills found[/yellow]")
        sys.exit(0)
    print_plan(plan)
    sys.exit(0)
