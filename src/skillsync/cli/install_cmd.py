"""``skillsync install`` — Restore the skills recorded in skills-lock.json.

Reinstalls every locked skill into the universal ``.agents/skills``
directory. node_modules skills are restored with a non-interactive sync;
skills from local directories are reinstalled from those directories;
remote sources are skipped.

Exit Codes:
    0 — Restore ran (individual failures are reported, not fatal).
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import click

from skillsync import __version__
from skillsync.cli.output import console, print_restore_summary, print_sync_results
from skillsync.sync.models import SyncOutcome
from skillsync.sync.orchestrator import SyncOrchestrator
from skillsync.sync.restore import LockRestorer
from skillsync.telemetry import TelemetryClient


@click.command("install")
@click.option("--force", "-f", is_flag=True, help="Reinstall node_modules skills even if unchanged.")
@click.option(
    "--cwd",
    type=click.Path(exists=True, file_okay=False),
    default=".",
    help="Project directory (default: current directory).",
)
def install_command(force: bool, cwd: str) -> None:
    """Install all project skills recorded in skills-lock.json."""
    project = Path(cwd).resolve()
    orchestrator = SyncOrchestrator(project, telemetry=TelemetryClient(__version__))
    report = asyncio.run(LockRestorer(orchestrator).restore(force=force))

    if report.lock_empty:
        console.print("[yellow]No project skills found in skills-lock.json[/yellow]")
        console.print("[dim]Run `skillsync sync` to add skills shipped in node_modules.[/dim]")
        sys.exit(0)

    print_restore_summary(report)

    sync_report = report.sync_report
    if sync_report is not None:
        if sync_report.outcome is SyncOutcome.COMPLETED:
            print_sync_results(sync_report, project)
        elif sync_report.outcome is SyncOutcome.UP_TO_DATE:
            console.print("[green]node_modules skills are up to date.[/green]")
        else:
            console.print("[yellow]No skills found in node_modules.[/yellow]")
    sys.exit(0)
