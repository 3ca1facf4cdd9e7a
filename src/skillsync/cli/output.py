"""Rich output formatting helpers for the skillsync CLI.

Provides consistent terminal output for discovery listings, sync plans,
sync results, restore summaries and the agent table.

Paths are shortened for display: the home directory becomes ``~`` and the
project directory becomes ``.``.
"""

from __future__ import annotations

import os
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from skillsync.agents.registry import AGENTS
from skillsync.discovery.models import DiscoveredSkill
from skillsync.sync.models import SyncPlan, SyncReport
from skillsync.sync.removal import RemoveReport
from skillsync.sync.restore import RestoreReport

console = Console()
err_console = Console(stderr=True)

REVIEW_NOTICE = "Review skills before use; they run with full agent permissions."


def _plural(count: int, word: str = "skill") -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


def shorten_path(full_path: str | Path, cwd: str | Path, home: str | Path | None = None) -> str:
    """Replace the home directory with ``~`` and the project directory with ``.``."""
    full = str(full_path)
    home_str = str(home if home is not None else Path.home())
    cwd_str = str(cwd)
    if full == home_str or full.startswith(home_str + os.sep):
        return "~" + full[len(home_str):]
    if full == cwd_str or full.startswith(cwd_str + os.sep):
        return "." + full[len(cwd_str):]
    return full


def print_discovered(skills: list[DiscoveredSkill]) -> None:
    """Print each discovered skill with its owning package."""
    suffix = "" if len(skills) == 1 else "s"
    console.print(f"Found [green]{len(skills)}[/green] skill{suffix} in node_modules")
    for skill in skills:
        console.print(f"  [cyan]{escape(skill.name)}[/cyan] [dim]from {escape(skill.package_name)}[/dim]")
        if skill.description:
            console.print(f"    [dim]{escape(skill.description)}[/dim]")


def print_plan(plan: SyncPlan) -> None:
    """Print a table marking each discovered skill as up to date or pending."""
    table = Table(title="Skill Sync Status", show_header=True, header_style="bold")
    table.add_column("Skill", style="bold")
    table.add_column("Package", style="dim")
    table.add_column("Status", justify="center")

    pending = {skill.name for skill in plan.to_install}
    for skill in plan.discovered:
        if skill.name in pending:
            status = "[yellow]install[/yellow]"
        else:
            status = "[green]up to date[/green]"
        table.add_row(escape(skill.name), escape(skill.package_name), status)

    console.print(table)
    console.print(
        f"[bold]{_plural(len(plan.discovered))}[/bold] discovered | "
        f"[green]{len(plan.up_to_date)} up to date[/green] | "
        f"[yellow]{len(plan.to_install)} to install/update[/yellow]"
    )


def print_sync_results(report: SyncReport, cwd: Path) -> None:
    """Print the per-skill results and any failed attempts of a completed sync."""
    if report.installed_count:
        lines: list[str] = []
        for name, attempts in report.attempts_by_skill().items():
            ok = [a for a in attempts if a.success]
            if not ok:
                continue
            first = ok[0]
            lines.append(
                f"[green]✓[/green] {escape(name)} [dim]← {escape(first.skill.package_name)}[/dim]"
            )
            shown = first.result.canonical_path or first.result.path
            if shown is not None:
                lines.append(f"  [dim]{escape(shorten_path(shown, cwd))}[/dim]")
            agents = ", ".join(AGENTS[a.agent].display_name for a in ok)
            lines.append(f"  [dim]{escape(agents)}[/dim]")
        title = f"[green]Synced {_plural(report.installed_count)}[/green]"
        console.print(Panel("\n".join(lines), title=title))

    if report.failed_count:
        console.print(f"[red]Failed to install {report.failed_count}[/red]")
        for attempt in report.failed_attempts:
            agent = AGENTS[attempt.agent].display_name if attempt.agent in AGENTS else attempt.agent
            console.print(
                f"  [red]✗[/red] {escape(attempt.skill.name)} → {escape(agent)}: "
                f"[dim]{escape(attempt.result.error or 'unknown error')}[/dim]"
            )

    for name in report.lock_failures:
        console.print(f"[yellow]Could not update skills-lock.json for {escape(name)}[/yellow]")


def print_restore_summary(report: RestoreReport) -> None:
    """Print what a restore from the lock file did."""
    if report.restored:
        console.print(f"[green]Restored {_plural(len(report.restored))}[/green] from local sources")
        for name in report.restored:
            console.print(f"  [green]✓[/green] {escape(name)}")
    for name in report.missing:
        console.print(f"  [yellow]![/yellow] {escape(name)} [dim]no longer present at its source[/dim]")
    if report.skipped:
        console.print(
            f"[yellow]Skipped {_plural(len(report.skipped))}[/yellow] "
            "[dim](remote sources are not fetched)[/dim]"
        )
        for name in report.skipped:
            console.print(f"  [dim]- {escape(name)}[/dim]")
    for source, error in report.failed:
        console.print(f"[red]Failed to restore {escape(source)}[/red]: [dim]{escape(error)}[/dim]")
    for name in report.lock_failures:
        console.print(f"[yellow]Could not update skills-lock.json for {escape(name)}[/yellow]")


def print_remove_summary(report: RemoveReport, cwd: Path) -> None:
    """Print what a removal deleted."""
    for name, paths in report.removed.items():
        console.print(f"[green]✓[/green] Removed {escape(name)}")
        for path in paths:
            console.print(f"  [dim]{escape(shorten_path(path, cwd))}[/dim]")
    for name in report.unlocked:
        if name not in report.removed:
            console.print(f"[green]✓[/green] Removed {escape(name)} from skills-lock.json")
    for name in report.not_found:
        console.print(f"[yellow]Skill not found: {escape(name)}[/yellow]")


def print_agents(detected: list[str]) -> None:
    """Print the table of known agents."""
    table = Table(title="Known Agents", show_header=True, header_style="bold")
    table.add_column("Agent", style="bold")
    table.add_column("Name")
    table.add_column("Skills Directory", style="dim")
    table.add_column("Universal", justify="center")
    table.add_column("Detected", justify="center")

    for name, profile in AGENTS.items():
        table.add_row(
            name,
            profile.display_name,
            profile.skills_dir,
            "[cyan]yes[/cyan]" if profile.is_universal else "-",
            "[green]yes[/green]" if name in detected else "-",
        )
    console.print(table)
