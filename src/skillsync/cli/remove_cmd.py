"""``skillsync remove NAME...`` — Uninstall skills and drop their lock entries.

Exit Codes:
    0 — Every named skill was removed.
    1 — At least one named skill was not found.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import click

from skillsync.cli.output import print_remove_summary
from skillsync.sync.removal import remove_skills


@click.command("remove")
@click.argument("names", nargs=-1, required=True)
@click.option(
    "--cwd",
    type=click.Path(exists=True, file_okay=False),
    default=".",
    help="Project directory (default: current directory).",
)
def remove_command(names: tuple[str, ...], cwd: str) -> None:
    """Remove skills from every agent directory and from skills-lock.json."""
    project = Path(cwd).resolve()
    report = asyncio.run(remove_skills(list(names), cwd=project))
    print_remove_summary(report, project)
    sys.exit(1 if report.not_found else 0)
