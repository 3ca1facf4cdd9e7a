"""Interactive prompts for the CLI, built on click."""

from __future__ import annotations

import click
from rich.markup import escape

from skillsync.agents.registry import AgentProfile
from skillsync.cli.output import console


def parse_selection(raw: str, count: int) -> list[int]:
    """Parse a comma/space separated list of 1-based indices.

    Raises:
        click.BadParameter: On a non-number or an out-of-range index.
    """
    indices: list[int] = []
    for token in raw.replace(",", " ").split():
        if not token.isdigit() or not 1 <= int(token) <= count:
            raise click.BadParameter(f"{token!r} is not a number between 1 and {count}")
        if int(token) - 1 not in indices:
            indices.append(int(token) - 1)
    return indices


class ClickPrompter:
    """Terminal prompter: numbered multi-select and yes/no confirmation.

    Ctrl-C or end of input cancels.
    """

    def select_agents(
        self,
        choices: list[AgentProfile],
        initial: list[str],
        locked: list[AgentProfile],
    ) -> list[str] | None:
        if locked:
            console.print("[bold]Universal (.agents/skills)[/bold] [dim]always included[/dim]")
            for agent in locked:
                console.print(f"  [dim]•[/dim] {escape(agent.display_name)}")
        if not choices:
            return []

        console.print("[bold]Which agents do you want to install to?[/bold]")
        for number, agent in enumerate(choices, start=1):
            console.print(f"  {number}. {escape(agent.display_name)} [dim]{agent.skills_dir}[/dim]")

        default = ",".join(
            str(number) for number, agent in enumerate(choices, start=1) if agent.name in initial
        )
        while True:
            try:
                raw = click.prompt(
                    "Select agents (comma-separated numbers, blank for none)",
                    default=default,
                    show_default=bool(default),
                )
            except click.Abort:
                return None
            try:
                return [choices[i].name for i in parse_selection(raw, len(choices))]
            except click.BadParameter as exc:
                console.print(f"[red]{escape(exc.format_message())}[/red]")

    def confirm(self, message: str) -> bool:
        try:
            return click.confirm(message, default=True)
        except click.Abort:
            return False
