"""Implementation of the 'decide' command.

A local dry run of the decision engine: no token, no network. Tags and
commit messages are given on the command line.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.panel import Panel
from rich.table import Table

from release_tag_bot.core.decision import decide

if TYPE_CHECKING:
    from collections.abc import Sequence

    from rich.console import Console

    from release_tag_bot.core.decision import TagDecision


def run_decide(
    tags: Sequence[str],
    messages: Sequence[str],
    v_prefix: bool,
    fallback: str | None,
    existing: Sequence[str],
    console: Console,
) -> TagDecision:
    """Run the decide command.

    Args:
        tags: Existing tag names
        messages: Commit messages of the change set
        v_prefix: Format the next tag with a leading 'v'
        fallback: Text classified when the commits carry no bump
        existing: Tag names to treat as already created on the host
        console: Console for standard output

    Returns:
        The computed decision
    """
    known = set(existing)
    decision = decide(
        messages,
        tags,
        v_prefix,
        fallback_text=fallback,
        tag_exists=known.__contains__ if known else None,
    )

    table = Table(show_header=False, box=None)
    table.add_column(style="dim")
    table.add_column()
    table.add_row("Bump", f"[bold]{decision.bump}[/]")
    if decision.next_tag is not None:
        table.add_row("Previous tag", decision.baseline_tag or "-")
        table.add_row("Next tag", f"[green]{decision.next_tag}[/]")

    if decision.should_create:
        title, style = "[green]Create[/]", "green"
    else:
        title, style = f"[yellow]Skip: {decision.reason}[/]", "yellow"

    console.print(Panel(table, title=title, border_style=style))
    return decision
