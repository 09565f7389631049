"""Command line entry point."""

from __future__ import annotations

import sys

import click
from rich.console import Console

from release_tag_bot import __version__
from release_tag_bot.actions import configure_logging

console = Console()


@click.group()
@click.version_option(__version__, prog_name="release-tag-bot")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """Create semantic version tags from conventional commits."""
    configure_logging(verbose)


@cli.command()
def run() -> None:
    """Process the pull request event of the current workflow run.

    Inputs are read from INPUT_* variables, the repository and event from
    the GITHUB_* variables set by the runner.
    """
    from release_tag_bot.cli.commands.run import run_from_environment

    sys.exit(run_from_environment())


@cli.command()
@click.option(
    "-t", "--tag", "tags", multiple=True, help="Existing tag name (repeatable)."
)
@click.option(
    "-m", "--message", "messages", multiple=True, help="Commit message (repeatable)."
)
@click.option("--v-prefix/--no-v-prefix", default=False, help="Prefix the next tag with 'v'.")
@click.option("--fallback", default=None, help="PR title and body used when commits carry no bump.")
@click.option(
    "--existing",
    multiple=True,
    help="Tag name to treat as already present on the host (repeatable).",
)
def decide(
    tags: tuple[str, ...],
    messages: tuple[str, ...],
    v_prefix: bool,
    fallback: str | None,
    existing: tuple[str, ...],
) -> None:
    """Show the tag decision for the given tags and commit messages."""
    from release_tag_bot.cli.commands.decide import run_decide

    run_decide(tags, messages, v_prefix, fallback, existing, console)


def main() -> None:
    cli(prog_name="release-tag-bot")
