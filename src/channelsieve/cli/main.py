"""
Main CLI application for channelsieve.
"""

from __future__ import annotations

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from channelsieve import __version__
from channelsieve.cli.commands.classify import classify_command
from channelsieve.cli.commands.crawl import crawl_command
from channelsieve.cli.commands.extract import extract_command
from channelsieve.cli.commands.rules import rules_app
from channelsieve.config.settings import settings

console = Console()

app = typer.Typer(
    name="channelsieve",
    help="Crawl YouTube channels and classify them for ad-exclusion lists",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.command(name="crawl")(crawl_command)
app.command(name="extract")(extract_command)
app.command(name="classify")(classify_command)
app.add_typer(rules_app, name="rules", help="Inspect classifier rules")


def configure_logging(level: str) -> None:
    """Route log records through rich on stderr at ``level``."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )
    # httpx logs every request at INFO; the fetcher reports its own events
    logging.getLogger("httpx").setLevel(logging.WARNING)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(
        Panel(
            f"[bold blue]channelsieve[/bold blue] v{__version__}",
            title="Version",
            border_style="blue",
        )
    )


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", "-v", help="Show version and exit"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", help="Log at DEBUG level, including every fetch event"
    ),
) -> None:
    """
    channelsieve: find YouTube channels that are safe to advertise on.

    Crawls channel pages politely, extracts channel metadata and recent
    videos, and runs a rule classifier over the result.
    """
    if version:
        console.print(f"channelsieve v{__version__}")
        raise typer.Exit(code=0)

    if ctx.invoked_subcommand is None:
        console.print(
            "[yellow]Use 'channelsieve --help' for available commands[/yellow]"
        )
        raise typer.Exit(code=1)

    configure_logging("DEBUG" if verbose else settings.log_level)


if __name__ == "__main__":
    app()
