"""
CLI commands for inspecting the rule classifier configuration.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax

from channelsieve.config.settings import settings
from channelsieve.exceptions import EXIT_CODE_INVALID_ARGS, RulesConfigError
from channelsieve.services.classifier import (
    ClassifierConfig,
    dump_classifier_config,
    load_classifier_config,
)

console = Console()

rules_app = typer.Typer(
    name="rules",
    help="Inspect classifier rules",
    no_args_is_help=True,
)


def load_rules_or_exit(rules_file: Optional[Path]) -> ClassifierConfig:
    """
    Load classifier rules for a command, exiting on a bad rules file.

    Falls back to ``settings.rules_file`` and then to the built-in rules.

    Raises
    ------
    typer.Exit
        With ``EXIT_CODE_INVALID_ARGS`` if the file cannot be used.
    """
    path = rules_file or settings.rules_file
    try:
        return load_classifier_config(path)
    except RulesConfigError as e:
        console.print(
            Panel(
                f"[red]{escape(e.message)}[/red]",
                title="Invalid Rules File",
                border_style="red",
            )
        )
        raise typer.Exit(code=EXIT_CODE_INVALID_ARGS)


@rules_app.command(name="show")
def show_rules(
    rules_file: Optional[Path] = typer.Option(
        None,
        "--rules",
        "-r",
        help="YAML rules file (default: built-in rules)",
    ),
    plain: bool = typer.Option(
        False,
        "--plain",
        help="Print raw YAML without highlighting",
    ),
) -> None:
    """
    Show the effective classifier rules as YAML.

    The output is a valid rules file: edit it and pass it back with --rules.

    Examples:
        channelsieve rules show
        channelsieve rules show --rules my-rules.yaml
        channelsieve rules show --plain > rules.yaml
    """
    config = load_rules_or_exit(rules_file)
    text = dump_classifier_config(config)
    if plain:
        typer.echo(text, nl=False)
        return
    console.print(Syntax(text, "yaml", word_wrap=True))
