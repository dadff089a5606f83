"""
CLI command for classifying a saved channel record.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from channelsieve.cli.commands.rules import load_rules_or_exit
from channelsieve.exceptions import EXIT_CODE_INVALID_ARGS
from channelsieve.models.channel import ChannelInfo, VideoInfo
from channelsieve.models.verdict import FilterVerdict
from channelsieve.services.classifier import classify

console = Console()


def _load_record(json_file: Path) -> tuple[ChannelInfo, list[VideoInfo]]:
    try:
        raw: Any = json.loads(json_file.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        console.print(f"[red]Error: cannot read {json_file}: {e}[/red]")
        raise typer.Exit(code=EXIT_CODE_INVALID_ARGS)

    if not isinstance(raw, dict) or "channel_info" not in raw:
        console.print(
            "[red]Error: expected a JSON object with a \"channel_info\" key[/red]"
        )
        raise typer.Exit(code=EXIT_CODE_INVALID_ARGS)

    try:
        channel_info = ChannelInfo.model_validate(raw["channel_info"] or {})
        videos = [VideoInfo.model_validate(v) for v in raw.get("videos") or []]
    except ValidationError as e:
        console.print(f"[red]Error: invalid channel record: {escape(str(e))}[/red]")
        raise typer.Exit(code=EXIT_CODE_INVALID_ARGS)
    return channel_info, videos


def _render_verdict(channel_info: ChannelInfo, verdict: FilterVerdict) -> None:
    name = channel_info.title or channel_info.id or "unknown channel"
    if verdict.passed:
        console.print(
            Panel(
                f"[bold green]PASSED[/bold green] {name}",
                title="Verdict",
                border_style="green",
            )
        )
    else:
        console.print(
            Panel(
                f"[bold red]REJECTED[/bold red] {name}\n\n"
                f"Stage: {verdict.failed_stage.value}\n"
                f"Reason: {verdict.reason}",
                title="Verdict",
                border_style="red",
            )
        )

    table = Table(title="Stage diagnostics")
    table.add_column("Stage", style="cyan")
    table.add_column("Result")
    table.add_column("Details")

    def status(passed: bool) -> str:
        return "[green]pass[/green]" if passed else "[red]fail[/red]"

    if verdict.location is not None:
        loc = verdict.location
        detail = f"country={loc.country!r}"
        if loc.deferred:
            detail += " (deferred)"
        table.add_row("location", status(loc.passed), detail)
    if verdict.alphabet is not None:
        alpha = verdict.alphabet
        worst = max((m.distinct_count for m in alpha.matches), default=0)
        table.add_row(
            "alphabet",
            status(alpha.passed),
            f"max distinct {worst} / allowed {alpha.max_distinct_per_field}",
        )
    if verdict.language is not None:
        lang = verdict.language
        table.add_row(
            "language",
            status(lang.passed),
            f"{lang.hits_distinct} words / min {lang.min_required} "
            f"({lang.total_tokens} tokens)",
        )
    for name_, topic in verdict.topics.items():
        top = ", ".join(m.keyword for m in topic.matches[:5])
        table.add_row(
            f"topic:{name_}",
            status(topic.passed),
            f"{topic.hits_distinct} / threshold {topic.threshold}"
            + (f" [dim]({top})[/dim]" if top else ""),
        )
    console.print(table)


def classify_command(
    json_file: Path = typer.Argument(
        ...,
        help='JSON file with "channel_info" and optional "videos"',
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    rules_file: Optional[Path] = typer.Option(
        None,
        "--rules",
        "-r",
        help="YAML rules file (default: built-in rules)",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the full verdict as JSON",
    ),
) -> None:
    """
    Classify a saved channel record with the rule classifier.

    Accepts the output of "channelsieve extract --videos".

    Examples:
        channelsieve classify channel.json
        channelsieve classify channel.json --rules strict.yaml --json
    """
    config = load_rules_or_exit(rules_file)
    channel_info, videos = _load_record(json_file)

    verdict = classify(channel_info, videos, config)

    if as_json:
        typer.echo(verdict.model_dump_json(indent=2))
        return
    _render_verdict(channel_info, verdict)
