"""
CLI command for crawling and classifying YouTube channels.

Runs the crawl -> extract -> classify pipeline over a list of channel
inputs and appends one JSON line per channel with a stable ID to the
output file. A detected block page stops the run with a dedicated exit
code so wrapper scripts can back off.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from channelsieve.cli.commands.rules import load_rules_or_exit
from channelsieve.config.settings import settings
from channelsieve.exceptions import EXIT_CODE_BLOCKED, EXIT_CODE_INVALID_ARGS
from channelsieve.models.enums import PipelineStatus
from channelsieve.services.classifier import ClassifierConfig
from channelsieve.services.fetcher import FetcherConfig, LoggingEventSink, SafeFetcher
from channelsieve.services.pipeline import (
    ChannelPipeline,
    JsonlChannelStore,
    PipelineProgress,
)

console = Console()

DEFAULT_OUTPUT_NAME = "channels.jsonl"


def read_inputs(urls: List[str], input_file: Optional[Path]) -> list[str]:
    """
    Collect channel inputs from arguments and an optional file.

    The file holds one input per line; blank lines and lines starting
    with ``#`` are ignored. Argument inputs come first.
    """
    inputs = [u.strip() for u in urls if u.strip()]
    if input_file is not None:
        for line in input_file.read_text(encoding="utf-8").splitlines():
            line = line.strip()
            if line and not line.startswith("#"):
                inputs.append(line)
    return inputs


def crawl_command(
    urls: Optional[List[str]] = typer.Argument(
        None,
        help="Channel URLs, UC... IDs, @handles or video URLs",
    ),
    input_file: Optional[Path] = typer.Option(
        None,
        "--input",
        "-i",
        help="File with one channel input per line",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help=f"JSON Lines output file (default: <output_dir>/{DEFAULT_OUTPUT_NAME})",
    ),
    rules_file: Optional[Path] = typer.Option(
        None,
        "--rules",
        "-r",
        help="YAML rules file (default: built-in rules)",
    ),
    videos_limit: int = typer.Option(
        settings.videos_limit,
        "--videos-limit",
        "-n",
        help="Maximum number of videos extracted per channel",
        min=0,
    ),
    skip_videos: bool = typer.Option(
        settings.skip_videos,
        "--skip-videos",
        help="Only fetch the /about page of each channel",
    ),
) -> None:
    """
    Crawl channels, extract metadata and videos, and classify them.

    Examples:
        channelsieve crawl https://www.youtube.com/@somechannel
        channelsieve crawl --input channels.txt --output results.jsonl
        channelsieve crawl UCxxxxxxxxxxxxxxxxxxxxxx --skip-videos
    """
    inputs = read_inputs(urls or [], input_file)
    if not inputs:
        console.print("[yellow]Error: no channel inputs given[/yellow]")
        console.print("Use 'channelsieve crawl --help' for usage information.")
        raise typer.Exit(code=EXIT_CODE_INVALID_ARGS)

    config = load_rules_or_exit(rules_file)

    if output is None:
        settings.create_directories()
        output = settings.output_dir / DEFAULT_OUTPUT_NAME

    try:
        final = asyncio.run(
            _crawl_async(inputs, output, config, videos_limit, skip_videos)
        )
    except KeyboardInterrupt:
        console.print("\n[yellow]Crawl interrupted by user[/yellow]")
        raise typer.Exit(code=130)

    _print_summary(final, output)

    if final.status == PipelineStatus.BLOCKED and final.block is not None:
        block = final.block
        console.print(
            Panel(
                f"[bold red]Block page detected, crawl stopped[/bold red]\n\n"
                f"Host: {block.host}\n"
                f"URL: {block.url}\n"
                f"Marker: {block.marker}\n"
                f"HTTP status: {block.status if block.status is not None else '?'}\n\n"
                "[yellow]Open the URL in a browser and resolve the challenge "
                "before crawling again.[/yellow]",
                title="Blocked",
                border_style="red",
            )
        )
        raise typer.Exit(code=EXIT_CODE_BLOCKED)


async def _crawl_async(
    inputs: list[str],
    output: Path,
    config: ClassifierConfig,
    videos_limit: int,
    skip_videos: bool,
) -> PipelineProgress:
    """
    Run the pipeline with a rich progress bar.

    Parameters
    ----------
    inputs : list[str]
        Channel inputs in crawl order.
    output : Path
        JSON Lines output file.
    config : ClassifierConfig
        Classifier rules.
    videos_limit : int
        Maximum videos per channel.
    skip_videos : bool
        Whether to skip the ``/videos`` tab.

    Returns
    -------
    PipelineProgress
        The final snapshot (status ``done`` or ``blocked``).
    """
    store = JsonlChannelStore(output)
    final = PipelineProgress()

    async with SafeFetcher(
        FetcherConfig.from_settings(settings), event_sink=LoggingEventSink()
    ) as fetcher:
        pipeline = ChannelPipeline(
            fetcher,
            store=store,
            classifier_config=config,
            videos_limit=videos_limit,
            skip_videos=skip_videos,
            tab_pause_ms=(
                settings.tab_switch_pause_min_ms,
                settings.tab_switch_pause_max_ms,
            ),
            channel_pause_ms=(
                settings.channel_pause_min_ms,
                settings.channel_pause_max_ms,
            ),
        )

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            console=console,
        ) as progress:
            task = progress.add_task("Crawling channels...", total=len(inputs))
            async for snapshot in pipeline.run(inputs):
                final = snapshot
                if snapshot.status != PipelineStatus.RUNNING:
                    continue
                progress.advance(task)
                result = snapshot.last_result
                if result is None:
                    continue
                label = result.channel_id or result.key
                if result.error is not None:
                    progress.console.print(f"[red]✗[/red] {label}: {result.error}")
                elif result.accepted:
                    progress.console.print(f"[green]✓[/green] {label}")
                elif result.verdict is not None and not result.verdict.passed:
                    progress.console.print(
                        f"[yellow]-[/yellow] {label}: {result.verdict.reason}"
                    )
                else:
                    progress.console.print(
                        f"[yellow]-[/yellow] {label}: rejected by secondary check"
                    )

    return final


def _print_summary(final: PipelineProgress, output: Path) -> None:
    table = Table(title="Crawl summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Count", justify="right")
    table.add_row("Channels processed", f"{final.done} / {final.total}")
    table.add_row("/about ok", str(final.about_ok))
    table.add_row("/about failed", str(final.about_failed))
    table.add_row("/videos ok", str(final.videos_ok))
    table.add_row("/videos failed", str(final.videos_failed))
    table.add_row("Passed", f"[green]{final.passed}[/green]")
    for stage, count in sorted(final.rejected.items()):
        table.add_row(f"Rejected ({stage})", f"[yellow]{count}[/yellow]")
    table.add_row("Duplicates skipped", str(final.skipped_duplicates))
    table.add_row("Not stored (no channel id)", str(final.not_stored))
    table.add_row("Errors", f"[red]{final.errors}[/red]" if final.errors else "0")
    console.print(table)
    console.print(f"Results written to [bold]{output}[/bold]")
