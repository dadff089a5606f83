"""
CLI command for offline extraction from a saved channel page.

Useful for checking extractor behaviour against pages saved from a browser
without sending a single request.
"""

from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.console import Console

from channelsieve.config.settings import settings
from channelsieve.exceptions import (
    EXIT_CODE_GENERAL_ERROR,
    EXIT_CODE_INVALID_ARGS,
    ExtractionError,
)
from channelsieve.services.extraction import (
    extract_channel_info,
    extract_channel_info_from_meta,
    extract_embedded_object,
    extract_videos,
    probe_country_from_about_html,
)

console = Console()


def extract_command(
    html_file: Path = typer.Argument(
        ...,
        help="Saved channel page (/about or /videos)",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    videos: bool = typer.Option(
        False,
        "--videos",
        help="Also extract the video listing",
    ),
    limit: int = typer.Option(
        settings.videos_limit,
        "--limit",
        "-l",
        help="Maximum number of videos to extract",
        min=0,
    ),
) -> None:
    """
    Extract channel metadata (and videos) from a saved HTML page.

    Prints a JSON object with "channel_info" and, with --videos, "videos".

    Examples:
        channelsieve extract about.html
        channelsieve extract videos.html --videos --limit 10
    """
    try:
        html = html_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        console.print(f"[red]Error: cannot read {html_file}: {e}[/red]")
        raise typer.Exit(code=EXIT_CODE_INVALID_ARGS)

    data = extract_embedded_object(html)
    channel_info = None
    if data is not None:
        try:
            channel_info = extract_channel_info(data)
        except ExtractionError as e:
            console.print(f"[yellow]Warning: {e.message}[/yellow]", highlight=False)
    if channel_info is None:
        channel_info = extract_channel_info_from_meta(html)
    if channel_info is not None and not channel_info.country:
        country = probe_country_from_about_html(html)
        if country:
            channel_info = channel_info.model_copy(update={"country": country})

    if channel_info is None and not videos:
        console.print("[red]Error: no channel metadata found in page[/red]")
        raise typer.Exit(code=EXIT_CODE_GENERAL_ERROR)

    output: dict[str, object] = {
        "channel_info": (
            channel_info.model_dump(mode="json") if channel_info is not None else None
        )
    }
    if videos:
        video_list = extract_videos(data, limit) if data is not None else []
        output["videos"] = [v.model_dump(mode="json") for v in video_list]

    typer.echo(json.dumps(output, indent=2, ensure_ascii=False))
