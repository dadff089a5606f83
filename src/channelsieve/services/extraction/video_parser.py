"""
Video listing extraction from the ``ytInitialData`` of a ``/videos`` tab.
"""

from __future__ import annotations

import logging
from typing import Any

from channelsieve.models.channel import VideoInfo
from channelsieve.services.extraction.text import dig, dig_dict, dig_list, extract_text

logger = logging.getLogger(__name__)

WATCH_URL_TEMPLATE = "https://www.youtube.com/watch?v={video_id}"

_VIDEO_TAB_TITLES = ("videos", "uploads", "alle videos")


def _select_videos_tab(tabs: list[Any]) -> dict[str, Any] | None:
    renderers = [dig_dict(tab, "tabRenderer") for tab in tabs]

    for renderer in renderers:
        if renderer is not None and renderer.get("selected") is True:
            return renderer

    for renderer in renderers:
        if renderer is None:
            continue
        title = renderer.get("title")
        if isinstance(title, str) and any(t in title.lower() for t in _VIDEO_TAB_TITLES):
            return renderer

    return renderers[0] if renderers else None


def _grid_contents(tab: dict[str, Any]) -> list[Any]:
    contents = dig_list(tab, "content", "richGridRenderer", "contents")
    if contents:
        return contents

    # Older layouts nest the grid inside a section list
    for section in dig_list(tab, "content", "sectionListRenderer", "contents"):
        for item in dig_list(section, "itemSectionRenderer", "contents"):
            grid = dig_list(item, "richGridRenderer", "contents")
            if grid:
                return grid
            grid = dig_list(item, "gridRenderer", "items")
            if grid:
                return grid

    return []


def _video_renderer(item: Any) -> dict[str, Any] | None:
    return dig_dict(item, "richItemRenderer", "content", "videoRenderer") or dig_dict(
        item, "gridVideoRenderer"
    )


def _description(renderer: dict[str, Any]) -> str | None:
    parts: list[str] = []
    snippet = extract_text(renderer.get("descriptionSnippet"))
    if snippet:
        parts.append(snippet)
    for detailed in dig_list(renderer, "detailedMetadataSnippets"):
        text = extract_text(dig(detailed, "snippetText"))
        if text:
            parts.append(text)
    return " | ".join(parts).strip() or None


def _to_video(renderer: dict[str, Any]) -> VideoInfo:
    video_id = renderer.get("videoId")
    if not isinstance(video_id, str) or not video_id:
        video_id = None
    return VideoInfo(
        id=video_id,
        title=extract_text(renderer.get("title")),
        url=WATCH_URL_TEMPLATE.format(video_id=video_id) if video_id else None,
        published_text=extract_text(renderer.get("publishedTimeText")),
        views_text=extract_text(renderer.get("viewCountText")),
        duration_text=extract_text(renderer.get("lengthText"))
        or extract_text(
            dig(renderer, "thumbnailOverlays", 0, "thumbnailOverlayTimeStatusRenderer", "text")
        ),
        description=_description(renderer),
    )


def extract_videos(data: Any, limit: int = 30) -> list[VideoInfo]:
    """
    Extract the video listing of a channel's ``/videos`` tab.

    The videos tab is the selected tab, else the first tab whose title
    contains "videos", "uploads" or "alle videos", else the first tab.
    Grid items that are not videos (shelves, continuation tokens) are
    skipped.

    Parameters
    ----------
    data : Any
        Parsed ``ytInitialData`` of a ``/videos`` page.
    limit : int, optional
        Maximum number of videos to return (default: 30).

    Returns
    -------
    list[VideoInfo]
        Videos in page order; empty when any part of the path is missing.
    """
    if limit <= 0:
        return []

    tabs = dig_list(data, "contents", "twoColumnBrowseResultsRenderer", "tabs")
    if not tabs:
        return []

    tab = _select_videos_tab(tabs)
    if tab is None:
        return []

    contents = _grid_contents(tab)
    if not contents:
        logger.debug("No video grid in tab %r", tab.get("title"))
        return []

    videos: list[VideoInfo] = []
    for item in contents:
        renderer = _video_renderer(item)
        if renderer is None:
            continue
        videos.append(_to_video(renderer))
        if len(videos) >= limit:
            break

    return videos
