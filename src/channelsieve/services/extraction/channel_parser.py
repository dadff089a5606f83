"""
Channel metadata extraction from a parsed ``ytInitialData`` object.

Functions
---------
extract_channel_info
    Build a :class:`~channelsieve.models.channel.ChannelInfo` from the
    channel metadata container and header.
find_country
    Locate the channel's free-text country, wherever the current layout
    puts it.
"""

from __future__ import annotations

import logging
import shlex
from typing import Any

from channelsieve.exceptions import MetadataMissingError
from channelsieve.models.channel import ChannelInfo
from channelsieve.services.extraction.text import dig, dig_dict, dig_list, extract_text

logger = logging.getLogger(__name__)

_HEADER_RENDERERS = ("c4TabbedHeaderRenderer", "pageHeaderRenderer")


def find_country(data: Any) -> str | None:
    """
    Find the channel country in an embedded state object.

    The direct path ``metadata.channelMetadataRenderer.country`` is tried
    first. When it is empty the whole tree is searched depth-first for an
    ``aboutChannelViewModel`` carrying a ``country``, because the About
    panel moves between layouts.

    The search uses an explicit stack (no recursion limit on deep trees)
    and a visited set keyed by object identity, so shared or cyclic
    references are scanned once.

    Parameters
    ----------
    data : Any
        Parsed ``ytInitialData``.

    Returns
    -------
    str | None
        The first non-empty country text found, or None.

    Examples
    --------
    >>> find_country({"metadata": {"channelMetadataRenderer": {"country": "Deutschland"}}})
    'Deutschland'
    """
    direct = extract_text(dig(data, "metadata", "channelMetadataRenderer", "country"))
    if direct:
        return direct

    if not isinstance(data, (dict, list)):
        return None

    stack: list[Any] = [data]
    seen: set[int] = set()

    while stack:
        current = stack.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))

        if isinstance(current, dict):
            about = current.get("aboutChannelViewModel")
            if isinstance(about, dict):
                country = extract_text(about.get("country"))
                if country:
                    return country
            children = current.values()
        else:
            children = current

        for child in children:
            if isinstance(child, (dict, list)):
                stack.append(child)

    return None


def _parse_keywords(value: Any) -> list[str]:
    if isinstance(value, list):
        return [k.strip() for k in value if isinstance(k, str) and k.strip()]
    if isinstance(value, str):
        # Keyword strings quote multi-word phrases: 'gaming "lets play" minecraft'
        try:
            parts = shlex.split(value)
        except ValueError:
            parts = value.split()
        return [p for p in parts if p.strip()]
    return []


def _handle_from_vanity_url(vanity_url: Any) -> str | None:
    if not isinstance(vanity_url, str) or "@" not in vanity_url:
        return None
    name = vanity_url.split("@")[1].strip("/")
    return f"@{name}" if name else None


def _find_header(data: Any) -> dict[str, Any] | None:
    for renderer in _HEADER_RENDERERS:
        header = dig_dict(data, "header", renderer)
        if header is not None:
            return header
    return None


def extract_channel_info(data: Any) -> ChannelInfo:
    """
    Extract channel metadata from an embedded state object.

    Parameters
    ----------
    data : Any
        Parsed ``ytInitialData`` of a channel page (``/about``,
        ``/videos`` or the channel home).

    Returns
    -------
    ChannelInfo
        The channel record. Every field except the container itself is
        optional; malformed channel IDs are dropped.

    Raises
    ------
    MetadataMissingError
        If ``metadata.channelMetadataRenderer`` is absent.
    """
    meta = dig_dict(data, "metadata", "channelMetadataRenderer")
    if meta is None:
        raise MetadataMissingError()

    header = _find_header(data)

    thumbnails = dig_list(meta, "avatar", "thumbnails")
    avatar_url = dig(thumbnails, -1, "url") if thumbnails else None

    is_family_safe = meta.get("isFamilySafe")

    info = ChannelInfo(
        id=meta.get("externalId"),
        title=extract_text(meta.get("title")),
        handle=_handle_from_vanity_url(meta.get("vanityChannelUrl")),
        url=meta.get("channelUrl") if isinstance(meta.get("channelUrl"), str) else None,
        description=extract_text(meta.get("description")),
        country=find_country(data),
        keywords=_parse_keywords(meta.get("keywords")),
        subscriber_count_text=extract_text(dig(header, "subscriberCountText")),
        avatar_url=avatar_url if isinstance(avatar_url, str) else None,
        is_family_safe=is_family_safe if isinstance(is_family_safe, bool) else None,
    )
    if meta.get("externalId") and info.id is None:
        logger.warning("Ignoring malformed channel id %r", meta.get("externalId"))
    return info
