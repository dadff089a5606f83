"""
YouTube URL utilities.

Functions
---------
normalize_channel_url
    Trim a URL and strip trailing slashes so URLs compare equal.
channel_base_url
    Canonical channel URL without tab suffix, query or fragment.
channel_about_url / channel_videos_url
    The ``/about`` and ``/videos`` tab URLs of a channel.
parse_channel_ref
    Classify a channel URL as id, handle, custom or user reference.
is_channel_url / is_video_url
    URL shape checks.
extract_channel_id_from_watch_page
    Owner channel ID of a watch page's embedded data.
"""

from __future__ import annotations

import re
from typing import Any, Literal, NamedTuple
from urllib.parse import urlsplit, urlunsplit

from channelsieve.services.extraction.text import dig, dig_list

YOUTUBE_BASE_URL = "https://www.youtube.com"

_CHANNEL_ID_RE = re.compile(r"^UC[A-Za-z0-9_-]{22}$")
_CHANNEL_PATH_RE = re.compile(r"^/channel/(UC[A-Za-z0-9_-]{22})(?:/|$)")
_HANDLE_PATH_RE = re.compile(r"^/@([A-Za-z0-9._-]+)(?:/|$)")
_CUSTOM_PATH_RE = re.compile(r"^/c/([A-Za-z0-9._-]+)(?:/|$)")
_USER_PATH_RE = re.compile(r"^/user/([A-Za-z0-9._-]+)(?:/|$)")

CHANNEL_TABS: frozenset[str] = frozenset(
    {"about", "videos", "featured", "shorts", "streams", "playlists", "community", "podcasts"}
)


class ChannelRef(NamedTuple):
    """A parsed channel reference: ``kind`` and the identifying ``value``."""

    kind: Literal["id", "handle", "custom", "user"]
    value: str


def _is_youtube_host(host: str | None) -> bool:
    if not host:
        return False
    host = host.lower()
    return host == "youtube.com" or host.endswith(".youtube.com")


def normalize_channel_url(url: str) -> str:
    """
    Trim whitespace and trailing slashes.

    Examples
    --------
    >>> normalize_channel_url("  https://www.youtube.com/@kanal// ")
    'https://www.youtube.com/@kanal'
    """
    return url.strip().rstrip("/")


def channel_base_url(url_or_id: str) -> str:
    """
    Return the channel URL without tab suffix, query string or fragment.

    A bare channel ID (``UC...``) or handle (``@name``) is expanded to a
    full ``www.youtube.com`` URL.

    Examples
    --------
    >>> channel_base_url("https://www.youtube.com/@kanal/videos?view=0")
    'https://www.youtube.com/@kanal'
    >>> channel_base_url("UCabcdefghijklmnopqrstuv")
    'https://www.youtube.com/channel/UCabcdefghijklmnopqrstuv'
    """
    value = normalize_channel_url(url_or_id)
    if _CHANNEL_ID_RE.match(value):
        return f"{YOUTUBE_BASE_URL}/channel/{value}"
    if value.startswith("@") and "/" not in value:
        return f"{YOUTUBE_BASE_URL}/{value}"

    parts = urlsplit(value)
    path = parts.path.rstrip("/")
    head, _, last = path.rpartition("/")
    if head and head not in ("/c", "/user", "/channel") and last.lower() in CHANNEL_TABS:
        path = head
    return urlunsplit((parts.scheme or "https", parts.netloc, path, "", ""))


def channel_about_url(url_or_id: str) -> str:
    """Return the ``/about`` tab URL of a channel."""
    return f"{channel_base_url(url_or_id)}/about"


def channel_videos_url(url_or_id: str) -> str:
    """Return the ``/videos`` tab URL of a channel."""
    return f"{channel_base_url(url_or_id)}/videos"


def parse_channel_ref(url: str) -> ChannelRef | None:
    """
    Parse the channel reference out of a YouTube channel URL.

    Parameters
    ----------
    url : str
        A channel URL (``/channel/UC...``, ``/@handle``, ``/c/name`` or
        ``/user/name``, optionally followed by a tab).

    Returns
    -------
    ChannelRef | None
        The reference, or None for non-channel or non-YouTube URLs.

    Examples
    --------
    >>> parse_channel_ref("https://www.youtube.com/@kanal/about")
    ChannelRef(kind='handle', value='@kanal')
    """
    parts = urlsplit(url.strip())
    if not _is_youtube_host(parts.hostname):
        return None
    path = parts.path

    match = _CHANNEL_PATH_RE.match(path)
    if match:
        return ChannelRef("id", match.group(1))
    match = _HANDLE_PATH_RE.match(path)
    if match:
        return ChannelRef("handle", f"@{match.group(1)}")
    match = _CUSTOM_PATH_RE.match(path)
    if match:
        return ChannelRef("custom", match.group(1))
    match = _USER_PATH_RE.match(path)
    if match:
        return ChannelRef("user", match.group(1))
    return None


def is_channel_url(url: str) -> bool:
    """Whether ``url`` points at a YouTube channel."""
    return parse_channel_ref(url) is not None


def is_video_url(url: str) -> bool:
    """Whether ``url`` is a YouTube watch or ``youtu.be`` short link."""
    parts = urlsplit(url.strip())
    host = (parts.hostname or "").lower()
    if host == "youtu.be":
        return bool(parts.path.strip("/"))
    return _is_youtube_host(host) and parts.path == "/watch"


def extract_channel_id_from_watch_page(data: Any) -> str | None:
    """
    Return the owner channel ID from a watch page's embedded data.

    ``videoDetails.channelId`` (player response) is preferred; otherwise
    the owner renderer's browse endpoint in the primary info block is used.

    Parameters
    ----------
    data : Any
        Parsed ``ytInitialPlayerResponse`` or ``ytInitialData`` of a watch
        page.

    Returns
    -------
    str | None
        A ``UC...`` channel ID, or None.
    """
    channel_id = dig(data, "videoDetails", "channelId")
    if isinstance(channel_id, str) and _CHANNEL_ID_RE.match(channel_id):
        return channel_id

    items = dig_list(
        data, "contents", "twoColumnWatchNextResults", "results", "results", "contents"
    )
    for item in items:
        browse_id = dig(
            item,
            "videoPrimaryInfoRenderer",
            "owner",
            "videoOwnerRenderer",
            "navigationEndpoint",
            "browseEndpoint",
            "browseId",
        )
        if isinstance(browse_id, str) and _CHANNEL_ID_RE.match(browse_id):
            return browse_id
        browse_id = dig(
            item,
            "videoSecondaryInfoRenderer",
            "owner",
            "videoOwnerRenderer",
            "navigationEndpoint",
            "browseEndpoint",
            "browseId",
        )
        if isinstance(browse_id, str) and _CHANNEL_ID_RE.match(browse_id):
            return browse_id
    return None
