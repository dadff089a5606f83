"""
Server-rendered HTML fallbacks for pages without usable embedded data.

Functions
---------
extract_channel_info_from_meta
    Channel title, description, avatar and URL from Open Graph meta tags.
probe_country_from_about_html
    Country text from the server-rendered About panel row.
"""

from __future__ import annotations

import logging
import re

from bs4 import BeautifulSoup, Tag

from channelsieve.models.channel import ChannelInfo

logger = logging.getLogger(__name__)

_CHANNEL_ID_IN_URL_RE = re.compile(r"/channel/(UC[A-Za-z0-9_-]{22})")
_HANDLE_IN_URL_RE = re.compile(r"/(@[A-Za-z0-9._-]+)")
_COUNTRY_LABEL_RE = re.compile(r"\b(?:Land|Country)\b", re.IGNORECASE)
_COUNTRY_MARKER = "privacy_public"


def _meta_content(soup: BeautifulSoup, **attrs: str) -> str | None:
    tag = soup.find("meta", attrs=attrs)
    if isinstance(tag, Tag) and tag.get("content"):
        content = str(tag["content"]).strip()
        return content or None
    return None


def extract_channel_info_from_meta(html: str) -> ChannelInfo | None:
    """
    Extract basic channel metadata from HTML meta tags using BeautifulSoup.

    Used when a channel page carries no embedded state object at all.
    Parses ``og:title``, ``og:description``, ``og:image`` and ``og:url``,
    plus the ``itemprop="channelId"`` structured data and the canonical
    link for the channel ID.

    Parameters
    ----------
    html : str
        Raw channel page HTML.

    Returns
    -------
    ChannelInfo | None
        The partial channel record, or None if no usable tag was found.
    """
    if not html:
        return None

    soup = BeautifulSoup(html, "html.parser")

    title = _meta_content(soup, property="og:title")
    description = _meta_content(soup, property="og:description")
    avatar_url = _meta_content(soup, property="og:image")
    url = _meta_content(soup, property="og:url")

    canonical = soup.find("link", attrs={"rel": "canonical"})
    canonical_href = (
        str(canonical["href"]) if isinstance(canonical, Tag) and canonical.get("href") else None
    )
    url = url or canonical_href

    channel_id = _meta_content(soup, itemprop="channelId") or _meta_content(
        soup, itemprop="identifier"
    )
    if channel_id is None:
        for candidate in (url, canonical_href):
            match = _CHANNEL_ID_IN_URL_RE.search(candidate or "")
            if match:
                channel_id = match.group(1)
                break

    handle: str | None = None
    for candidate in (canonical_href, url):
        match = _HANDLE_IN_URL_RE.search(candidate or "")
        if match:
            handle = match.group(1)
            break

    if not any((title, description, avatar_url, url, channel_id)):
        return None

    logger.debug("Channel info recovered from meta tags (id=%s)", channel_id)
    return ChannelInfo(
        id=channel_id,
        title=title,
        handle=handle,
        url=url,
        description=description,
        avatar_url=avatar_url,
    )


def _pick_likely_country(text: str) -> str | None:
    # Rows read like "Land Deutschland" or "Country: Austria"
    cleaned = _COUNTRY_LABEL_RE.sub("", " ".join(text.split())).strip()
    parts = [p.strip() for p in cleaned.split(":") if p.strip()]
    candidate = parts[-1] if parts else cleaned
    candidate = candidate.lstrip("-–—|").strip()
    if len(candidate) < 3:
        return None
    return candidate


def _has_country_marker(tag: Tag) -> bool:
    return any(_COUNTRY_MARKER in str(value) for value in tag.attrs.values())


def probe_country_from_about_html(html: str) -> str | None:
    """
    Read the country from the server-rendered About panel, if present.

    The About panel marks the country row with a ``privacy_public`` (globe)
    icon. When the server renders that row into the HTML, the row's text
    holds the country. Most pages render the panel client-side, in which
    case the marker is absent and None is returned.

    Parameters
    ----------
    html : str
        Raw ``/about`` page HTML.

    Returns
    -------
    str | None
        The country text, or None.

    Examples
    --------
    >>> probe_country_from_about_html(
    ...     '<table><tr><td><yt-icon icon="privacy_public"></yt-icon></td>'
    ...     '<td>Deutschland</td></tr></table>'
    ... )
    'Deutschland'
    """
    if not html or _COUNTRY_MARKER not in html:
        return None

    soup = BeautifulSoup(html, "html.parser")
    for element in soup(["script", "style"]):
        element.decompose()

    icon = soup.find(_has_country_marker)
    if not isinstance(icon, Tag):
        logger.debug("Country marker only present in scripts; panel is client-rendered")
        return None

    row = icon.find_parent("tr") or icon.parent
    if not isinstance(row, Tag):
        return None

    return _pick_likely_country(row.get_text(" ", strip=True))
