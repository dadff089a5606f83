"""
Block and verification page detection.

YouTube answers suspected automated traffic with interstitial pages instead
of real content. :func:`detect_block` scans a response for the configured
:class:`~channelsieve.services.fetcher.config.BlockMarker` patterns.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from channelsieve.services.fetcher.config import BlockMarker

_SNIPPET_BEFORE = 40
_SNIPPET_AFTER = 160
_URL_SNIPPET_LENGTH = 140


@dataclass(frozen=True)
class BlockMatch:
    """A block marker hit: the marker key and a short excerpt around it."""

    marker: str
    snippet: str


def detect_block(
    urls: Iterable[str],
    host: str,
    body: str,
    markers: Iterable[BlockMarker],
    max_scan_chars: int,
) -> BlockMatch | None:
    """
    Look for block markers in the URLs and body prefix of a response.

    URL markers are checked first, against every URL in ``urls`` (the
    request URL and the final URL after redirects). Body markers are checked
    in configuration order against at most ``max_scan_chars`` characters.

    Parameters
    ----------
    urls : Iterable[str]
        Request URL and, if different, the final URL after redirects.
    host : str
        Host of the request; markers scoped to other hosts are skipped.
    body : str
        Decoded response body.
    markers : Iterable[BlockMarker]
        Markers to look for.
    max_scan_chars : int
        Length of the body prefix to scan.

    Returns
    -------
    BlockMatch | None
        The first hit, or None if the response looks like real content.
    """
    applicable = [m for m in markers if m.applies_to(host)]
    if not applicable:
        return None

    for marker in applicable:
        if marker.target != "url":
            continue
        for url in urls:
            if marker.regex.search(url):
                return BlockMatch(
                    marker=marker.key,
                    snippet=url.lower()[:_URL_SNIPPET_LENGTH],
                )

    scan = body[:max_scan_chars] if len(body) > max_scan_chars else body
    for marker in applicable:
        if marker.target != "body":
            continue
        match = marker.regex.search(scan)
        if match:
            start = max(0, match.start() - _SNIPPET_BEFORE)
            return BlockMatch(
                marker=marker.key,
                snippet=scan[start : match.start() + _SNIPPET_AFTER],
            )

    return None
