"""
Unit tests for block page detection.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from channelsieve.services.fetcher import DEFAULT_BLOCK_MARKERS, BlockMarker, detect_block

YT = "www.youtube.com"
URL = "https://www.youtube.com/@kanal/about"


def detect(body: str, urls: tuple[str, ...] = (URL,), host: str = YT, max_chars: int = 200_000):
    return detect_block(urls, host, body, DEFAULT_BLOCK_MARKERS, max_chars)


def test_regular_page_is_not_blocked() -> None:
    assert detect("<html><script>var ytInitialData = {};</script></html>") is None


@pytest.mark.parametrize(
    ("body", "marker"),
    [
        ('<div class="g-recaptcha" data-sitekey="x"></div>', "recaptcha"),
        ("Our systems have detected Unusual Traffic from your computer", "sorry"),
        ("Please confirm you're not a bot", "verify"),
        ("I'm not a robot", "robot_check"),
    ],
)
def test_body_markers(body: str, marker: str) -> None:
    hit = detect(body)
    assert hit is not None
    assert hit.marker == marker


def test_url_marker_checked_before_body() -> None:
    hit = detect(
        "unusual traffic",
        urls=(URL, "https://www.google.com/sorry/index?continue=https://www.youtube.com"),
    )
    assert hit is not None
    assert hit.marker == "url_sorry"
    assert hit.snippet.startswith("https://www.google.com/sorry/")


def test_only_body_prefix_is_scanned() -> None:
    body = "x" * 1000 + "unusual traffic"
    assert detect(body, max_chars=1000) is None
    assert detect(body, max_chars=2000) is not None


def test_markers_for_other_hosts_are_skipped() -> None:
    assert detect("unusual traffic", urls=("https://example.org/",), host="example.org") is None


def test_marker_without_hosts_applies_everywhere() -> None:
    marker = BlockMarker(key="maintenance", pattern="down for maintenance", hosts=())
    hit = detect_block(
        ["https://example.org/"], "example.org", "Site DOWN for maintenance", [marker], 100
    )
    assert hit is not None
    assert hit.marker == "maintenance"


def test_snippet_surrounds_match() -> None:
    body = "a" * 100 + "unusual traffic" + "b" * 300
    hit = detect(body)
    assert hit is not None
    assert hit.snippet.startswith("a" * 40 + "unusual traffic")
    assert len(hit.snippet) == 40 + 160


def test_invalid_marker_pattern_is_rejected() -> None:
    with pytest.raises(ValidationError):
        BlockMarker(key="broken", pattern="(unclosed")
