"""
Unit tests for the BeautifulSoup-based HTML fallbacks.
"""

from __future__ import annotations

from channelsieve.services.extraction import (
    extract_channel_info_from_meta,
    probe_country_from_about_html,
)
from tests.factories.channel_factory import CHANNEL_ID

META_PAGE = f"""
<html><head>
<meta property="og:title" content="Kochen mit Oma">
<meta property="og:description" content="Die besten Rezepte.">
<meta property="og:image" content="https://yt3.ggpht.com/avatar">
<meta property="og:url" content="https://www.youtube.com/channel/{CHANNEL_ID}">
<link rel="canonical" href="https://www.youtube.com/@kochenmitoma">
</head><body></body></html>
"""


class TestMetaFallback:
    """Open Graph meta tags."""

    def test_full_meta(self) -> None:
        info = extract_channel_info_from_meta(META_PAGE)

        assert info is not None
        assert info.id == CHANNEL_ID
        assert info.title == "Kochen mit Oma"
        assert info.description == "Die besten Rezepte."
        assert info.avatar_url == "https://yt3.ggpht.com/avatar"
        assert info.url == f"https://www.youtube.com/channel/{CHANNEL_ID}"
        assert info.handle == "@kochenmitoma"
        assert info.country is None

    def test_itemprop_channel_id(self) -> None:
        html = (
            f'<html><head><meta itemprop="channelId" content="{CHANNEL_ID}">'
            '<meta property="og:title" content="Kanal"></head></html>'
        )
        info = extract_channel_info_from_meta(html)
        assert info is not None
        assert info.id == CHANNEL_ID

    def test_canonical_link_as_url(self) -> None:
        html = '<html><head><link rel="canonical" href="https://www.youtube.com/@kanal"></head></html>'
        info = extract_channel_info_from_meta(html)
        assert info is not None
        assert info.url == "https://www.youtube.com/@kanal"
        assert info.handle == "@kanal"
        assert info.id is None

    def test_nothing_found(self) -> None:
        assert extract_channel_info_from_meta("<html><head></head></html>") is None
        assert extract_channel_info_from_meta("") is None

    def test_empty_content_is_ignored(self) -> None:
        html = '<html><head><meta property="og:title" content="  "></head></html>'
        assert extract_channel_info_from_meta(html) is None


class TestCountryProbe:
    """Server-rendered About panel row."""

    def test_country_row(self) -> None:
        html = (
            "<table><tr><td><yt-icon icon='privacy_public'></yt-icon></td>"
            "<td>Deutschland</td></tr></table>"
        )
        assert probe_country_from_about_html(html) == "Deutschland"

    def test_label_is_removed(self) -> None:
        html = (
            "<div><img src='/icons/privacy_public.svg'>"
            "<span>Land: Österreich</span></div>"
        )
        assert probe_country_from_about_html(html) == "Österreich"

    def test_marker_only_in_script(self) -> None:
        html = "<html><script>var icons = ['privacy_public'];</script><p>Deutschland</p></html>"
        assert probe_country_from_about_html(html) is None

    def test_marker_absent(self) -> None:
        assert probe_country_from_about_html("<html>Deutschland</html>") is None

    def test_too_short_text(self) -> None:
        html = "<tr><td><yt-icon icon='privacy_public'></yt-icon></td><td>DE</td></tr>"
        assert probe_country_from_about_html(html) is None
