"""
Extraction of structured channel data from YouTube page HTML.

Modules
-------
initial_data
    Locating and parsing the embedded ``ytInitialData`` object
text
    Safe accessors for the untyped data tree
channel_parser
    Channel metadata and country lookup
video_parser
    Video listing of the ``/videos`` tab
meta_fallback
    Open Graph and server-rendered HTML fallbacks (BeautifulSoup)
urls
    Channel URL building and parsing
"""

from __future__ import annotations

from channelsieve.services.extraction.channel_parser import (
    extract_channel_info,
    find_country,
)
from channelsieve.services.extraction.initial_data import (
    extract_embedded_object,
    extract_player_response,
)
from channelsieve.services.extraction.meta_fallback import (
    extract_channel_info_from_meta,
    probe_country_from_about_html,
)
from channelsieve.services.extraction.text import dig, extract_text
from channelsieve.services.extraction.urls import (
    ChannelRef,
    channel_about_url,
    channel_base_url,
    channel_videos_url,
    extract_channel_id_from_watch_page,
    is_channel_url,
    is_video_url,
    normalize_channel_url,
    parse_channel_ref,
)
from channelsieve.services.extraction.video_parser import extract_videos

__all__ = [
    "ChannelRef",
    "channel_about_url",
    "channel_base_url",
    "channel_videos_url",
    "dig",
    "extract_channel_id_from_watch_page",
    "extract_channel_info",
    "extract_channel_info_from_meta",
    "extract_embedded_object",
    "extract_player_response",
    "extract_text",
    "extract_videos",
    "find_country",
    "is_channel_url",
    "is_video_url",
    "normalize_channel_url",
    "parse_channel_ref",
    "probe_country_from_about_html",
]
