"""
Data models for channelsieve.

Pure value objects flowing between the fetcher, the extractor, the
classifier and the pipeline driver. None of them has a database identity.
"""

from __future__ import annotations

from channelsieve.models.channel import ChannelInfo, VideoInfo
from channelsieve.models.enums import (
    FetchEventType,
    FilterStage,
    MissingCountryPolicy,
    PipelineStatus,
    RetryReason,
)
from channelsieve.models.fetch_events import FetchEvent
from channelsieve.models.verdict import (
    AlphabetFieldMatch,
    AlphabetResult,
    FilterVerdict,
    LanguageResult,
    LocationResult,
    TopicFieldHit,
    TopicKeywordMatch,
    TopicResult,
)

__all__ = [
    "ChannelInfo",
    "VideoInfo",
    "FetchEvent",
    "FetchEventType",
    "FilterStage",
    "MissingCountryPolicy",
    "PipelineStatus",
    "RetryReason",
    "AlphabetFieldMatch",
    "AlphabetResult",
    "FilterVerdict",
    "LanguageResult",
    "LocationResult",
    "TopicFieldHit",
    "TopicKeywordMatch",
    "TopicResult",
]
