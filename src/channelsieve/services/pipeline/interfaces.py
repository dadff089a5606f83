"""
Boundary contracts between the pipeline driver and its collaborators.

The driver does not know how records are persisted or how the secondary
(model-based) classifier works; it only depends on these protocols.

Protocols
---------
ChannelStore
    Accepts finished channel records keyed by stable channel ID.
SecondaryClassifier
    Opaque second opinion, consulted only for channels the rule
    classifier passed.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Protocol, Sequence, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from channelsieve.models.channel import ChannelInfo, VideoInfo
from channelsieve.models.verdict import FilterVerdict


class SecondaryVerdict(BaseModel):
    """Answer of a secondary classifier for one topic."""

    model_config = ConfigDict(frozen=True)

    suitable: bool
    reason: str = ""


class ChannelRecord(BaseModel):
    """
    A channel ready for persistence.

    Attributes
    ----------
    channel_id : str
        Stable channel ID; records are keyed by it.
    source : str
        The input the channel was crawled from.
    url : str | None
        Channel URL.
    about_ok : bool
        Whether the ``/about`` page yielded channel metadata.
    videos_ok : bool
        Whether the ``/videos`` page yielded a video listing.
    channel_info : ChannelInfo
        Extracted channel metadata.
    videos : list[VideoInfo]
        Extracted videos in page order.
    verdict : FilterVerdict | None
        Rule classifier verdict.
    secondary : dict[str, SecondaryVerdict]
        Secondary classifier answers per topic.
    extracted_at : datetime
        When the record was produced (UTC).
    """

    model_config = ConfigDict(frozen=True)

    channel_id: str
    source: str
    url: str | None = None
    about_ok: bool = False
    videos_ok: bool = False
    channel_info: ChannelInfo
    videos: list[VideoInfo] = Field(default_factory=list)
    verdict: FilterVerdict | None = None
    secondary: dict[str, SecondaryVerdict] = Field(default_factory=dict)
    extracted_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


@runtime_checkable
class ChannelStore(Protocol):
    """Persistence boundary for finished channel records."""

    async def save(self, record: ChannelRecord) -> None:
        """Insert or replace the record with ``record.channel_id``."""
        ...


@runtime_checkable
class SecondaryClassifier(Protocol):
    """Second-opinion classifier boundary."""

    async def analyze(
        self,
        title: str,
        description: str,
        video_titles: Sequence[str],
        topic: str,
    ) -> SecondaryVerdict:
        """Judge whether the channel is suitable with respect to ``topic``."""
        ...
