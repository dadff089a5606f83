"""
Pydantic models for data extracted from YouTube channel pages.

Models
------
ChannelInfo
    Channel metadata read from a channel page's ``ytInitialData``.
VideoInfo
    One entry of a channel's ``/videos`` listing.
"""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

_CHANNEL_ID_RE = re.compile(r"^UC[A-Za-z0-9_-]{22}$")


class ChannelInfo(BaseModel):
    """
    Channel metadata extracted from an embedded state object.

    Every field is optional. A record without ``id`` cannot be deduplicated
    or stored by downstream collaborators; see :attr:`is_stable`.

    Attributes
    ----------
    id : str | None
        Stable YouTube channel ID (``UC`` + 22 characters).
    title : str | None
        Channel display name.
    handle : str | None
        ``@handle`` derived from the vanity URL.
    url : str | None
        Canonical channel URL.
    description : str | None
        Channel description.
    country : str | None
        Free-text country as shown on the About panel.
    keywords : list[str]
        Channel keywords.
    subscriber_count_text : str | None
        Human-readable subscriber count (e.g. "1,2 Mio. Abonnenten").
    avatar_url : str | None
        Largest avatar thumbnail URL.
    is_family_safe : bool | None
        YouTube's family-safe flag.
    """

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    title: str | None = None
    handle: str | None = None
    url: str | None = None
    description: str | None = None
    country: str | None = None
    keywords: list[str] = Field(default_factory=list)
    subscriber_count_text: str | None = None
    avatar_url: str | None = None
    is_family_safe: bool | None = None

    @field_validator("id", mode="before")
    @classmethod
    def validate_id(cls, v: Any) -> str | None:
        """
        Drop channel IDs that do not look like ``UC[A-Za-z0-9_-]{22}``.

        A malformed ID is treated as absent rather than as an error, so
        the record stays usable but is no longer considered stable.
        """
        if v is None:
            return None
        if not isinstance(v, str) or not _CHANNEL_ID_RE.match(v):
            return None
        return v

    @property
    def is_stable(self) -> bool:
        """Whether the record carries a stable channel ID."""
        return self.id is not None


class VideoInfo(BaseModel):
    """
    One video of a channel's ``/videos`` listing, in page order.

    Attributes
    ----------
    id : str | None
        YouTube video ID.
    title : str | None
        Video title.
    url : str | None
        Watch URL built from ``id``.
    published_text : str | None
        Relative publish time (e.g. "vor 2 Tagen").
    views_text : str | None
        Human-readable view count.
    duration_text : str | None
        Human-readable duration.
    description : str | None
        Description snippet(s), joined with ``" | "``.
    """

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    title: str | None = None
    url: str | None = None
    published_text: str | None = None
    views_text: str | None = None
    duration_text: str | None = None
    description: str | None = None
