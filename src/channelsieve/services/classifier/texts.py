"""
Text views of a channel used by the classifier stages.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, Sequence

from channelsieve.models.channel import ChannelInfo, VideoInfo

# Runs of Unicode letters and digits (\w without the underscore)
_TOKEN_RE = re.compile(r"[^\W_]+")


@dataclass(frozen=True)
class ChannelTexts:
    """The text fields of a channel that the classifier inspects."""

    title: str
    description: str
    video_titles: tuple[str, ...]

    @classmethod
    def from_channel(
        cls, channel_info: ChannelInfo | None, videos: Sequence[VideoInfo] | None
    ) -> ChannelTexts:
        """Collect title, description and video titles, using "" for gaps."""
        return cls(
            title=(channel_info.title or "") if channel_info else "",
            description=(channel_info.description or "") if channel_info else "",
            video_titles=tuple(v.title or "" for v in videos or ()),
        )

    def fields(self) -> Iterator[tuple[str, str]]:
        """Yield ``(field_name, text)`` for every field, each on its own."""
        yield "title", self.title
        yield "description", self.description
        for i, video_title in enumerate(self.video_titles):
            yield f"videos[{i}].title", video_title

    def full_text(self) -> str:
        """All fields joined into one text."""
        return "\n".join([self.title, self.description, *self.video_titles])


def tokenize(text: str) -> list[str]:
    """
    Split text into lowercase letter/digit tokens, keeping duplicates.

    Examples
    --------
    >>> tokenize("Wir sind's: 2 Brüder!")
    ['wir', 'sind', 's', '2', 'brüder']
    """
    return _TOKEN_RE.findall(text.lower())
