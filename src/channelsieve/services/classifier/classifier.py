"""
Multi-stage rule classifier for extracted channels.
"""

from __future__ import annotations

import logging
from typing import Sequence

from channelsieve.models.channel import ChannelInfo, VideoInfo
from channelsieve.models.enums import FilterStage
from channelsieve.models.verdict import (
    AlphabetResult,
    FilterVerdict,
    LanguageResult,
    LocationResult,
    TopicResult,
)
from channelsieve.services.classifier.config import ClassifierConfig
from channelsieve.services.classifier.stages import (
    check_alphabet,
    check_language,
    check_location,
    check_topic,
)
from channelsieve.services.classifier.texts import ChannelTexts

logger = logging.getLogger(__name__)


def classify(
    channel_info: ChannelInfo | None,
    videos: Sequence[VideoInfo] | None,
    config: ClassifierConfig | None = None,
) -> FilterVerdict:
    """
    Classify a channel as acceptable or rejectable.

    Stages run in ``config.stage_order``. The first failing stage stops the
    evaluation, so the verdict only carries diagnostics of the stages that
    actually ran. The function is pure: the same inputs always produce an
    identical verdict.

    Parameters
    ----------
    channel_info : ChannelInfo | None
        Extracted channel metadata.
    videos : Sequence[VideoInfo] | None
        Extracted video listing.
    config : ClassifierConfig | None, optional
        Rules to apply (default: ``ClassifierConfig()``).

    Returns
    -------
    FilterVerdict
        Pass/fail, the failing stage and per-stage diagnostics.

    Examples
    --------
    >>> verdict = classify(ChannelInfo(title="Kanal", country="Japan"), [])
    >>> verdict.failed_stage
    <FilterStage.LOCATION: 'location'>
    """
    config = config or ClassifierConfig()
    texts = ChannelTexts.from_channel(channel_info, videos)
    location: LocationResult | None = None
    alphabet: AlphabetResult | None = None
    language: LanguageResult | None = None
    topics: dict[str, TopicResult] = {}

    def verdict(stage: FilterStage = FilterStage.NONE, reason: str | None = None) -> FilterVerdict:
        if stage is not FilterStage.NONE:
            logger.debug(
                "Channel %s rejected at %s: %s", _label(channel_info), stage.value, reason
            )
        return FilterVerdict(
            passed=stage is FilterStage.NONE,
            failed_stage=stage,
            reason=reason,
            location=location,
            alphabet=alphabet,
            language=language,
            topics=topics,
        )

    for stage in config.stage_order:
        if stage is FilterStage.LOCATION:
            if not config.location.enabled:
                continue
            location = check_location(
                channel_info.country if channel_info else None, config.location
            )
            if not location.passed:
                return verdict(stage, location.reason)

        elif stage is FilterStage.ALPHABET:
            alphabet = check_alphabet(texts, config.alphabet)
            if not alphabet.passed:
                return verdict(stage, alphabet.reason)

        elif stage is FilterStage.LANGUAGE:
            language = check_language(texts, config.language)
            if not language.passed:
                return verdict(stage, language.reason)

        elif stage is FilterStage.TOPIC:
            for rule in config.topics:
                if not rule.enabled:
                    continue
                topic = check_topic(texts, rule)
                topics[rule.name] = topic
                if not topic.passed:
                    return verdict(stage, topic.reason)

    return verdict()


def _label(channel_info: ChannelInfo | None) -> str:
    if channel_info is None:
        return "<unknown>"
    return channel_info.id or channel_info.handle or channel_info.title or "<unknown>"
