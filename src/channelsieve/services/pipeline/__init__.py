"""
Pipeline driver tying fetcher, extractor and classifier together.

Modules
-------
driver
    :class:`ChannelPipeline` and its progress and result models
interfaces
    Store and secondary classifier protocols
jsonl_store
    JSON Lines store used by the CLI
"""

from __future__ import annotations

from channelsieve.services.pipeline.driver import (
    BlockInfo,
    ChannelPipeline,
    ChannelResult,
    PipelineProgress,
)
from channelsieve.services.pipeline.interfaces import (
    ChannelRecord,
    ChannelStore,
    SecondaryClassifier,
    SecondaryVerdict,
)
from channelsieve.services.pipeline.jsonl_store import (
    JsonlChannelStore,
    read_channel_records,
)

__all__ = [
    "BlockInfo",
    "ChannelPipeline",
    "ChannelRecord",
    "ChannelResult",
    "ChannelStore",
    "JsonlChannelStore",
    "PipelineProgress",
    "SecondaryClassifier",
    "SecondaryVerdict",
    "read_channel_records",
]
