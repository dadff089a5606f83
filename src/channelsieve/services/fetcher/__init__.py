"""
Resilient, rate-limited fetching of YouTube channel pages.

The fetch process includes:
- A global concurrency gate with FIFO queueing
- Per-host pacing (minimum interval plus random jitter)
- Per-attempt timeouts and retry with exponential backoff
- Block/verification page detection that stops the crawl session

Modules
-------
safe_fetcher
    The :class:`SafeFetcher` itself
pacing
    Concurrency gate and per-host pacer
retry_policy
    Retryable statuses, ``Retry-After`` parsing and backoff
block_detection
    Block marker scanning
config
    Fetcher configuration models
events
    Event sink protocol and implementations
"""

from __future__ import annotations

from channelsieve.services.fetcher.block_detection import BlockMatch, detect_block
from channelsieve.services.fetcher.config import (
    DEFAULT_BLOCK_MARKERS,
    BlockMarker,
    FetcherConfig,
    HostRule,
)
from channelsieve.services.fetcher.events import (
    EventSink,
    LoggingEventSink,
)
from channelsieve.services.fetcher.pacing import ConcurrencyGate, HostPacer
from channelsieve.services.fetcher.safe_fetcher import SafeFetcher

__all__ = [
    "DEFAULT_BLOCK_MARKERS",
    "BlockMarker",
    "BlockMatch",
    "ConcurrencyGate",
    "EventSink",
    "FetcherConfig",
    "HostPacer",
    "HostRule",
    "LoggingEventSink",
    "SafeFetcher",
    "detect_block",
]
