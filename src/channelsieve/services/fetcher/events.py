"""
Event sinks for fetcher events.

An event sink is any callable accepting a
:class:`~channelsieve.models.fetch_events.FetchEvent`. The fetcher calls it
synchronously and never awaits it.
"""

from __future__ import annotations

import logging
from typing import Callable

from channelsieve.models.enums import FetchEventType
from channelsieve.models.fetch_events import FetchEvent

EventSink = Callable[[FetchEvent], None]

_WARNING_EVENTS = frozenset(
    {
        FetchEventType.BLOCK_DETECTED,
        FetchEventType.RETRY_WAIT,
        FetchEventType.FETCH_ERROR,
    }
)


class LoggingEventSink:
    """
    Forward fetcher events to a :mod:`logging` logger.

    Block detections, retries and attempt errors are logged at WARNING;
    everything else at DEBUG.

    Parameters
    ----------
    logger : logging.Logger | None, optional
        Target logger (default: this module's logger).
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger(__name__)

    def __call__(self, event: FetchEvent) -> None:
        level = logging.WARNING if event.type in _WARNING_EVENTS else logging.DEBUG
        details = event.model_dump(exclude_none=True, exclude={"type", "url"}, mode="json")
        self._logger.log(level, "fetch %s %s %s", event.type.value, event.url, details)
