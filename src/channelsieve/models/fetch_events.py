"""
Structured fetcher events.

The fetcher never logs or persists on its own; it reports what it is doing
as :class:`FetchEvent` values to a caller-supplied sink.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from channelsieve.models.enums import FetchEventType, RetryReason


class FetchEvent(BaseModel):
    """
    A single event emitted by :class:`~channelsieve.services.fetcher.SafeFetcher`.

    Only ``type`` and ``url`` are always set; the remaining fields depend on
    the event type.

    Attributes
    ----------
    type : FetchEventType
        What happened.
    url : str
        The URL of the logical fetch.
    host : str | None
        Target host (``host_wait``, ``block_detected``).
    attempt : int | None
        Zero-based attempt number.
    status : int | None
        HTTP status (``fetch_response``, ``block_detected``, ``retry_wait``).
    elapsed_ms : int | None
        Attempt latency in milliseconds.
    wait_ms : int | None
        Scheduled delay (``host_wait``, ``retry_wait``).
    reason : RetryReason | None
        Why a retry was scheduled.
    marker : str | None
        Matched block marker key.
    message : str | None
        Error description (``fetch_error``).
    active : int | None
        In-flight request count when queueing began.
    """

    model_config = ConfigDict(frozen=True)

    type: FetchEventType
    url: str
    host: str | None = None
    attempt: int | None = None
    status: int | None = None
    elapsed_ms: int | None = None
    wait_ms: int | None = None
    reason: RetryReason | None = None
    marker: str | None = None
    message: str | None = None
    active: int | None = None
