"""
Enums for channelsieve models.

Defines enumeration types used across the application for consistent
type safety and validation.
"""

from __future__ import annotations

from enum import Enum


class FilterStage(str, Enum):
    """Stages of the rule classifier, plus ``NONE`` for a passing verdict."""

    LOCATION = "location"
    ALPHABET = "alphabet"
    LANGUAGE = "language"
    TOPIC = "topic"
    NONE = "none"


class MissingCountryPolicy(str, Enum):
    """How the location stage treats a channel without a country."""

    REJECT = "reject"
    DEFER = "defer"  # Let the content-based stages decide


class FetchEventType(str, Enum):
    """Structured events emitted by the fetcher."""

    QUEUE_WAIT = "queue_wait"
    HOST_WAIT = "host_wait"
    FETCH_START = "fetch_start"
    FETCH_RESPONSE = "fetch_response"
    FETCH_ERROR = "fetch_error"
    BLOCK_DETECTED = "block_detected"
    RETRY_WAIT = "retry_wait"


class RetryReason(str, Enum):
    """Why the fetcher scheduled another attempt."""

    RETRYABLE_STATUS = "retryable_status"
    NETWORK_OR_TIMEOUT = "network_or_timeout"


class PipelineStatus(str, Enum):
    """Lifecycle of a pipeline run."""

    RUNNING = "running"
    DONE = "done"
    BLOCKED = "blocked"
