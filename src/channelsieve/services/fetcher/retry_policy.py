"""
Retry decisions for the resilient fetcher.

Functions
---------
is_retryable_status
    Whether an HTTP status should be retried.
parse_retry_after_ms
    Convert a ``Retry-After`` header value into a delay in milliseconds.
backoff_ms
    Exponential backoff delay for a given attempt.
"""

from __future__ import annotations

import datetime as _dt
import email.utils

RETRYABLE_STATUSES: frozenset[int] = frozenset({429, 502, 503, 504})

_BACKOFF_BASE_MS = 500
_BACKOFF_CAP_MS = 60_000


def is_retryable_status(status: int) -> bool:
    """Return True for 429, 502, 503 and 504."""
    return status in RETRYABLE_STATUSES


def backoff_ms(attempt: int) -> int:
    """
    Exponential backoff delay: ``min(60_000, 500 * 2**attempt)``.

    Parameters
    ----------
    attempt : int
        Zero-based number of the attempt that just failed.

    Returns
    -------
    int
        Delay in milliseconds.

    Examples
    --------
    >>> backoff_ms(0)
    500
    >>> backoff_ms(3)
    4000
    >>> backoff_ms(20)
    60000
    """
    if attempt >= 17:
        # 500 * 2**17 already exceeds the cap
        return _BACKOFF_CAP_MS
    return min(_BACKOFF_CAP_MS, _BACKOFF_BASE_MS * (2 ** max(0, attempt)))


def parse_retry_after_ms(
    value: str | None,
    now: _dt.datetime | None = None,
) -> int | None:
    """
    Convert a ``Retry-After`` header value into a delay in milliseconds.

    A pure digit string is a number of seconds. Anything else is parsed as
    an HTTP date; a date in the past yields 0.

    Parameters
    ----------
    value : str | None
        Raw header value.
    now : datetime | None, optional
        Reference time (default: current UTC time).

    Returns
    -------
    int | None
        Delay in milliseconds, or None if the header is absent or
        unparseable (the caller then falls back to exponential backoff).

    Examples
    --------
    >>> parse_retry_after_ms("120")
    120000
    >>> parse_retry_after_ms(None) is None
    True
    """
    if value is None:
        return None
    raw = value.strip()
    if not raw:
        return None

    if raw.isascii() and raw.isdigit():
        return int(raw) * 1000

    try:
        when = email.utils.parsedate_to_datetime(raw)
    except (TypeError, ValueError, IndexError):
        return None
    if when is None:
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=_dt.timezone.utc)

    reference = now if now is not None else _dt.datetime.now(_dt.timezone.utc)
    diff_ms = int((when - reference).total_seconds() * 1000)
    return max(0, diff_ms)
