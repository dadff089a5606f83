"""
Concurrency gate and per-host pacing for the resilient fetcher.

Classes
-------
ConcurrencyGate
    Bounds the number of in-flight requests; excess callers queue FIFO.
HostPacer
    Enforces a minimum interval (plus random jitter) between requests to
    the same host.
"""

from __future__ import annotations

import asyncio
import random
import time
from collections import deque
from typing import Callable

from channelsieve.services.fetcher.config import FetcherConfig, HostRule

HostWaitCallback = Callable[[int, int, int], None]
"""Called with ``(wait_ms, base_wait_ms, jitter_ms)`` before a host wait."""


class ConcurrencyGate:
    """
    Counting gate with a strict FIFO wait queue.

    A released slot is handed directly to the oldest waiter, so late
    arrivals can never overtake queued callers.

    Parameters
    ----------
    limit : int
        Maximum number of concurrently held slots.

    Examples
    --------
    >>> gate = ConcurrencyGate(limit=2)
    >>> await gate.acquire()
    >>> try:
    ...     ...
    ... finally:
    ...     gate.release()
    """

    def __init__(self, limit: int) -> None:
        if limit < 1:
            raise ValueError(f"limit must be >= 1, got {limit}")
        self._limit = limit
        self._active = 0
        self._waiters: deque[asyncio.Future[None]] = deque()

    @property
    def active(self) -> int:
        """Number of slots currently held."""
        return self._active

    @property
    def waiting(self) -> int:
        """Number of callers queued for a slot."""
        return sum(1 for w in self._waiters if not w.done())

    def has_free_slot(self) -> bool:
        """Whether :meth:`acquire` would return without queueing."""
        return self._active < self._limit and not self._waiters

    async def acquire(self) -> None:
        """Take a slot, waiting in FIFO order if none is free."""
        # No await between the check and the increment, so this is atomic
        # with respect to other tasks on the same event loop.
        if self.has_free_slot():
            self._active += 1
            return

        waiter: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        try:
            await waiter
        except asyncio.CancelledError:
            if waiter.done() and not waiter.cancelled():
                # The slot was handed over just before cancellation
                self.release()
            elif waiter in self._waiters:
                self._waiters.remove(waiter)
            raise

    def release(self) -> None:
        """Return a slot, handing it to the oldest live waiter if any."""
        while self._waiters:
            waiter = self._waiters.popleft()
            if not waiter.done():
                waiter.set_result(None)
                return
        self._active -= 1


class HostPacer:
    """
    Per-host request pacing.

    For every host the pacer remembers when the last request started and,
    before the next one, sleeps ``max(0, min_interval - elapsed)`` plus a
    uniformly random jitter in ``[0, jitter_ms]``. Callers targeting the same
    host pass through a per-host lock, so they are paced one after another
    instead of all computing the same wait.

    Parameters
    ----------
    config : FetcherConfig
        Source of the default rule and per-host overrides.
    clock : Callable[[], float], optional
        Monotonic clock in seconds (default: ``time.monotonic``).
    rng : random.Random | None, optional
        Random source for jitter (default: a fresh ``random.Random``).
    """

    def __init__(
        self,
        config: FetcherConfig,
        clock: Callable[[], float] = time.monotonic,
        rng: random.Random | None = None,
    ) -> None:
        self._config = config
        self._clock = clock
        self._rng = rng or random.Random()
        self._last_request_at: dict[str, float] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def rule_for(self, host: str) -> HostRule:
        """Return the pacing rule for ``host``."""
        return self._config.rule_for(host)

    def last_request_at(self, host: str) -> float | None:
        """Clock value of the last request start for ``host``, if any."""
        return self._last_request_at.get(host.lower())

    def compute_wait_ms(self, host: str) -> tuple[int, int]:
        """
        Compute the pacing delay for the next request to ``host``.

        Returns
        -------
        tuple[int, int]
            ``(base_wait_ms, jitter_ms)``; the caller sleeps their sum.
        """
        key = host.lower()
        rule = self.rule_for(key)
        last = self._last_request_at.get(key)
        if last is None:
            base_wait = 0
        else:
            elapsed_ms = (self._clock() - last) * 1000.0
            base_wait = max(0, int(rule.min_interval_ms - elapsed_ms))
        jitter = self._rng.randint(0, rule.jitter_ms) if rule.jitter_ms > 0 else 0
        return base_wait, jitter

    async def wait(self, host: str, on_wait: HostWaitCallback | None = None) -> int:
        """
        Sleep until a request to ``host`` may start, then record the start.

        Parameters
        ----------
        host : str
            Target host.
        on_wait : HostWaitCallback | None, optional
            Notified before sleeping when the delay is positive.

        Returns
        -------
        int
            The delay slept, in milliseconds.
        """
        key = host.lower()
        lock = self._locks.setdefault(key, asyncio.Lock())
        async with lock:
            base_wait, jitter = self.compute_wait_ms(key)
            wait_ms = base_wait + jitter
            if wait_ms > 0:
                if on_wait is not None:
                    on_wait(wait_ms, base_wait, jitter)
                await asyncio.sleep(wait_ms / 1000.0)
            self._last_request_at[key] = self._clock()
            return wait_ms
