"""
Unit tests for the concurrency gate and the host pacer.
"""

from __future__ import annotations

import asyncio
import random
from unittest.mock import AsyncMock, patch

import pytest

from channelsieve.services.fetcher import (
    ConcurrencyGate,
    FetcherConfig,
    HostPacer,
    HostRule,
)


class TestConcurrencyGate:
    """Counting gate with FIFO hand-over."""

    def test_rejects_non_positive_limit(self) -> None:
        with pytest.raises(ValueError):
            ConcurrencyGate(0)

    async def test_acquire_within_limit_does_not_queue(self) -> None:
        gate = ConcurrencyGate(2)
        await gate.acquire()
        await gate.acquire()
        assert gate.active == 2
        assert not gate.has_free_slot()

    async def test_release_hands_slot_to_waiter(self) -> None:
        gate = ConcurrencyGate(1)
        await gate.acquire()

        waiter = asyncio.create_task(gate.acquire())
        await asyncio.sleep(0)
        assert gate.waiting == 1
        assert not waiter.done()

        gate.release()
        await waiter
        assert gate.active == 1
        assert gate.waiting == 0

    async def test_waiters_are_served_in_fifo_order(self) -> None:
        gate = ConcurrencyGate(1)
        await gate.acquire()
        order: list[int] = []

        async def worker(n: int) -> None:
            await gate.acquire()
            order.append(n)
            gate.release()

        tasks = []
        for n in range(4):
            tasks.append(asyncio.create_task(worker(n)))
            await asyncio.sleep(0)

        gate.release()
        await asyncio.gather(*tasks)

        assert order == [0, 1, 2, 3]
        assert gate.active == 0

    async def test_cancelled_waiter_leaves_queue(self) -> None:
        gate = ConcurrencyGate(1)
        await gate.acquire()

        waiter = asyncio.create_task(gate.acquire())
        await asyncio.sleep(0)
        waiter.cancel()
        with pytest.raises(asyncio.CancelledError):
            await waiter

        assert gate.waiting == 0
        gate.release()
        assert gate.active == 0
        assert gate.has_free_slot()


class TestHostPacer:
    """Per-host minimum interval plus jitter."""

    @staticmethod
    def make_pacer(clock, rule: HostRule, seed: int = 7, **host_rules: HostRule) -> HostPacer:
        config = FetcherConfig(default_rule=rule, host_rules=host_rules)
        return HostPacer(config, clock=clock, rng=random.Random(seed))

    def test_first_request_has_no_base_wait(self, fake_clock) -> None:
        pacer = self.make_pacer(fake_clock, HostRule(min_interval_ms=1500, jitter_ms=0))
        assert pacer.compute_wait_ms("www.youtube.com") == (0, 0)

    async def test_base_wait_shrinks_with_elapsed_time(self, fake_clock) -> None:
        pacer = self.make_pacer(fake_clock, HostRule(min_interval_ms=1500, jitter_ms=0))
        await pacer.wait("www.youtube.com")
        fake_clock.advance(1.0)
        assert pacer.compute_wait_ms("www.youtube.com") == (500, 0)
        fake_clock.advance(2.0)
        assert pacer.compute_wait_ms("www.youtube.com") == (0, 0)

    def test_jitter_stays_within_bounds(self, fake_clock) -> None:
        pacer = self.make_pacer(fake_clock, HostRule(min_interval_ms=0, jitter_ms=300))
        for _ in range(50):
            _, jitter = pacer.compute_wait_ms("example.org")
            assert 0 <= jitter <= 300

    async def test_hosts_are_paced_independently(self, fake_clock) -> None:
        pacer = self.make_pacer(fake_clock, HostRule(min_interval_ms=1000, jitter_ms=0))
        await pacer.wait("a.example")
        assert pacer.compute_wait_ms("b.example") == (0, 0)
        assert pacer.compute_wait_ms("A.EXAMPLE") == (1000, 0)

    async def test_wait_sleeps_and_notifies(self, fake_clock) -> None:
        pacer = self.make_pacer(fake_clock, HostRule(min_interval_ms=1000, jitter_ms=0))
        notified: list[tuple[int, int, int]] = []

        with patch("asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            assert await pacer.wait("www.youtube.com") == 0
            fake_clock.advance(0.25)
            waited = await pacer.wait(
                "www.youtube.com", on_wait=lambda *args: notified.append(args)
            )

        assert waited == 750
        assert notified == [(750, 750, 0)]
        mock_sleep.assert_awaited_once_with(0.75)
        assert pacer.last_request_at("www.youtube.com") == fake_clock.now

    async def test_racing_callers_are_serialized(self, fake_clock) -> None:
        pacer = self.make_pacer(fake_clock, HostRule(min_interval_ms=1000, jitter_ms=0))
        waits: list[int] = []

        async def fake_sleep(seconds: float) -> None:
            fake_clock.advance(seconds)

        async def caller() -> None:
            waits.append(await pacer.wait("www.youtube.com"))

        with patch("asyncio.sleep", side_effect=fake_sleep):
            await asyncio.gather(caller(), caller(), caller())

        # Only the first caller skips the interval
        assert sorted(waits) == [0, 1000, 1000]

    def test_host_override_is_used(self, fake_clock) -> None:
        pacer = self.make_pacer(
            fake_clock,
            HostRule(min_interval_ms=100, jitter_ms=0),
            **{"www.youtube.com": HostRule(min_interval_ms=4500, jitter_ms=1200)},
        )
        assert pacer.rule_for("WWW.YOUTUBE.COM").min_interval_ms == 4500
        assert pacer.rule_for("example.org").min_interval_ms == 100
