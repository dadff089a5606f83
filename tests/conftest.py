"""
Pytest configuration and fixtures for channelsieve tests.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import httpx
import pytest

from channelsieve.config.settings import Settings
from channelsieve.models.enums import FetchEventType
from channelsieve.models.fetch_events import FetchEvent
from channelsieve.services.fetcher import FetcherConfig, HostRule, SafeFetcher


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingEventSink:
    """Collect fetcher events in memory, in emission order."""

    def __init__(self) -> None:
        self.events: list[FetchEvent] = []

    def __call__(self, event: FetchEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type: FetchEventType) -> list[FetchEvent]:
        return [e for e in self.events if e.type == event_type]


@pytest.fixture
def mock_settings(tmp_path: Path) -> Settings:
    """Settings isolated from the environment and the working directory."""
    return Settings(
        _env_file=None,
        output_dir=tmp_path / "output",
        fetch_min_interval_ms=0,
        fetch_jitter_ms=0,
        host_rules={},
    )


@pytest.fixture
def fake_clock() -> FakeClock:
    """A clock that only moves when a test advances it."""
    return FakeClock()


@pytest.fixture
def fetcher_config() -> FetcherConfig:
    """Fetcher configuration without pacing delays or jitter."""
    return FetcherConfig(
        default_rule=HostRule(min_interval_ms=0, jitter_ms=0),
        max_retries=3,
        timeout_seconds=5.0,
    )


@pytest.fixture
def recording_sink() -> RecordingEventSink:
    """In-memory fetch event sink."""
    return RecordingEventSink()


@pytest.fixture
def make_fetcher(
    fetcher_config: FetcherConfig,
    recording_sink: RecordingEventSink,
    fake_clock: FakeClock,
) -> Callable[..., SafeFetcher]:
    """
    Build a SafeFetcher whose HTTP traffic goes to ``handler``.

    ``handler`` receives an ``httpx.Request`` and returns an
    ``httpx.Response`` (or raises an ``httpx.TransportError``).
    """

    def _make(handler: Callable[..., object], config: FetcherConfig | None = None) -> SafeFetcher:
        client = httpx.AsyncClient(
            transport=httpx.MockTransport(handler), follow_redirects=True
        )
        return SafeFetcher(
            config or fetcher_config,
            event_sink=recording_sink,
            client=client,
            clock=fake_clock,
        )

    return _make
