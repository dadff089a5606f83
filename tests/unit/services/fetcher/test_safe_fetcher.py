"""
Unit tests for SafeFetcher.

All HTTP traffic goes through httpx.MockTransport and asyncio.sleep is
patched, so no test touches the network or actually waits.
"""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from channelsieve.exceptions import (
    BlockedError,
    HttpStatusError,
    RetryExhaustedError,
    TransportError,
)
from channelsieve.models.enums import FetchEventType, RetryReason
from channelsieve.services.fetcher import FetcherConfig, HostRule, SafeFetcher

URL = "https://www.youtube.com/@kanal/about"
BLOCK_PAGE = (
    "<html><body><h1>Sorry...</h1><p>Our systems have detected unusual traffic "
    "from your computer network.</p></body></html>"
)


def sequence_handler(*responses: httpx.Response | Exception):
    """Return each response (or raise each exception) in turn."""
    calls: list[httpx.Request] = []
    remaining = list(responses)

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        item = remaining.pop(0) if len(remaining) > 1 else remaining[0]
        if isinstance(item, Exception):
            raise item
        return item

    handler.calls = calls  # type: ignore[attr-defined]
    return handler


class TestSuccess:
    """Plain successful fetches."""

    async def test_returns_body_of_2xx(self, make_fetcher) -> None:
        handler = sequence_handler(httpx.Response(200, text="<html>ok</html>"))
        async with make_fetcher(handler) as fetcher:
            assert await fetcher.fetch_text(URL) == "<html>ok</html>"
        assert len(handler.calls) == 1

    async def test_default_and_override_headers(self, make_fetcher, fetcher_config) -> None:
        handler = sequence_handler(httpx.Response(200, text="ok"))
        async with make_fetcher(handler) as fetcher:
            await fetcher.fetch_text(URL, headers={"Accept-Language": "en"})

        request = handler.calls[0]
        assert request.headers["user-agent"] == fetcher_config.user_agent
        assert request.headers["accept-language"] == "en"

    async def test_event_order_for_single_fetch(self, make_fetcher, recording_sink) -> None:
        handler = sequence_handler(httpx.Response(200, text="ok"))
        async with make_fetcher(handler) as fetcher:
            await fetcher.fetch_text(URL)

        types = [e.type for e in recording_sink.events]
        assert types == [FetchEventType.FETCH_START, FetchEventType.FETCH_RESPONSE]
        response_event = recording_sink.events[-1]
        assert response_event.status == 200
        assert response_event.attempt == 0

    async def test_relative_url_is_rejected(self, make_fetcher) -> None:
        handler = sequence_handler(httpx.Response(200, text="ok"))
        async with make_fetcher(handler) as fetcher:
            with pytest.raises(ValueError):
                await fetcher.fetch_text("/@kanal/about")

    async def test_failing_event_sink_does_not_break_fetch(self, fetcher_config) -> None:
        def broken_sink(event) -> None:
            raise RuntimeError("sink down")

        client = httpx.AsyncClient(
            transport=httpx.MockTransport(lambda r: httpx.Response(200, text="ok"))
        )
        async with SafeFetcher(fetcher_config, event_sink=broken_sink, client=client) as fetcher:
            assert await fetcher.fetch_text(URL) == "ok"
        await client.aclose()


class TestRetries:
    """Retryable statuses, Retry-After and exhaustion."""

    async def test_retries_503_with_exponential_backoff(
        self, make_fetcher, recording_sink
    ) -> None:
        handler = sequence_handler(
            httpx.Response(503),
            httpx.Response(503),
            httpx.Response(200, text="finally"),
        )
        with patch("asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            async with make_fetcher(handler) as fetcher:
                assert await fetcher.fetch_text(URL) == "finally"

        assert len(handler.calls) == 3
        assert [c.args[0] for c in mock_sleep.call_args_list] == [0.5, 1.0]

        retries = recording_sink.of_type(FetchEventType.RETRY_WAIT)
        assert [e.wait_ms for e in retries] == [500, 1000]
        assert all(e.reason == RetryReason.RETRYABLE_STATUS for e in retries)
        assert [e.attempt for e in recording_sink.of_type(FetchEventType.FETCH_START)] == [0, 1, 2]

    async def test_retry_after_seconds_overrides_backoff(
        self, make_fetcher, recording_sink
    ) -> None:
        handler = sequence_handler(
            httpx.Response(429, headers={"Retry-After": "7"}),
            httpx.Response(200, text="ok"),
        )
        with patch("asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            async with make_fetcher(handler) as fetcher:
                await fetcher.fetch_text(URL)

        mock_sleep.assert_awaited_once_with(7.0)
        (retry,) = recording_sink.of_type(FetchEventType.RETRY_WAIT)
        assert retry.wait_ms == 7000
        assert retry.status == 429

    async def test_unparseable_retry_after_falls_back_to_backoff(
        self, make_fetcher, recording_sink
    ) -> None:
        handler = sequence_handler(
            httpx.Response(429, headers={"Retry-After": "soon"}),
            httpx.Response(200, text="ok"),
        )
        with patch("asyncio.sleep", new_callable=AsyncMock):
            async with make_fetcher(handler) as fetcher:
                await fetcher.fetch_text(URL)

        (retry,) = recording_sink.of_type(FetchEventType.RETRY_WAIT)
        assert retry.wait_ms == 500

    async def test_retries_exhausted(self, make_fetcher) -> None:
        config = FetcherConfig(
            default_rule=HostRule(min_interval_ms=0, jitter_ms=0), max_retries=2
        )
        handler = sequence_handler(httpx.Response(502))
        with patch("asyncio.sleep", new_callable=AsyncMock):
            async with make_fetcher(handler, config) as fetcher:
                with pytest.raises(RetryExhaustedError) as exc_info:
                    await fetcher.fetch_text(URL)

        assert len(handler.calls) == 3
        assert exc_info.value.attempts == 3
        assert exc_info.value.status == 502
        assert exc_info.value.url == URL

    async def test_zero_retries_makes_one_attempt(self, make_fetcher) -> None:
        config = FetcherConfig(
            default_rule=HostRule(min_interval_ms=0, jitter_ms=0), max_retries=0
        )
        handler = sequence_handler(httpx.Response(503))
        async with make_fetcher(handler, config) as fetcher:
            with pytest.raises(RetryExhaustedError) as exc_info:
                await fetcher.fetch_text(URL)

        assert len(handler.calls) == 1
        assert exc_info.value.attempts == 1

    async def test_non_retryable_status_raises_immediately(self, make_fetcher) -> None:
        handler = sequence_handler(httpx.Response(404))
        async with make_fetcher(handler) as fetcher:
            with pytest.raises(HttpStatusError) as exc_info:
                await fetcher.fetch_text(URL)

        assert exc_info.value.status == 404
        assert not isinstance(exc_info.value, RetryExhaustedError)
        assert len(handler.calls) == 1


class TestTransportErrors:
    """Network failures and timeouts."""

    async def test_network_error_is_retried_then_raised(
        self, make_fetcher, recording_sink
    ) -> None:
        config = FetcherConfig(
            default_rule=HostRule(min_interval_ms=0, jitter_ms=0), max_retries=1
        )
        handler = sequence_handler(httpx.ConnectError("connection refused"))
        with patch("asyncio.sleep", new_callable=AsyncMock):
            async with make_fetcher(handler, config) as fetcher:
                with pytest.raises(TransportError) as exc_info:
                    await fetcher.fetch_text(URL)

        assert len(handler.calls) == 2
        assert exc_info.value.retry_count == 1
        assert isinstance(exc_info.value.original_error, httpx.ConnectError)
        assert len(recording_sink.of_type(FetchEventType.FETCH_ERROR)) == 2
        (retry,) = recording_sink.of_type(FetchEventType.RETRY_WAIT)
        assert retry.reason == RetryReason.NETWORK_OR_TIMEOUT

    async def test_network_error_then_success(self, make_fetcher) -> None:
        handler = sequence_handler(
            httpx.ReadError("reset by peer"), httpx.Response(200, text="ok")
        )
        with patch("asyncio.sleep", new_callable=AsyncMock):
            async with make_fetcher(handler) as fetcher:
                assert await fetcher.fetch_text(URL) == "ok"

    async def test_attempt_timeout_is_transport_error(self, make_fetcher) -> None:
        config = FetcherConfig(
            default_rule=HostRule(min_interval_ms=0, jitter_ms=0),
            max_retries=0,
            timeout_seconds=0.01,
        )

        async def hanging(request: httpx.Request) -> httpx.Response:
            await asyncio.Event().wait()
            return httpx.Response(200)

        async with make_fetcher(hanging, config) as fetcher:
            with pytest.raises(TransportError) as exc_info:
                await fetcher.fetch_text(URL)

        assert isinstance(exc_info.value.original_error, asyncio.TimeoutError)

    async def test_redirect_loop_is_transport_error_without_retry(
        self, make_fetcher, recording_sink
    ) -> None:
        def self_redirect(request: httpx.Request) -> httpx.Response:
            return httpx.Response(302, headers={"Location": str(request.url)})

        with patch("asyncio.sleep", new_callable=AsyncMock):
            async with make_fetcher(self_redirect) as fetcher:
                with pytest.raises(TransportError) as exc_info:
                    await fetcher.fetch_text(URL)

        assert isinstance(exc_info.value.original_error, httpx.TooManyRedirects)
        assert exc_info.value.retry_count == 0
        assert len(recording_sink.of_type(FetchEventType.FETCH_ERROR)) == 1
        assert recording_sink.of_type(FetchEventType.RETRY_WAIT) == []


class TestBlockDetection:
    """Block pages stop the fetch and are never retried."""

    async def test_block_page_body(self, make_fetcher, recording_sink) -> None:
        handler = sequence_handler(httpx.Response(200, text=BLOCK_PAGE))
        async with make_fetcher(handler) as fetcher:
            with pytest.raises(BlockedError) as exc_info:
                await fetcher.fetch_text(URL)

        error = exc_info.value
        assert error.host == "www.youtube.com"
        assert error.marker == "sorry"
        assert error.status == 200
        assert "unusual traffic" in (error.snippet or "")
        assert len(recording_sink.of_type(FetchEventType.BLOCK_DETECTED)) == 1

    async def test_block_on_retryable_status_is_not_retried(self, make_fetcher) -> None:
        handler = sequence_handler(httpx.Response(429, text=BLOCK_PAGE))
        with patch("asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            async with make_fetcher(handler) as fetcher:
                with pytest.raises(BlockedError):
                    await fetcher.fetch_text(URL)

        assert len(handler.calls) == 1
        mock_sleep.assert_not_awaited()

    async def test_redirect_to_sorry_page(self, make_fetcher) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "www.youtube.com":
                return httpx.Response(
                    302,
                    headers={"Location": "https://www.google.com/sorry/index?continue=x"},
                )
            return httpx.Response(200, text="<html>please wait</html>")

        async with make_fetcher(handler) as fetcher:
            with pytest.raises(BlockedError) as exc_info:
                await fetcher.fetch_text(URL)

        assert exc_info.value.marker == "url_sorry"

    async def test_markers_are_scoped_to_host(self, make_fetcher) -> None:
        handler = sequence_handler(httpx.Response(200, text=BLOCK_PAGE))
        async with make_fetcher(handler) as fetcher:
            text = await fetcher.fetch_text("https://example.org/article")
        assert text == BLOCK_PAGE

    async def test_detection_can_be_disabled(self, make_fetcher) -> None:
        config = FetcherConfig(
            default_rule=HostRule(min_interval_ms=0, jitter_ms=0), stop_on_block=False
        )
        handler = sequence_handler(httpx.Response(200, text=BLOCK_PAGE))
        async with make_fetcher(handler, config) as fetcher:
            assert await fetcher.fetch_text(URL) == BLOCK_PAGE


class TestPacingIntegration:
    """Host pacing as seen through fetch_text."""

    async def test_second_request_to_host_waits(
        self, make_fetcher, recording_sink, fake_clock
    ) -> None:
        config = FetcherConfig(default_rule=HostRule(min_interval_ms=1000, jitter_ms=0))
        handler = sequence_handler(httpx.Response(200, text="ok"))
        with patch("asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            async with make_fetcher(handler, config) as fetcher:
                await fetcher.fetch_text(URL)
                fake_clock.advance(0.5)
                await fetcher.fetch_text(URL)

        mock_sleep.assert_awaited_once_with(0.5)
        (host_wait,) = recording_sink.of_type(FetchEventType.HOST_WAIT)
        assert host_wait.wait_ms == 500
        assert host_wait.host == "www.youtube.com"

    async def test_host_override_applies(self, make_fetcher, fake_clock) -> None:
        config = FetcherConfig(
            default_rule=HostRule(min_interval_ms=0, jitter_ms=0),
            host_rules={"WWW.YouTube.com": HostRule(min_interval_ms=2000, jitter_ms=0)},
        )
        handler = sequence_handler(httpx.Response(200, text="ok"))
        with patch("asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            async with make_fetcher(handler, config) as fetcher:
                await fetcher.fetch_text("https://example.org/a")
                await fetcher.fetch_text("https://example.org/b")
                await fetcher.fetch_text(URL)
                await fetcher.fetch_text(URL)

        mock_sleep.assert_awaited_once_with(2.0)


class TestClientOwnership:
    """Client lifecycle."""

    async def test_injected_client_is_not_closed(self, fetcher_config) -> None:
        client = httpx.AsyncClient(
            transport=httpx.MockTransport(lambda r: httpx.Response(200, text="ok"))
        )
        async with SafeFetcher(fetcher_config, client=client):
            pass
        assert not client.is_closed
        await client.aclose()

    async def test_own_client_is_closed(self, fetcher_config) -> None:
        fetcher = SafeFetcher(fetcher_config)
        client = fetcher._get_client()
        await fetcher.aclose()
        assert client.is_closed
