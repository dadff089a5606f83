"""
Resilient, rate-limited page fetcher for YouTube channel pages.

Wraps an ``httpx.AsyncClient`` with a global concurrency gate, per-host
pacing, per-attempt timeouts, retry with exponential backoff (honouring
``Retry-After``) and block/verification page detection. All mutable state
lives in the :class:`SafeFetcher` instance, so independent crawl sessions
never interfere with each other.

Classes
-------
SafeFetcher
    Async fetcher returning page bodies or raising typed fetch errors.
"""

from __future__ import annotations

import asyncio
import logging
import random
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Mapping
from urllib.parse import urlsplit

import httpx

from channelsieve.exceptions import (
    BlockedError,
    HttpStatusError,
    RetryableHttpError,
    RetryExhaustedError,
    TransportError,
)
from channelsieve.models.enums import FetchEventType, RetryReason
from channelsieve.models.fetch_events import FetchEvent
from channelsieve.services.fetcher.block_detection import detect_block
from channelsieve.services.fetcher.config import FetcherConfig
from channelsieve.services.fetcher.events import EventSink
from channelsieve.services.fetcher.pacing import ConcurrencyGate, HostPacer
from channelsieve.services.fetcher.retry_policy import (
    backoff_ms,
    is_retryable_status,
    parse_retry_after_ms,
)

logger = logging.getLogger(__name__)


def _host_of(url: str) -> str:
    host = urlsplit(url).hostname
    if not host:
        raise ValueError(f"URL has no host: {url!r}")
    return host.lower()


class SafeFetcher:
    """
    Async fetcher for pages of a host that resists automated access.

    Each call to :meth:`fetch_text` is one logical fetch: it takes a slot
    from the concurrency gate, then runs up to ``max_retries + 1`` attempts,
    each preceded by the host pacing delay and bounded by the timeout.

    Parameters
    ----------
    config : FetcherConfig | None, optional
        Fetcher configuration (default: ``FetcherConfig()``).
    event_sink : EventSink | None, optional
        Receives structured :class:`FetchEvent` values (default: none).
    client : httpx.AsyncClient | None, optional
        HTTP client to use. When omitted, one is created lazily and closed
        by :meth:`aclose`.
    clock : Callable[[], float], optional
        Monotonic clock in seconds used for pacing and latency.
    rng : random.Random | None, optional
        Random source for pacing jitter.

    Examples
    --------
    >>> async with SafeFetcher(FetcherConfig.from_settings(settings)) as fetcher:
    ...     html = await fetcher.fetch_text("https://www.youtube.com/@example/about")
    """

    def __init__(
        self,
        config: FetcherConfig | None = None,
        event_sink: EventSink | None = None,
        client: httpx.AsyncClient | None = None,
        clock: Callable[[], float] = time.monotonic,
        rng: random.Random | None = None,
    ) -> None:
        self.config = config or FetcherConfig()
        self._event_sink = event_sink
        self._client = client
        self._owns_client = client is None
        self._clock = clock
        self._gate = ConcurrencyGate(self.config.concurrency)
        self._pacer = HostPacer(self.config, clock=clock, rng=rng)

    async def __aenter__(self) -> SafeFetcher:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this fetcher created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    @property
    def gate(self) -> ConcurrencyGate:
        """The concurrency gate shared by all calls on this instance."""
        return self._gate

    @property
    def pacer(self) -> HostPacer:
        """The per-host pacer shared by all calls on this instance."""
        return self._pacer

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                follow_redirects=True,
                timeout=self.config.timeout_seconds,
            )
        return self._client

    def _emit(self, event_type: FetchEventType, url: str, **fields: object) -> None:
        if self._event_sink is None:
            return
        event = FetchEvent(type=event_type, url=url, **fields)
        try:
            self._event_sink(event)
        except Exception:
            logger.exception("Fetch event sink failed for %s event", event_type.value)

    @asynccontextmanager
    async def _slot(self, url: str) -> AsyncIterator[None]:
        if not self._gate.has_free_slot():
            self._emit(FetchEventType.QUEUE_WAIT, url, active=self._gate.active)
        await self._gate.acquire()
        try:
            yield
        finally:
            self._gate.release()

    def _elapsed_ms(self, started: float) -> int:
        return int((self._clock() - started) * 1000)

    def _build_headers(self, headers: Mapping[str, str] | None) -> dict[str, str]:
        merged = {
            "User-Agent": self.config.user_agent,
            "Accept-Language": self.config.accept_language,
        }
        if headers:
            merged.update(headers)
        return merged

    def _check_block(
        self, url: str, host: str, response: httpx.Response, text: str
    ) -> None:
        if not self.config.stop_on_block:
            return
        urls = [url]
        final_url = str(response.url)
        if final_url and final_url != url:
            urls.append(final_url)
        hit = detect_block(
            urls,
            host,
            text,
            self.config.block_markers,
            self.config.block_scan_max_chars,
        )
        if hit is None:
            return
        self._emit(
            FetchEventType.BLOCK_DETECTED,
            url,
            host=host,
            status=response.status_code,
            marker=hit.marker,
        )
        raise BlockedError(
            url=url,
            host=host,
            marker=hit.marker,
            status=response.status_code,
            snippet=hit.snippet,
        )

    async def fetch_text(
        self, url: str, headers: Mapping[str, str] | None = None
    ) -> str:
        """
        Fetch ``url`` and return the decoded response body.

        Parameters
        ----------
        url : str
            Absolute URL to fetch.
        headers : Mapping[str, str] | None, optional
            Extra request headers, overriding the defaults.

        Returns
        -------
        str
            The response body of a successful (2xx) response.

        Raises
        ------
        BlockedError
            A block/verification page was detected. Never retried.
        HttpStatusError
            A non-retryable, non-success status was returned.
        RetryExhaustedError
            Retryable statuses (429, 502, 503, 504) persisted past
            ``max_retries``.
        TransportError
            Network errors or timeouts persisted past ``max_retries``, or
            a non-transient request error occurred (redirect loop, body
            decoding failure), which is not retried.
        """
        host = _host_of(url)
        request_headers = self._build_headers(headers)
        max_retries = self.config.max_retries

        async with self._slot(url):
            attempt = 0
            while True:
                await self._pacer.wait(
                    host,
                    on_wait=lambda wait, base, jitter: self._emit(
                        FetchEventType.HOST_WAIT, url, host=host, wait_ms=wait
                    ),
                )

                started = self._clock()
                self._emit(FetchEventType.FETCH_START, url, attempt=attempt)
                try:
                    response = await asyncio.wait_for(
                        self._get_client().get(url, headers=request_headers),
                        timeout=self.config.timeout_seconds,
                    )
                    text = response.text
                except (httpx.TransportError, asyncio.TimeoutError) as e:
                    description = str(e) or type(e).__name__
                    self._emit(
                        FetchEventType.FETCH_ERROR,
                        url,
                        attempt=attempt,
                        elapsed_ms=self._elapsed_ms(started),
                        message=f"{type(e).__name__}: {description}",
                    )
                    if attempt >= max_retries:
                        raise TransportError(
                            url=url,
                            message=(
                                f"Fetching {url} failed after {attempt + 1} "
                                f"attempts: {type(e).__name__}"
                            ),
                            original_error=e,
                            retry_count=attempt,
                        ) from e
                    wait_ms = backoff_ms(attempt)
                    self._emit(
                        FetchEventType.RETRY_WAIT,
                        url,
                        attempt=attempt,
                        wait_ms=wait_ms,
                        reason=RetryReason.NETWORK_OR_TIMEOUT,
                    )
                    attempt += 1
                    await asyncio.sleep(wait_ms / 1000.0)
                    continue
                except httpx.RequestError as e:
                    # Redirect loops and undecodable bodies repeat on retry.
                    self._emit(
                        FetchEventType.FETCH_ERROR,
                        url,
                        attempt=attempt,
                        elapsed_ms=self._elapsed_ms(started),
                        message=f"{type(e).__name__}: {str(e) or type(e).__name__}",
                    )
                    raise TransportError(
                        url=url,
                        message=f"Fetching {url} failed: {type(e).__name__}",
                        original_error=e,
                        retry_count=attempt,
                    ) from e

                status = response.status_code
                self._emit(
                    FetchEventType.FETCH_RESPONSE,
                    url,
                    attempt=attempt,
                    status=status,
                    elapsed_ms=self._elapsed_ms(started),
                )

                self._check_block(url, host, response, text)

                if response.is_success:
                    return text

                if not is_retryable_status(status):
                    raise HttpStatusError(url, status, response.reason_phrase)

                retry_after_ms = parse_retry_after_ms(response.headers.get("retry-after"))
                wait_ms = retry_after_ms if retry_after_ms is not None else backoff_ms(attempt)
                error = RetryableHttpError(
                    url=url,
                    status=status,
                    wait_ms=wait_ms,
                    retry_after_ms=retry_after_ms,
                    reason=response.reason_phrase,
                )
                if attempt >= max_retries:
                    raise RetryExhaustedError(url, attempt + 1, error) from error

                self._emit(
                    FetchEventType.RETRY_WAIT,
                    url,
                    attempt=attempt,
                    status=status,
                    wait_ms=wait_ms,
                    reason=RetryReason.RETRYABLE_STATUS,
                )
                attempt += 1
                await asyncio.sleep(wait_ms / 1000.0)
