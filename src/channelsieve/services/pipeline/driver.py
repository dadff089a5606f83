"""
Crawl -> extract -> classify pipeline driver.

For every candidate channel the driver fetches the ``/about`` page,
extracts channel metadata, pauses, fetches the ``/videos`` page, extracts
the video listing, classifies the channel and hands the record to a store.

Failures are skip-and-continue per channel: they are recorded on the
channel's :class:`ChannelResult` and the batch goes on. A detected block
page is the exception: it stops the run, because every further request
would only deepen the block.

Classes
-------
ChannelPipeline
    The driver; :meth:`ChannelPipeline.run` yields progress snapshots.
ChannelResult
    Outcome of one channel.
PipelineProgress
    Counter snapshot yielded after every channel.
BlockInfo
    Details of the block page that stopped a run.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections import Counter
from typing import Any, AsyncIterator, Awaitable, Callable, Iterable, Sequence

from pydantic import BaseModel, ConfigDict, Field

from channelsieve.exceptions import BlockedError, ExtractionError, FetchError
from channelsieve.models.channel import ChannelInfo, VideoInfo
from channelsieve.models.enums import PipelineStatus
from channelsieve.models.verdict import FilterVerdict
from channelsieve.services.classifier import ClassifierConfig, classify
from channelsieve.services.extraction import (
    channel_about_url,
    channel_base_url,
    channel_videos_url,
    extract_channel_id_from_watch_page,
    extract_channel_info,
    extract_channel_info_from_meta,
    extract_embedded_object,
    extract_player_response,
    extract_videos,
    is_video_url,
    normalize_channel_url,
    probe_country_from_about_html,
)
from channelsieve.services.fetcher import SafeFetcher
from channelsieve.services.pipeline.interfaces import (
    ChannelRecord,
    ChannelStore,
    SecondaryClassifier,
    SecondaryVerdict,
)

logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[Any]]


class BlockInfo(BaseModel):
    """Details of a detected block page, for the operator."""

    model_config = ConfigDict(frozen=True)

    url: str
    host: str
    marker: str
    status: int | None = None
    snippet: str | None = None

    @classmethod
    def from_error(cls, error: BlockedError) -> BlockInfo:
        """Build from a :class:`~channelsieve.exceptions.BlockedError`."""
        return cls(
            url=error.url,
            host=error.host,
            marker=error.marker,
            status=error.status,
            snippet=error.snippet,
        )


class ChannelResult(BaseModel):
    """
    Outcome of processing one input channel.

    Attributes
    ----------
    key : str
        Normalized input (URL, ID or handle).
    channel_id : str | None
        Resolved stable channel ID.
    url : str | None
        Channel URL.
    about_url / videos_url : str | None
        The tab URLs that were fetched.
    about_ok / videos_ok : bool
        Whether each tab yielded usable data.
    about_error / videos_error : str | None
        Why a tab did not yield data.
    channel_info : ChannelInfo | None
        Extracted metadata, from ``/about`` or a fallback.
    videos : list[VideoInfo]
        Extracted videos.
    verdict : FilterVerdict | None
        Rule classifier verdict; None when nothing could be classified.
    secondary : dict[str, SecondaryVerdict]
        Secondary classifier answers per topic.
    stored : bool
        Whether the record was handed to the store.
    duplicate : bool
        Whether the resolved channel was already processed in this run.
    error : str | None
        Failure that prevented a complete result.
    """

    model_config = ConfigDict(frozen=True)

    key: str
    channel_id: str | None = None
    url: str | None = None
    about_url: str | None = None
    videos_url: str | None = None
    about_ok: bool = False
    videos_ok: bool = False
    about_error: str | None = None
    videos_error: str | None = None
    channel_info: ChannelInfo | None = None
    videos: list[VideoInfo] = Field(default_factory=list)
    verdict: FilterVerdict | None = None
    secondary: dict[str, SecondaryVerdict] = Field(default_factory=dict)
    stored: bool = False
    duplicate: bool = False
    error: str | None = None

    @property
    def accepted(self) -> bool:
        """Passed the rule classifier and every secondary check."""
        return (
            self.error is None
            and self.verdict is not None
            and self.verdict.passed
            and all(v.suitable for v in self.secondary.values())
        )


class PipelineProgress(BaseModel):
    """
    Snapshot of a pipeline run, yielded after every input.

    Attributes
    ----------
    status : PipelineStatus
        ``running`` while inputs remain, then ``done`` or ``blocked``.
    total : int
        Distinct inputs seen so far.
    done : int
        Inputs fully processed.
    about_ok / about_failed : int
        ``/about`` extraction outcomes.
    videos_ok / videos_failed : int
        ``/videos`` extraction outcomes.
    passed : int
        Channels accepted.
    rejected : dict[str, int]
        Rejections per failing stage (``secondary`` for the secondary
        classifier).
    skipped_duplicates : int
        Inputs skipped because the input or the resolved channel was seen.
    not_stored : int
        Channels without a stable ID, reported but not stored.
    errors : int
        Inputs that ended with an error.
    last_result : ChannelResult | None
        Result of the input processed last.
    block : BlockInfo | None
        Set when the run stopped on a block page.
    """

    model_config = ConfigDict(frozen=True)

    status: PipelineStatus = PipelineStatus.RUNNING
    total: int = 0
    done: int = 0
    about_ok: int = 0
    about_failed: int = 0
    videos_ok: int = 0
    videos_failed: int = 0
    passed: int = 0
    rejected: dict[str, int] = Field(default_factory=dict)
    skipped_duplicates: int = 0
    not_stored: int = 0
    errors: int = 0
    last_result: ChannelResult | None = None
    block: BlockInfo | None = None


def _describe(error: BaseException) -> str:
    message = getattr(error, "message", None) or str(error)
    return f"{type(error).__name__}: {message}"


class ChannelPipeline:
    """
    Sequential crawl -> extract -> classify driver.

    Channels are processed one at a time with randomized pauses between the
    two tabs of a channel and between channels, on top of the fetcher's own
    host pacing.

    Parameters
    ----------
    fetcher : SafeFetcher
        Fetcher used for every page request.
    store : ChannelStore | None, optional
        Receives records of channels with a stable ID.
    classifier_config : ClassifierConfig | None, optional
        Rules for the rule classifier (default: built-in rules).
    secondary : SecondaryClassifier | None, optional
        Consulted for channels the rule classifier passed.
    secondary_topics : Sequence[str], optional
        Topics to ask the secondary classifier about.
    videos_limit : int, optional
        Maximum videos extracted per channel (default: 30).
    skip_videos : bool, optional
        Fetch only ``/about`` (default: False).
    tab_pause_ms : tuple[int, int], optional
        Range of the pause between ``/about`` and ``/videos``.
    channel_pause_ms : tuple[int, int], optional
        Range of the pause between channels.
    rng : random.Random | None, optional
        Random source for pauses.
    sleep : SleepFunc, optional
        Awaitable sleep taking seconds (default: ``asyncio.sleep``).

    Examples
    --------
    >>> async with SafeFetcher(FetcherConfig.from_settings(settings)) as fetcher:
    ...     pipeline = ChannelPipeline(fetcher, store=JsonlChannelStore(path))
    ...     async for progress in pipeline.run(urls):
    ...         print(progress.done, progress.total)
    """

    def __init__(
        self,
        fetcher: SafeFetcher,
        store: ChannelStore | None = None,
        classifier_config: ClassifierConfig | None = None,
        secondary: SecondaryClassifier | None = None,
        secondary_topics: Sequence[str] = ("kids", "gaming"),
        videos_limit: int = 30,
        skip_videos: bool = False,
        tab_pause_ms: tuple[int, int] = (2000, 5000),
        channel_pause_ms: tuple[int, int] = (5000, 12000),
        rng: random.Random | None = None,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        self.fetcher = fetcher
        self.store = store
        self.classifier_config = classifier_config or ClassifierConfig()
        self.secondary = secondary
        self.secondary_topics = tuple(secondary_topics)
        self.videos_limit = videos_limit
        self.skip_videos = skip_videos
        self.tab_pause_ms = tab_pause_ms
        self.channel_pause_ms = channel_pause_ms
        self._rng = rng or random.Random()
        self._sleep = sleep

    async def _pause(self, bounds: tuple[int, int], label: str) -> None:
        low, high = bounds
        low = max(0, low)
        pause_ms = self._rng.randint(low, max(low, high))
        if pause_ms <= 0:
            return
        logger.info("Pause %s (%.1f s)", label, pause_ms / 1000)
        await self._sleep(pause_ms / 1000)

    async def resolve_video_channel(self, video_url: str) -> str | None:
        """
        Resolve the channel ID owning a video.

        Parameters
        ----------
        video_url : str
            Watch or ``youtu.be`` URL.

        Returns
        -------
        str | None
            The owner's ``UC...`` channel ID, or None if the watch page does
            not reveal it.

        Raises
        ------
        FetchError
            If the watch page cannot be fetched (including
            :class:`~channelsieve.exceptions.BlockedError`).
        """
        html = await self.fetcher.fetch_text(video_url)
        for data in (extract_player_response(html), extract_embedded_object(html)):
            if data is None:
                continue
            channel_id = extract_channel_id_from_watch_page(data)
            if channel_id:
                return channel_id
        logger.warning("No channel id found on watch page %s", video_url)
        return None

    def _parse_channel_info(
        self, data: dict[str, Any] | None, label: str
    ) -> tuple[ChannelInfo | None, str | None]:
        if data is None:
            return None, f"{label}: embedded data missing"
        try:
            return extract_channel_info(data), None
        except ExtractionError as e:
            logger.warning("%s: channel metadata not parseable: %s", label, e.message)
            return None, f"{label}: {e.message}"

    async def process_channel(self, key: str) -> ChannelResult:
        """
        Crawl, extract and classify one channel.

        Parameters
        ----------
        key : str
            Channel URL, ``UC...`` ID, ``@handle`` or video URL.

        Returns
        -------
        ChannelResult
            The outcome. Fetch and extraction failures are recorded on it.

        Raises
        ------
        BlockedError
            If any request hit a block page.
        """
        if is_video_url(key):
            try:
                channel_id = await self.resolve_video_channel(key)
            except BlockedError:
                raise
            except FetchError as e:
                return ChannelResult(key=key, error=_describe(e))
            if channel_id is None:
                return ChannelResult(key=key, error="Channel of video could not be resolved")
            base_url = channel_base_url(channel_id)
        else:
            base_url = channel_base_url(key)

        about_url = channel_about_url(base_url)
        videos_url = channel_videos_url(base_url)

        logger.info("Fetching %s", about_url)
        try:
            about_html = await self.fetcher.fetch_text(about_url)
        except BlockedError:
            raise
        except FetchError as e:
            return ChannelResult(
                key=key,
                url=base_url,
                about_url=about_url,
                videos_url=videos_url,
                about_error=_describe(e),
                error=_describe(e),
            )

        channel_info, about_error = self._parse_channel_info(
            extract_embedded_object(about_html), "/about"
        )
        about_ok = channel_info is not None

        videos: list[VideoInfo] = []
        videos_ok = False
        videos_error: str | None = None
        videos_html: str | None = None

        if self.skip_videos:
            videos_error = "skipped"
        else:
            await self._pause(self.tab_pause_ms, "before /videos")
            logger.info("Fetching %s", videos_url)
            try:
                videos_html = await self.fetcher.fetch_text(videos_url)
            except BlockedError:
                raise
            except FetchError as e:
                videos_error = _describe(e)

            if videos_html is not None:
                videos_data = extract_embedded_object(videos_html)
                if videos_data is None:
                    videos_error = "/videos: embedded data missing"
                else:
                    videos = extract_videos(videos_data, self.videos_limit)
                    videos_ok = True
                    if channel_info is None:
                        channel_info, _ = self._parse_channel_info(
                            videos_data, "/videos (channel info fallback)"
                        )

        if channel_info is None:
            channel_info = extract_channel_info_from_meta(about_html) or (
                extract_channel_info_from_meta(videos_html) if videos_html else None
            )
            if channel_info is not None:
                logger.info("Channel info for %s recovered from meta tags", key)

        if channel_info is not None and not channel_info.country:
            country = probe_country_from_about_html(about_html)
            if country:
                channel_info = channel_info.model_copy(update={"country": country})

        if channel_info is None:
            return ChannelResult(
                key=key,
                url=base_url,
                about_url=about_url,
                videos_url=videos_url,
                about_error=about_error,
                videos_ok=videos_ok,
                videos_error=videos_error,
                videos=videos,
                error=about_error or "No channel metadata found",
            )

        verdict = classify(channel_info, videos, self.classifier_config)
        secondary: dict[str, SecondaryVerdict] = {}
        error: str | None = None
        if verdict.passed:
            try:
                secondary = await self._run_secondary(channel_info, videos)
            except Exception as e:
                logger.exception("Secondary classifier failed for %s", key)
                error = _describe(e)

        return ChannelResult(
            key=key,
            channel_id=channel_info.id,
            url=channel_info.url or base_url,
            about_url=about_url,
            videos_url=videos_url,
            about_ok=about_ok,
            videos_ok=videos_ok,
            about_error=about_error,
            videos_error=videos_error,
            channel_info=channel_info,
            videos=videos,
            verdict=verdict,
            secondary=secondary,
            error=error,
        )

    async def _run_secondary(
        self, channel_info: ChannelInfo, videos: Sequence[VideoInfo]
    ) -> dict[str, SecondaryVerdict]:
        if self.secondary is None:
            return {}
        answers: dict[str, SecondaryVerdict] = {}
        video_titles = [v.title for v in videos if v.title]
        for topic in self.secondary_topics:
            answer = await self.secondary.analyze(
                channel_info.title or "",
                channel_info.description or "",
                video_titles,
                topic,
            )
            answers[topic] = answer
            if not answer.suitable:
                break
        return answers

    async def run(self, inputs: Iterable[str]) -> AsyncIterator[PipelineProgress]:
        """
        Process inputs one after another, yielding progress after each.

        Inputs are deduplicated by their normalized form before any request
        and by resolved channel ID afterwards. Channels without a stable ID
        are reported but never stored.

        Parameters
        ----------
        inputs : Iterable[str]
            Channel URLs, IDs, handles or video URLs.

        Yields
        ------
        PipelineProgress
            A snapshot after every input; the last one has status ``done``
            or ``blocked``.
        """
        counters: Counter[str] = Counter()
        rejected: Counter[str] = Counter()
        seen_keys: set[str] = set()
        seen_ids: set[str] = set()
        processed_any = False

        def snapshot(
            status: PipelineStatus = PipelineStatus.RUNNING,
            last: ChannelResult | None = None,
            block: BlockInfo | None = None,
        ) -> PipelineProgress:
            return PipelineProgress(
                status=status,
                rejected=dict(rejected),
                last_result=last,
                block=block,
                **counters,
            )

        for raw in inputs:
            key = normalize_channel_url(raw)
            if not key:
                continue
            if key in seen_keys:
                counters["skipped_duplicates"] += 1
                logger.info("Skipping duplicate input %s", key)
                yield snapshot()
                continue
            seen_keys.add(key)
            counters["total"] += 1

            if processed_any:
                await self._pause(self.channel_pause_ms, "between channels")
            processed_any = True

            try:
                result = await self.process_channel(key)
            except BlockedError as e:
                logger.error("Block page on %s (%s); stopping run", e.host, e.marker)
                yield snapshot(PipelineStatus.BLOCKED, block=BlockInfo.from_error(e))
                return
            except Exception as e:
                logger.exception("Unexpected failure while processing %s", key)
                result = ChannelResult(key=key, error=_describe(e))

            result = await self._finish(result, seen_ids, counters, rejected)
            counters["done"] += 1
            yield snapshot(last=result)

        yield snapshot(PipelineStatus.DONE)

    async def _finish(
        self,
        result: ChannelResult,
        seen_ids: set[str],
        counters: Counter[str],
        rejected: Counter[str],
    ) -> ChannelResult:
        if result.about_ok:
            counters["about_ok"] += 1
        else:
            counters["about_failed"] += 1
        if result.videos_ok:
            counters["videos_ok"] += 1
        elif not self.skip_videos:
            counters["videos_failed"] += 1

        if result.channel_id is not None:
            if result.channel_id in seen_ids:
                counters["skipped_duplicates"] += 1
                logger.info("Skipping duplicate channel %s", result.channel_id)
                return result.model_copy(update={"duplicate": True})
            seen_ids.add(result.channel_id)

        if result.verdict is not None and result.error is None:
            if not result.verdict.passed:
                rejected[result.verdict.failed_stage.value] += 1
            elif not result.accepted:
                rejected["secondary"] += 1
            else:
                counters["passed"] += 1

        if result.error is not None:
            counters["errors"] += 1

        if result.channel_info is None:
            return result
        if result.channel_id is None:
            counters["not_stored"] += 1
            logger.warning("No stable channel id for %s; not stored", result.key)
            return result
        if self.store is None:
            return result

        record = ChannelRecord(
            channel_id=result.channel_id,
            source=result.key,
            url=result.url,
            about_ok=result.about_ok,
            videos_ok=result.videos_ok,
            channel_info=result.channel_info,
            videos=result.videos,
            verdict=result.verdict,
            secondary=result.secondary,
        )
        try:
            await self.store.save(record)
        except Exception as e:
            logger.exception("Failed to store channel %s", result.channel_id)
            counters["errors"] += 1
            return result.model_copy(update={"error": _describe(e)})
        return result.model_copy(update={"stored": True})

