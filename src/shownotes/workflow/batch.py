"""Batch drivers: one per source kind.

Single-item drivers (video, file) raise the item's ``ItemFailedError``.
Multi-item drivers (playlist, channel, urls file, RSS) log each failure with the
item identifier, keep going and report totals in a :class:`BatchSummary`.
Every driver that processes items builds its orchestrator before listing or
fetching anything, so a missing credential fails the run without network I/O.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Callable, Iterable, List, Optional, TypeVar

from .. import feed_selector
from ..config import Config, FeedSelection
from ..exceptions import FeedFetchError, ItemScopedError, NoMatchingItemsError
from ..filesystem import validate_and_normalize_output_dir, write_text
from ..metadata import list_channel_videos, list_playlist_urls, resolve_video
from ..models import FeedItem
from ..progress import progress_context
from .pipeline import PipelineOrchestrator
from .types import BatchSummary, ItemResult

logger = logging.getLogger(__name__)

PLAYLIST_INFO_FILENAME = "playlist_info.json"
CHANNEL_INFO_FILENAME = "channel_info.json"
URLS_INFO_FILENAME = "urls_info.json"
RSS_INFO_FILENAME = "rss_info.json"

T = TypeVar("T")
OrchestratorFactory = Callable[[Config], PipelineOrchestrator]


def _info_path(cfg: Config, filename: str) -> str:
    return os.path.join(validate_and_normalize_output_dir(cfg.output_dir), filename)


def _run_single(result: ItemResult) -> BatchSummary:
    if result.error is not None:
        raise result.error
    summary = BatchSummary()
    summary.record(result)
    return summary


def run_video(
    cfg: Config, make_orchestrator: OrchestratorFactory = PipelineOrchestrator
) -> BatchSummary:
    """Process one video URL.

    Raises:
        ItemFailedError: If any stage fails
    """
    return _run_single(make_orchestrator(cfg).process_video(str(cfg.video)))


def run_file(
    cfg: Config, make_orchestrator: OrchestratorFactory = PipelineOrchestrator
) -> BatchSummary:
    """Process one local audio or video file.

    Raises:
        ItemFailedError: If any stage fails
    """
    return _run_single(make_orchestrator(cfg).process_file(str(cfg.file)))


def _process_all(
    items: List[T],
    process: Callable[[T], ItemResult],
    description: str,
    describe_item: Callable[[T], str] = str,
) -> BatchSummary:
    summary = BatchSummary()
    with progress_context(len(items), description) as reporter:
        for index, item in enumerate(items, start=1):
            label = describe_item(item)
            logger.info("Item %d/%d: %s", index, len(items), label)
            reporter.start_item(label)
            result = process(item)
            summary.record(result)
            if not result.succeeded:
                logger.error(
                    "[%s] Skipping %s after failure: %s", result.stage, result.label, result.error
                )
            reporter.finish_item(result.succeeded)
    logger.info(summary.describe())
    return summary


def _write_video_info(urls: Iterable[str], path: str) -> str:
    infos = []
    for url in urls:
        try:
            infos.append(resolve_video(url).to_info())
        except ItemScopedError as exc:
            logger.error("[metadata] %s: %s", url, exc)
    write_text(path, json.dumps(infos, indent=2, ensure_ascii=False))
    logger.info("Wrote info for %d videos to %s", len(infos), path)
    return path


def read_urls_file(path: str) -> List[str]:
    """Return the URLs in ``path``, skipping blank lines and ``#`` comments."""
    with open(path, "r", encoding="utf-8") as handle:
        lines = [line.strip() for line in handle]
    return [line for line in lines if line and not line.startswith("#")]


def run_playlist(
    cfg: Config, make_orchestrator: OrchestratorFactory = PipelineOrchestrator
) -> BatchSummary:
    orchestrator = None if cfg.info else make_orchestrator(cfg)
    urls = list_playlist_urls(str(cfg.playlist))
    if orchestrator is None:
        _write_video_info(urls, _info_path(cfg, PLAYLIST_INFO_FILENAME))
        return BatchSummary()
    return _process_all(urls, orchestrator.process_video, "Playlist")


def run_channel(
    cfg: Config,
    make_orchestrator: OrchestratorFactory = PipelineOrchestrator,
    selection: Optional[FeedSelection] = None,
) -> BatchSummary:
    """List the channel's videos, order them by upload time and process the selection.

    Info mode writes metadata for the selected videos only.

    Raises:
        InvalidSelectionError: If the selection parameters conflict
        MetadataExtractionError: If the channel cannot be listed
        NoMatchingItemsError: If the channel or the selection is empty
    """
    selection = selection or FeedSelection.from_config(cfg)
    orchestrator = None if cfg.info else make_orchestrator(cfg)
    videos = list_channel_videos(str(cfg.channel))
    if not videos:
        raise NoMatchingItemsError(f"No videos found in {cfg.channel}", stage="metadata")
    selected = feed_selector.select_videos(videos, selection)
    logger.info("Selected %d of %d channel videos", len(selected), len(videos))
    urls = [video.url for video in selected]
    if orchestrator is None:
        _write_video_info(urls, _info_path(cfg, CHANNEL_INFO_FILENAME))
        return BatchSummary()
    if not urls:
        raise NoMatchingItemsError("Selection left no videos to process", stage="metadata")
    return _process_all(urls, orchestrator.process_video, "Channel")


def run_urls(
    cfg: Config, make_orchestrator: OrchestratorFactory = PipelineOrchestrator
) -> BatchSummary:
    orchestrator = None if cfg.info else make_orchestrator(cfg)
    urls = read_urls_file(str(cfg.urls))
    logger.info("Found %d URLs in %s", len(urls), cfg.urls)
    if orchestrator is None:
        _write_video_info(urls, _info_path(cfg, URLS_INFO_FILENAME))
        return BatchSummary()
    return _process_all(urls, orchestrator.process_video, "URLs")


def run_rss(
    cfg: Config,
    make_orchestrator: OrchestratorFactory = PipelineOrchestrator,
    selection: Optional[FeedSelection] = None,
) -> BatchSummary:
    """Fetch each feed in turn, then either dump its info or process the selected items.

    Info mode writes every media item of every feed, before selection, into a
    single file. With one feed, fetch and selection errors propagate. With
    several, a failing feed is logged, counted as a failure and skipped.

    Raises:
        InvalidSelectionError: If the selection parameters conflict
        FeedFetchError: If a lone feed cannot be fetched or parsed
        NoMatchingItemsError: If a lone feed or its selection is empty
    """
    selection = selection or FeedSelection.from_config(cfg)
    orchestrator = None if cfg.info else make_orchestrator(cfg)
    feeds = list(cfg.rss)
    summary = BatchSummary()
    info_items: List[FeedItem] = []

    for index, url in enumerate(feeds, start=1):
        if len(feeds) > 1:
            logger.info("Feed %d/%d: %s", index, len(feeds), url)
        try:
            _, items = feed_selector.load_feed(url, cfg.user_agent, cfg.feed_timeout)
            if orchestrator is None:
                info_items.extend(items)
                continue
            selected = feed_selector.select_items(items, selection)
            if not selected:
                raise NoMatchingItemsError("Selection left no items to process", stage="rss")
        except (FeedFetchError, NoMatchingItemsError) as exc:
            if len(feeds) == 1:
                raise
            logger.error("[rss] Skipping feed %s: %s", url, exc)
            summary.record_failure(url, exc)
            continue

        logger.info("Selected %d of %d feed items", len(selected), len(items))
        summary.merge(
            _process_all(
                selected,
                orchestrator.process_feed_item,
                "Episodes",
                describe_item=lambda item: item.title or item.show_link,
            )
        )

    if orchestrator is None:
        feed_selector.write_info(info_items, _info_path(cfg, RSS_INFO_FILENAME))
        return BatchSummary()
    return summary
