"""Fetch RSS feeds and choose which feed items or channel videos to process."""

from __future__ import annotations

import json
import logging
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Tuple

import requests

from . import config_constants, downloader
from .config import FeedSelection
from .exceptions import FeedFetchError, FeedFetchTimeoutError, NoMatchingItemsError
from .filesystem import write_text
from .models import ChannelVideo, FeedChannel, FeedItem
from .rss_parser import parse_feed

logger = logging.getLogger(__name__)

STAGE = "rss"


def fetch_feed(
    url: str,
    user_agent: str = config_constants.DEFAULT_USER_AGENT,
    timeout: float = config_constants.DEFAULT_FEED_TIMEOUT_SECONDS,
) -> bytes:
    """Download feed XML. No retries.

    Raises:
        FeedFetchTimeoutError: If the request exceeds ``timeout``
        FeedFetchError: On a non-2xx status or a connection failure
    """
    logger.info("Fetching RSS feed: %s", url)
    try:
        resp = downloader.http_get(
            url,
            user_agent,
            timeout,
            headers={"Accept": config_constants.FEED_ACCEPT_HEADER},
        )
    except requests.Timeout as exc:
        raise FeedFetchTimeoutError(
            f"Timed out after {timeout:g}s fetching {url}", stage=STAGE
        ) from exc
    except requests.HTTPError as exc:
        status = exc.response.status_code if exc.response is not None else "unknown"
        raise FeedFetchError(f"HTTP {status} fetching {url}", stage=STAGE) from exc
    except requests.RequestException as exc:
        raise FeedFetchError(f"Failed to fetch {url}: {exc}", stage=STAGE) from exc
    return resp.content


def load_feed(
    url: str,
    user_agent: str = config_constants.DEFAULT_USER_AGENT,
    timeout: float = config_constants.DEFAULT_FEED_TIMEOUT_SECONDS,
) -> Tuple[FeedChannel, List[FeedItem]]:
    """Fetch and parse a feed, keeping only audio/video items.

    Raises:
        NoMatchingItemsError: If the feed has no audio or video enclosures
    """
    channel, items = parse_feed(fetch_feed(url, user_agent, timeout))
    if not items:
        raise NoMatchingItemsError(f"No audio or video items found in {url}", stage=STAGE)
    logger.info("Feed '%s' has %d media items", channel.title, len(items))
    return channel, items


def select_items(
    items: List[FeedItem],
    selection: FeedSelection,
    today: Optional[date] = None,
) -> List[FeedItem]:
    """Apply the selection policy to items in feed order (newest first).

    Precedence: explicit ``items``, ``last``, ``last_days``, ``dates``, then
    ``order`` and ``skip``. The parameters are mutually exclusive, so at most
    one of the first four applies.

    Raises:
        NoMatchingItemsError: If ``items``, ``last_days`` or ``dates`` match nothing
    """
    if selection.items:
        wanted = set(selection.items)
        chosen = [item for item in items if item.show_link in wanted]
        if not chosen:
            raise NoMatchingItemsError("None of the requested items are in the feed", stage=STAGE)
        return chosen

    if selection.last is not None:
        return items[: selection.last]

    if selection.last_days is not None:
        cutoff = (today or date.today()) - timedelta(days=selection.last_days)
        chosen = [item for item in items if _published_on_or_after(item, cutoff)]
        if not chosen:
            raise NoMatchingItemsError(
                f"No items published in the last {selection.last_days} days", stage=STAGE
            )
        return chosen

    if selection.dates:
        wanted_dates = set(selection.dates)
        chosen = [item for item in items if item.publish_date in wanted_dates]
        if not chosen:
            raise NoMatchingItemsError(
                f"No items published on {', '.join(selection.dates)}", stage=STAGE
            )
        return chosen

    ordered = list(reversed(items)) if selection.order == "oldest" else list(items)
    return ordered[selection.skip or 0 :]


def select_videos(videos: List[ChannelVideo], selection: FeedSelection) -> List[ChannelVideo]:
    """Sort channel videos by upload time, newest first unless ``oldest``, then slice."""
    ordered = sorted(videos, key=lambda video: video.timestamp)
    if selection.order != "oldest":
        ordered.reverse()
    if selection.last is not None:
        return ordered[: selection.last]
    return ordered[selection.skip or 0 :]


def _published_on_or_after(item: FeedItem, cutoff: date) -> bool:
    if not item.publish_date:
        return False
    try:
        published = datetime.strptime(item.publish_date, config_constants.DATE_FORMAT).date()
    except ValueError:
        return False
    return published >= cutoff


def write_info(items: Iterable[FeedItem], path: str) -> str:
    """Write item metadata as a JSON list (camelCase keys, indent 2)."""
    payload = [item.to_info() for item in items]
    write_text(path, json.dumps(payload, indent=2, ensure_ascii=False))
    logger.info("Wrote info for %d items to %s", len(payload), path)
    return path
