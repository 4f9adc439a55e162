"""RSS feed parsing into channel info and media items."""

from __future__ import annotations

import logging

# Bandit: parsing handled via defusedxml safe APIs
import xml.etree.ElementTree as ET  # nosec B405
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import List, Optional, Tuple

from defusedxml.ElementTree import fromstring as safe_fromstring, ParseError as DefusedXMLParseError

from .exceptions import FeedFetchError
from .models import FeedChannel, FeedItem

logger = logging.getLogger(__name__)

ITUNES_NS = "{http://www.itunes.com/dtds/podcast-1.0.dtd}"
MEDIA_TYPE_PREFIXES = ("audio/", "video/")


def _text(element: Optional[ET.Element], tag: str) -> str:
    if element is None:
        return ""
    child = element.find(tag)
    if child is None or child.text is None:
        return ""
    return child.text.strip()


def _itunes_image(element: ET.Element) -> str:
    image = element.find(f"{ITUNES_NS}image")
    if image is None:
        return ""
    return (image.attrib.get("href") or "").strip()


def parse_publish_date(value: str) -> str:
    """Convert an RFC 2822 ``pubDate`` to ``YYYY-MM-DD`` (UTC); empty if unparseable."""
    if not value:
        return ""
    try:
        parsed: datetime = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        logger.debug("Unparseable pubDate: %r", value)
        return ""
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.strftime("%Y-%m-%d")


def _parse_channel(channel: ET.Element) -> FeedChannel:
    image = _text(channel.find("image"), "url") or _itunes_image(channel)
    return FeedChannel(
        title=_text(channel, "title"),
        link=_text(channel, "link"),
        image=image,
    )


def _parse_item(item: ET.Element, channel: FeedChannel) -> Optional[FeedItem]:
    enclosure = item.find("enclosure")
    if enclosure is None:
        return None
    media_type = (enclosure.attrib.get("type") or "").strip()
    url = (enclosure.attrib.get("url") or "").strip()
    if not url or not media_type.startswith(MEDIA_TYPE_PREFIXES):
        return None
    return FeedItem(
        show_link=url,
        channel=channel.title,
        channel_url=channel.link,
        title=_text(item, "title"),
        publish_date=parse_publish_date(_text(item, "pubDate")),
        cover_image=_itunes_image(item) or channel.image,
        enclosure_type=media_type,
    )


def parse_feed(xml_bytes: bytes) -> Tuple[FeedChannel, List[FeedItem]]:
    """Parse feed XML into its channel and the items with audio/video enclosures.

    Items keep feed order (newest first for well-formed podcast feeds).

    Raises:
        FeedFetchError: If the XML is malformed or has no ``<channel>``
    """
    try:
        root = safe_fromstring(xml_bytes)
    except (DefusedXMLParseError, ET.ParseError) as exc:
        raise FeedFetchError(f"Malformed feed XML: {exc}", stage="rss") from exc

    channel_el = root.find("channel") if root is not None else None
    if channel_el is None:
        raise FeedFetchError("Feed has no <channel> element", stage="rss")

    channel = _parse_channel(channel_el)
    items: List[FeedItem] = []
    skipped = 0
    for item_el in channel_el.findall("item"):
        item = _parse_item(item_el, channel)
        if item is None:
            skipped += 1
            continue
        items.append(item)
    if skipped:
        logger.debug("Skipped %d feed items without an audio/video enclosure", skipped)
    return channel, items
