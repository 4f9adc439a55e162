"""Resolve media metadata and render the Markdown front matter.

Video, playlist and channel metadata come from ``yt-dlp --print`` templates;
local files only contribute their basename.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from typing import List

from . import config_constants
from .exceptions import MetadataExtractionError
from .models import ChannelVideo, MediaItem
from .utils.process import ensure_tool, run_command

logger = logging.getLogger(__name__)

STAGE = "metadata"

# Order matters: stdout lines are read positionally
_PRINT_FIELDS = (
    ("show_link", "%(webpage_url)s"),
    ("channel", "%(channel)s"),
    ("channel_url", "%(uploader_url)s"),
    ("title", "%(title)s"),
    ("publish_date", "%(upload_date>%Y-%m-%d)s"),
    ("cover_image", "%(thumbnail)s"),
)

# yt-dlp prints this for template fields it cannot fill
_YTDLP_MISSING = "NA"


def _metadata_command(url: str) -> List[str]:
    cmd = ["yt-dlp", "--restrict-filenames"]
    for _, template in _PRINT_FIELDS:
        cmd.extend(["--print", template])
    cmd.append(url)
    return cmd


def resolve_video(url: str) -> MediaItem:
    """Fetch metadata for one video URL.

    Raises:
        DependencyMissingError: If yt-dlp is not installed
        MetadataExtractionError: If yt-dlp fails or any field comes back empty
    """
    ensure_tool("yt-dlp", stage=STAGE)
    stdout = run_command(
        _metadata_command(url),
        error_cls=MetadataExtractionError,
        stage=STAGE,
        description="yt-dlp metadata",
    )
    lines = [line.strip() for line in stdout.splitlines()]
    values = {}
    for index, (name, _) in enumerate(_PRINT_FIELDS):
        value = lines[index] if index < len(lines) else ""
        if not value or value == _YTDLP_MISSING:
            raise MetadataExtractionError(
                f"Incomplete metadata for {url}: missing {name}", stage=STAGE
            )
        values[name] = value

    item = MediaItem(**values)
    logger.debug("Resolved metadata for %s: %s", url, item.title)
    return item


def resolve_file(path: str) -> MediaItem:
    """Describe a local media file; only the basename is known."""
    original_name = os.path.basename(path)
    return MediaItem(show_link=original_name, title=original_name, source_path=path)


def build_front_matter(item: MediaItem) -> str:
    """Render the YAML front matter block that opens every Markdown artifact."""
    info = item.to_info()
    lines = ["---"]
    lines.extend(f'{key}: "{value}"' for key, value in info.items())
    lines.append("---\n")
    return "\n".join(lines)


def list_playlist_urls(url: str) -> List[str]:
    """Expand a playlist into its video URLs, in playlist order.

    Raises:
        DependencyMissingError: If yt-dlp is not installed
        MetadataExtractionError: If yt-dlp fails
    """
    ensure_tool("yt-dlp", stage=STAGE)
    stdout = run_command(
        ["yt-dlp", "--flat-playlist", "--print", "url", "--no-warnings", url],
        error_cls=MetadataExtractionError,
        stage=STAGE,
        description="yt-dlp playlist listing",
    )
    urls = [line.strip() for line in stdout.splitlines() if line.strip()]
    logger.info("Found %d videos in playlist", len(urls))
    return urls


_CHANNEL_DETAIL_TEMPLATE = "%(upload_date)s|%(timestamp)s|%(is_live)s|%(webpage_url)s"


def _channel_video(url: str) -> ChannelVideo:
    stdout = run_command(
        ["yt-dlp", "--print", _CHANNEL_DETAIL_TEMPLATE, "--no-warnings", url],
        error_cls=MetadataExtractionError,
        stage=STAGE,
        description="yt-dlp video details",
    )
    parts = stdout.strip().split("|")
    if len(parts) != 4:
        raise MetadataExtractionError(f"Unexpected video details for {url}", stage=STAGE)
    upload_date, timestamp, is_live, video_url = (part.strip() for part in parts)
    if upload_date in ("", _YTDLP_MISSING) or video_url in ("", _YTDLP_MISSING):
        raise MetadataExtractionError(f"Incomplete video details for {url}", stage=STAGE)
    try:
        uploaded = datetime.strptime(upload_date, "%Y%m%d").replace(tzinfo=timezone.utc)
    except ValueError as exc:
        raise MetadataExtractionError(
            f"Invalid upload date {upload_date!r} for {url}", stage=STAGE
        ) from exc
    try:
        seconds = int(timestamp)
    except ValueError:
        # Premieres and some live streams have no timestamp
        seconds = int(uploaded.timestamp())
    return ChannelVideo(
        url=video_url,
        upload_date=uploaded.strftime(config_constants.DATE_FORMAT),
        timestamp=seconds,
        is_live=is_live == "True",
    )


def list_channel_videos(url: str) -> List[ChannelVideo]:
    """List a channel's videos with their upload date and timestamp.

    Videos whose details cannot be read are logged and left out.

    Raises:
        DependencyMissingError: If yt-dlp is not installed
        MetadataExtractionError: If the channel listing fails
    """
    ensure_tool("yt-dlp", stage=STAGE)
    stdout = run_command(
        ["yt-dlp", "--flat-playlist", "--print", "%(url)s", "--no-warnings", url],
        error_cls=MetadataExtractionError,
        stage=STAGE,
        description="yt-dlp channel listing",
    )
    urls = [line.strip() for line in stdout.splitlines() if line.strip()]
    logger.info("Fetching details for %d channel videos", len(urls))

    videos = []
    for video_url in urls:
        try:
            videos.append(_channel_video(video_url))
        except MetadataExtractionError as exc:
            logger.error("[%s] Skipping %s: %s", STAGE, video_url, exc)
    logger.info("Found %d videos in channel", len(videos))
    return videos
