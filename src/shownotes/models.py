from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional

from .filesystem import sanitize_title

TranscriptStyle = Literal["bracket", "utterance"]


def format_timestamp(seconds: float) -> str:
    """Render seconds as ``MM:SS`` with two-digit padding and unbounded minutes."""
    total = int(seconds)
    minutes, secs = divmod(total, 60)
    return f"{minutes:02d}:{secs:02d}"


@dataclass(frozen=True)
class MediaItem:
    """The unit of work handed to the pipeline.

    Built by the metadata resolver from a video URL or a local file, or
    converted from a parsed RSS item. Field names follow the front matter keys
    written into every Markdown artifact.

    Attributes:
        show_link: Canonical URL of the video or enclosure (basename for local files).
        channel: Channel or podcast name.
        channel_url: Channel or podcast homepage.
        title: Human-readable title.
        publish_date: Publish date as ``YYYY-MM-DD`` (empty for local files).
        cover_image: Thumbnail or cover art URL.
        source_path: Local file path when the item came from disk.
    """

    show_link: str
    channel: str = ""
    channel_url: str = ""
    title: str = ""
    publish_date: str = ""
    cover_image: str = ""
    source_path: Optional[str] = None

    @property
    def is_local(self) -> bool:
        return self.source_path is not None

    @property
    def stem(self) -> str:
        """Deterministic filename stem shared by every artifact of this item."""
        if self.source_path is not None:
            base = os.path.splitext(os.path.basename(self.source_path))[0]
            return sanitize_title(base)
        return f"{self.publish_date}-{sanitize_title(self.title)}"

    @property
    def label(self) -> str:
        """Identifier used in log lines and error messages."""
        return self.title or self.show_link or (self.source_path or "")

    def to_info(self) -> Dict[str, str]:
        """Return the camelCase mapping used by the info JSON sidecars."""
        return {
            "showLink": self.show_link,
            "channel": self.channel,
            "channelURL": self.channel_url,
            "title": self.title,
            "description": "",
            "publishDate": self.publish_date,
            "coverImage": self.cover_image,
        }


@dataclass(frozen=True)
class FeedChannel:
    """Channel-level fields of a parsed RSS feed."""

    title: str = ""
    link: str = ""
    image: str = ""


@dataclass(frozen=True)
class FeedItem:
    """An RSS item whose enclosure is audio or video.

    Attributes:
        show_link: Enclosure URL.
        channel: Title of the owning feed channel.
        channel_url: Link of the owning feed channel.
        title: Item title.
        publish_date: ``YYYY-MM-DD`` derived from ``pubDate``.
        cover_image: ``itunes:image`` href, falling back to the channel image.
        enclosure_type: MIME type of the enclosure.
    """

    show_link: str
    channel: str
    channel_url: str
    title: str
    publish_date: str
    cover_image: str
    enclosure_type: str = ""
    description: str = ""

    def to_media_item(self) -> MediaItem:
        return MediaItem(
            show_link=self.show_link,
            channel=self.channel,
            channel_url=self.channel_url,
            title=self.title,
            publish_date=self.publish_date,
            cover_image=self.cover_image,
        )

    def to_info(self) -> Dict[str, str]:
        return self.to_media_item().to_info()


@dataclass(frozen=True)
class ChannelVideo:
    """One video listed from a channel, with what is needed to order it."""

    url: str
    upload_date: str = ""
    timestamp: int = 0
    is_live: bool = False


@dataclass(frozen=True)
class TranscriptSegment:
    """One timestamped span of a transcript.

    ``ends_line`` is False when the next segment continues on the same rendered
    line (word-stream transcripts stamp sentence starts mid-line).
    ``start_seconds`` is None for plain-text fallbacks without timing.
    """

    start_seconds: Optional[float]
    text: str
    speaker: Optional[str] = None
    ends_line: bool = True

    def render(self, style: TranscriptStyle = "bracket") -> str:
        if self.start_seconds is None:
            return self.text
        stamp = format_timestamp(self.start_seconds)
        if style == "utterance":
            prefix = f"Speaker {self.speaker} " if self.speaker else ""
            return f"{prefix}({stamp}): {self.text}"
        return f"[{stamp}] {self.text}" if self.text else f"[{stamp}]"


@dataclass
class Transcript:
    """Backend-agnostic transcript in canonical segment form."""

    segments: List[TranscriptSegment] = field(default_factory=list)
    style: TranscriptStyle = "bracket"

    def render(self) -> str:
        """Return the canonical text, one rendered line per ``ends_line`` group."""
        lines: List[str] = []
        current: List[str] = []
        for segment in self.segments:
            current.append(segment.render(self.style))
            if segment.ends_line:
                lines.append(" ".join(current).rstrip())
                current = []
        if current:
            lines.append(" ".join(current).rstrip())
        return "\n".join(lines)

    def __len__(self) -> int:
        return len(self.segments)
