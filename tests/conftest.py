"""Shared fixtures and test utilities for shownotes tests.

This module contains:
- Test constants
- Helper functions for creating test objects
- Stub transcription and LLM backends
- Mock HTTP and subprocess helpers

All test files can import from this module using pytest's conftest.py mechanism.
"""

# Keep progress bars out of test output
import os

os.environ["TERM"] = "dumb"

import argparse
import subprocess  # nosec B404 - only used to build CompletedProcess fixtures
from typing import Any, Dict, List, Optional
from unittest.mock import Mock

import pytest

from shownotes import cli, config, models
from shownotes.models import Transcript, TranscriptSegment
from shownotes.providers.base import LLMResult
from shownotes.transcription.base import TranscriptionResult

# Test constants
TEST_BASE_URL = "https://example.com"
TEST_FEED_URL = "https://example.com/feed.xml"
TEST_VIDEO_URL = "https://www.youtube.com/watch?v=abc123"
TEST_PLAYLIST_URL = "https://www.youtube.com/playlist?list=PL123"
TEST_CHANNEL_SOURCE_URL = "https://www.youtube.com/@test/videos"
TEST_FEED_URL_2 = "https://example.org/other-feed.xml"
TEST_MEDIA_URL = f"{TEST_BASE_URL}/episode1.mp3"
TEST_MEDIA_URL_2 = f"{TEST_BASE_URL}/episode2.mp3"
TEST_MEDIA_URL_3 = f"{TEST_BASE_URL}/episode3.mp4"
TEST_FEED_TITLE = "Test Podcast"
TEST_FEED_LINK = "https://example.com/podcast"
TEST_FEED_IMAGE = "https://example.com/cover.jpg"
TEST_EPISODE_TITLE = "Episode One: The Beginning"
TEST_CHANNEL = "Test Channel"
TEST_CHANNEL_URL = "https://www.youtube.com/@test"
TEST_THUMBNAIL = "https://i.ytimg.com/vi/abc123/maxresdefault.jpg"
TEST_PUBLISH_DATE = "2024-03-15"
TEST_API_KEY = "test-api-key-123"

# Stdout of the six yt-dlp --print templates, in invocation order
TEST_YTDLP_METADATA = "\n".join(
    [
        TEST_VIDEO_URL,
        TEST_CHANNEL,
        TEST_CHANNEL_URL,
        TEST_EPISODE_TITLE,
        TEST_PUBLISH_DATE,
        TEST_THUMBNAIL,
    ]
)

TEST_LRC = """[by:whisper.cpp]
[00:00.00] Welcome to the show.
[00:05.52] Today we talk about Python.

[01:02.10] Thanks for listening.
"""

TEST_SRT = """1
00:00:00,000 --> 00:00:04,500
Welcome to the show.

2
00:00:04,500 --> 00:00:09,000
Today we talk
about Python.

3
01:02:03,250 --> 01:02:05,000
Thanks for listening.
"""


def create_test_config(**overrides):
    """Create test Config object with defaults.

    Args:
        **overrides: Fields to override from defaults

    Returns:
        config.Config object with test defaults (single local file source)
    """
    defaults: Dict[str, Any] = {"file": "episode.mp3", "output_dir": "content"}
    if any(key in overrides for key in ("video", "playlist", "channel", "urls", "rss")):
        defaults.pop("file")
    defaults.update(overrides)
    return config.Config(**defaults)


def create_test_args(**overrides):
    """Create test argparse.Namespace with every CLI destination unset.

    Args:
        **overrides: Fields to override from defaults

    Returns:
        argparse.Namespace shaped like the parser output
    """
    defaults: Dict[str, Any] = {
        "config": None,
        "file_config": {},
        "output_dir": None,
        "noCleanUp": None,
        "version": False,
        "log_file": None,
        "log_level": None,
        "video": None,
        "playlist": None,
        "channel": None,
        "urls": None,
        "file": None,
        "rss": None,
        "speakerLabels": None,
        "speakersExpected": None,
        "prompt": None,
        "customPrompt": None,
        "order": None,
        "skip": None,
        "last": None,
        "lastDays": None,
        "date": None,
        "item": None,
        "info": None,
    }
    for flag in list(cli.TRANSCRIPTION_FLAGS) + list(cli.LLM_FLAGS):
        defaults[flag] = None
    defaults.update(overrides)
    return argparse.Namespace(**defaults)


def create_test_feed_item(**overrides):
    """Create test FeedItem object with defaults."""
    defaults = {
        "show_link": TEST_MEDIA_URL,
        "channel": TEST_FEED_TITLE,
        "channel_url": TEST_FEED_LINK,
        "title": TEST_EPISODE_TITLE,
        "publish_date": TEST_PUBLISH_DATE,
        "cover_image": TEST_FEED_IMAGE,
        "enclosure_type": "audio/mpeg",
    }
    defaults.update(overrides)
    return models.FeedItem(**defaults)


def build_rss_xml(items: Optional[List[Dict[str, str]]] = None, title: str = TEST_FEED_TITLE):
    """Build RSS XML with one ``<item>`` per dict.

    Each dict may carry ``title``, ``url``, ``type``, ``pubDate`` and ``image``.

    Returns:
        RSS XML bytes
    """
    item_xml = []
    for item in items or []:
        parts = [f"<title>{item.get('title', '')}</title>"]
        if item.get("pubDate"):
            parts.append(f"<pubDate>{item['pubDate']}</pubDate>")
        if item.get("url"):
            parts.append(
                f'<enclosure url="{item["url"]}" type="{item.get("type", "audio/mpeg")}" '
                'length="1234" />'
            )
        if item.get("image"):
            parts.append(f'<itunes:image href="{item["image"]}" />')
        item_xml.append("<item>" + "".join(parts) + "</item>")
    return f"""<?xml version='1.0' encoding='UTF-8'?>
<rss version="2.0" xmlns:itunes="http://www.itunes.com/dtds/podcast-1.0.dtd">
  <channel>
    <title>{title}</title>
    <link>{TEST_FEED_LINK}</link>
    <image><url>{TEST_FEED_IMAGE}</url></image>
    {"".join(item_xml)}
  </channel>
</rss>""".strip().encode("utf-8")


def completed_process(stdout: str = "", stderr: str = "", returncode: int = 0):
    """Build a ``subprocess.CompletedProcess`` for patched ``subprocess.run`` calls."""
    return subprocess.CompletedProcess(
        args=[], returncode=returncode, stdout=stdout, stderr=stderr
    )


def create_json_response(payload: Any, status_code: int = 200):
    """Create a Mock ``requests.Response`` returning ``payload`` from ``json()``."""
    resp = Mock()
    resp.status_code = status_code
    resp.json.return_value = payload
    resp.content = b""
    resp.headers = {}
    return resp


class StubTranscriptionBackend:
    """Transcription backend that writes a fake ``.lrc`` and returns fixed segments."""

    name = "stub"

    def __init__(self, segments=None, produce_raw_file: bool = True, error=None):
        self.segments = segments or [
            TranscriptSegment(0.0, "Welcome to the show."),
            TranscriptSegment(65.0, "Thanks for listening."),
        ]
        self.produce_raw_file = produce_raw_file
        self.error = error
        self.calls: List[str] = []

    def transcribe(self, wav_path: str, base_path: str) -> TranscriptionResult:
        self.calls.append(wav_path)
        if self.error is not None:
            raise self.error
        produced = []
        if self.produce_raw_file:
            lrc_path = f"{base_path}.lrc"
            with open(lrc_path, "w", encoding="utf-8") as handle:
                handle.write("[00:00.00] raw")
            produced.append(lrc_path)
        return TranscriptionResult(Transcript(list(self.segments)), produced)


class StubLLMBackend:
    """LLM backend that returns canned show notes."""

    def __init__(
        self, name: str = "chatgpt", text: str = "## Summary\n\nGreat episode.", error=None
    ):
        self.name = name
        self.text = text
        self.error = error
        self.calls: List[tuple] = []

    def generate(self, prompt: str, transcript: str) -> LLMResult:
        self.calls.append((prompt, transcript))
        if self.error is not None:
            raise self.error
        return LLMResult(self.text, "stub-model", 10, 20)


def fake_acquire(_source: str, wav_path: str) -> str:
    """Stand-in for audio acquisition: writes a few bytes to ``wav_path``."""
    os.makedirs(os.path.dirname(wav_path) or ".", exist_ok=True)
    with open(wav_path, "wb") as handle:
        handle.write(b"RIFF0000WAVE")
    return wav_path


@pytest.fixture
def clean_env(monkeypatch):
    """Remove API keys and related settings from the environment."""
    for env_var in list(config.API_KEY_ENV_VARS.values()) + [
        "LOG_LEVEL",
        "OLLAMA_HOST",
        "OLLAMA_PORT",
        "PROMPT_DIR",
    ]:
        monkeypatch.delenv(env_var, raising=False)
