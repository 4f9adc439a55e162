"""Produce the 16 kHz mono WAV every transcription backend consumes."""

from __future__ import annotations

import json
import logging
import os
import shutil
from typing import Optional

from . import config_constants
from .exceptions import AcquisitionError, ShowNotesError, UnsupportedFormatError
from .utils.process import ensure_tool, run_command

logger = logging.getLogger(__name__)

STAGE = "audio"

# Tokens ffprobe reports in format_name for containers we accept
KNOWN_CONTAINERS = frozenset(
    {"wav", "mp3", "mov", "mp4", "m4a", "aac", "ogg", "flac", "matroska", "webm", "avi"}
)

_POSTPROCESSOR_ARGS = (
    f"ffmpeg:-ar {config_constants.AUDIO_SAMPLE_RATE} -ac {config_constants.AUDIO_CHANNELS}"
)


def acquire_url(url: str, wav_path: str) -> str:
    """Download and transcode the audio track of ``url`` into ``wav_path``.

    Returns:
        ``wav_path``

    Raises:
        DependencyMissingError: If yt-dlp is not installed
        AcquisitionError: If yt-dlp exits non-zero (stderr attached)
    """
    ensure_tool("yt-dlp", stage=STAGE)
    os.makedirs(os.path.dirname(wav_path) or ".", exist_ok=True)
    logger.info("Downloading audio: %s", url)
    run_command(
        [
            "yt-dlp",
            "--no-warnings",
            "--restrict-filenames",
            "--extract-audio",
            "--audio-format",
            "wav",
            "--postprocessor-args",
            _POSTPROCESSOR_ARGS,
            "--no-playlist",
            "-o",
            wav_path,
            url,
        ],
        error_cls=AcquisitionError,
        stage=STAGE,
        description="yt-dlp download",
    )
    logger.debug("Audio written to %s", wav_path)
    return wav_path


def _probe_format_name(path: str) -> str:
    try:
        stdout = run_command(
            [
                "ffprobe",
                "-v",
                "error",
                "-show_entries",
                "format=format_name",
                "-of",
                "json",
                path,
            ],
            error_cls=UnsupportedFormatError,
            stage=STAGE,
            description="ffprobe",
        )
        data = json.loads(stdout or "{}")
    except json.JSONDecodeError as exc:
        raise UnsupportedFormatError(f"Unreadable ffprobe output for {path}", stage=STAGE) from exc
    return str(data.get("format", {}).get("format_name", ""))


def acquire_file(path: str, wav_path: str) -> str:
    """Validate a local media file and convert it into ``wav_path``.

    WAV input is copied as-is; other formats are transcoded with ffmpeg.

    Raises:
        DependencyMissingError: If ffmpeg or ffprobe is not installed
        AcquisitionError: If the file is missing or ffmpeg fails
        UnsupportedFormatError: If the extension or detected container is unknown
    """
    ensure_tool("ffmpeg", stage=STAGE)
    ensure_tool("ffprobe", stage=STAGE)
    if not os.path.isfile(path):
        raise AcquisitionError(f"File not found: {path}", stage=STAGE)

    ext = os.path.splitext(path)[1].lower().lstrip(".")
    if ext not in config_constants.SUPPORTED_MEDIA_EXTENSIONS:
        raise UnsupportedFormatError(
            f"Unsupported file extension '.{ext}' for {path}",
            stage=STAGE,
            suggestion=f"Supported: {', '.join(config_constants.SUPPORTED_MEDIA_EXTENSIONS)}",
        )

    format_name = _probe_format_name(path)
    if not set(format_name.split(",")) & KNOWN_CONTAINERS:
        raise UnsupportedFormatError(
            f"Could not detect a supported container for {path} (ffprobe: {format_name or 'none'})",
            stage=STAGE,
        )

    os.makedirs(os.path.dirname(wav_path) or ".", exist_ok=True)
    if ext == "wav":
        if os.path.abspath(path) != os.path.abspath(wav_path):
            shutil.copyfile(path, wav_path)
        logger.debug("Copied WAV input %s -> %s", path, wav_path)
        return wav_path

    logger.info("Converting %s to WAV", path)
    run_command(
        [
            "ffmpeg",
            "-y",
            "-i",
            path,
            "-ar",
            str(config_constants.AUDIO_SAMPLE_RATE),
            "-ac",
            str(config_constants.AUDIO_CHANNELS),
            "-c:a",
            "pcm_s16le",
            wav_path,
        ],
        error_cls=AcquisitionError,
        stage=STAGE,
        description="ffmpeg",
    )
    return wav_path


def probe_duration(path: str) -> Optional[float]:
    """Return the duration of ``path`` in seconds, or None if ffprobe cannot tell."""
    if shutil.which("ffprobe") is None:
        return None
    try:
        stdout = run_command(
            [
                "ffprobe",
                "-v",
                "error",
                "-show_entries",
                "format=duration",
                "-of",
                "default=noprint_wrappers=1:nokey=1",
                path,
            ],
            error_cls=AcquisitionError,
            stage=STAGE,
            description="ffprobe duration",
        )
        return float(stdout.strip())
    except (ShowNotesError, ValueError) as exc:
        logger.debug("Could not determine duration of %s: %s", path, exc)
        return None
