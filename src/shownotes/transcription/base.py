"""Transcription backend protocol.

Every backend turns the 16 kHz mono WAV of one item into a canonical
:class:`~shownotes.models.Transcript` and reports which raw files it left on
disk, so the cleanup manifest can remove them later.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Protocol

from ..audio import probe_duration
from ..models import Transcript

logger = logging.getLogger(__name__)


@dataclass
class TranscriptionResult:
    """Output of one transcription call.

    Attributes:
        transcript: Canonical transcript
        produced_files: Raw backend files written next to the WAV (``.lrc``, ``.srt``)
    """

    transcript: Transcript
    produced_files: List[str] = field(default_factory=list)


class TranscriptionBackend(Protocol):
    """Protocol for speech-to-text backends.

    ``base_path`` is the artifact path without extension; external tools
    append their own suffix to it.
    """

    name: str

    def transcribe(self, wav_path: str, base_path: str) -> TranscriptionResult:
        """Transcribe ``wav_path``.

        Raises:
            TranscriptionFailedError: The tool or remote service failed (item scoped)
            DependencyMissingError: A required local tool is absent (run scoped)
        """
        ...


def log_estimated_cost(service: str, model: str, cost_per_minute: float, wav_path: str) -> None:
    """Log an estimated per-minute cost for a cloud transcription call."""
    duration = probe_duration(wav_path)
    if duration is None:
        logger.debug("%s cost estimate skipped: audio duration unknown", service)
        return
    minutes = duration / 60
    logger.info(
        "%s transcription cost estimate (%s): %.1f min at $%.4f/min = $%.4f",
        service,
        model,
        minutes,
        cost_per_minute,
        minutes * cost_per_minute,
    )
