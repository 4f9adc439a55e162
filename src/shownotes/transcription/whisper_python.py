"""openai-whisper and whisper-diarization backends; both emit ``.srt`` subtitles."""

from __future__ import annotations

import logging
import os

from ..config import TranscriptionConfig
from ..exceptions import DependencyMissingError, TranscriptionFailedError
from ..filesystem import remove_if_exists
from ..normalizer import srt_to_transcript
from ..utils.process import ensure_tool, run_command
from .base import TranscriptionResult

logger = logging.getLogger(__name__)

STAGE = "transcription"


def _read_srt(base_path: str, tool: str) -> TranscriptionResult:
    srt_path = f"{base_path}.srt"
    try:
        with open(srt_path, "r", encoding="utf-8") as handle:
            text = handle.read()
    except FileNotFoundError as exc:
        raise TranscriptionFailedError(f"{tool} did not produce {srt_path}", stage=STAGE) from exc
    return TranscriptionResult(srt_to_transcript(text), [srt_path])


class WhisperPythonBackend:
    """Run the ``whisper`` CLI from the openai-whisper package."""

    name = "whisper_python"

    def __init__(self, cfg: TranscriptionConfig):
        self.cfg = cfg

    def transcribe(self, wav_path: str, base_path: str) -> TranscriptionResult:
        ensure_tool("whisper", stage=STAGE)
        logger.info("Transcribing with openai-whisper (%s)", self.cfg.model)
        run_command(
            [
                "whisper",
                wav_path,
                "--model",
                self.cfg.model,
                "--output_dir",
                os.path.dirname(base_path) or ".",
                "--output_format",
                "srt",
                "--language",
                "en",
                "--word_timestamps",
                "True",
            ],
            error_cls=TranscriptionFailedError,
            stage=STAGE,
            description="whisper",
        )
        return _read_srt(base_path, "whisper")


class WhisperDiarizationBackend:
    """Run ``diarize.py`` from a whisper-diarization checkout and its venv."""

    name = "whisper_diarization"

    def __init__(self, cfg: TranscriptionConfig):
        self.cfg = cfg
        self.python = os.path.join(cfg.whisper_diarization_dir, "venv", "bin", "python")
        self.script = os.path.join(cfg.whisper_diarization_dir, "diarize.py")

    def transcribe(self, wav_path: str, base_path: str) -> TranscriptionResult:
        for required in (self.python, self.script):
            if not os.path.exists(required):
                raise DependencyMissingError(
                    f"{required} not found",
                    stage=STAGE,
                    dependency="whisper-diarization",
                    suggestion="Clone whisper-diarization and create its venv, "
                    "or set whisper_diarization_dir",
                )
        logger.info("Transcribing with whisper-diarization (%s)", self.cfg.model)
        run_command(
            [self.python, self.script, "-a", wav_path, "--whisper-model", self.cfg.model],
            error_cls=TranscriptionFailedError,
            stage=STAGE,
            description="whisper-diarization",
        )
        # Plain-text sidecar; only the subtitles are normalized
        remove_if_exists(f"{base_path}.txt")
        return _read_srt(base_path, "whisper-diarization")
