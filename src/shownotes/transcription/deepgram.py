"""Deepgram pre-recorded audio transcription (single synchronous request)."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

import requests

from .. import downloader
from ..config import TranscriptionConfig
from ..exceptions import TranscriptionFailedError
from ..model_tables import DEEPGRAM_MODELS
from ..normalizer import deepgram_to_transcript
from .base import log_estimated_cost, TranscriptionResult

logger = logging.getLogger(__name__)

STAGE = "Deepgram"
DEEPGRAM_LISTEN_URL = "https://api.deepgram.com/v1/listen"


class DeepgramBackend:
    """POST the WAV to Deepgram and lay out the returned word stream."""

    name = "deepgram"

    def __init__(self, cfg: TranscriptionConfig):
        self.cfg = cfg

    def _query_params(self) -> Dict[str, str]:
        return {
            "model": self.cfg.model,
            "smart_format": "true",
            "punctuate": "true",
            "diarize": "false",
            "paragraphs": "true",
        }

    def transcribe(self, wav_path: str, base_path: str) -> TranscriptionResult:
        logger.info("Transcribing with Deepgram (%s)", self.cfg.model)
        with open(wav_path, "rb") as handle:
            audio = handle.read()
        try:
            resp = downloader.send_request(
                "POST",
                DEEPGRAM_LISTEN_URL,
                params=self._query_params(),
                headers={
                    "Authorization": f"Token {self.cfg.api_key}",
                    "Content-Type": "audio/wav",
                },
                data=audio,
            )
            payload = resp.json()
        except requests.RequestException as exc:
            raise TranscriptionFailedError(f"Deepgram request failed: {exc}", stage=STAGE) from exc
        except ValueError as exc:
            raise TranscriptionFailedError("Deepgram returned invalid JSON", stage=STAGE) from exc

        words = _extract_words(payload)
        price = DEEPGRAM_MODELS.get(self.cfg.model)
        if price is not None:
            log_estimated_cost("Deepgram", self.cfg.model, price.cost_per_minute, wav_path)
        return TranscriptionResult(deepgram_to_transcript(words))


def _extract_words(payload: Dict[str, Any]) -> List[Dict[str, Any]]:
    try:
        words = payload["results"]["channels"][0]["alternatives"][0]["words"]
    except (KeyError, IndexError, TypeError) as exc:
        raise TranscriptionFailedError(
            "Deepgram response is missing results.channels[0].alternatives[0].words",
            stage=STAGE,
        ) from exc
    if not words:
        raise TranscriptionFailedError("Deepgram returned no words", stage=STAGE)
    return list(words)
