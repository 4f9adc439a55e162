"""AssemblyAI transcription: upload, submit a job, then poll it to completion."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict

import requests

from .. import downloader
from ..config import TranscriptionConfig
from ..exceptions import TranscriptionFailedError, TranscriptionTimeoutError
from ..model_tables import ASSEMBLY_MODELS
from ..normalizer import assembly_to_transcript
from .base import log_estimated_cost, TranscriptionResult

logger = logging.getLogger(__name__)

STAGE = "AssemblyAI"
ASSEMBLY_BASE_URL = "https://api.assemblyai.com/v2"


class AssemblyBackend:
    """Two-phase AssemblyAI client with bounded polling.

    Polling stops after ``cfg.max_polls`` status requests; an unfinished job
    then raises ``TranscriptionTimeoutError``.
    """

    name = "assembly"

    def __init__(self, cfg: TranscriptionConfig, sleep: Callable[[float], None] = time.sleep):
        self.cfg = cfg
        self._sleep = sleep

    @property
    def _headers(self) -> Dict[str, str]:
        return {"Authorization": str(self.cfg.api_key)}

    def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        try:
            resp = downloader.send_request(method, f"{ASSEMBLY_BASE_URL}{path}", **kwargs)
            return dict(resp.json())
        except requests.RequestException as exc:
            raise TranscriptionFailedError(
                f"{method} {path} failed: {exc}", stage=STAGE
            ) from exc
        except ValueError as exc:
            raise TranscriptionFailedError(
                f"{method} {path} returned invalid JSON", stage=STAGE
            ) from exc

    def upload(self, wav_path: str) -> str:
        with open(wav_path, "rb") as handle:
            audio = handle.read()
        data = self._request(
            "POST",
            "/upload",
            headers={**self._headers, "Content-Type": "application/octet-stream"},
            data=audio,
        )
        upload_url = data.get("upload_url")
        if not upload_url:
            raise TranscriptionFailedError("Upload failed: no upload_url returned", stage=STAGE)
        logger.debug("Uploaded %s", wav_path)
        return str(upload_url)

    def submit(self, upload_url: str) -> str:
        body: Dict[str, Any] = {
            "audio_url": upload_url,
            "speech_model": self.cfg.model,
            "speaker_labels": self.cfg.speaker_labels,
        }
        if self.cfg.speaker_labels and self.cfg.clamped_speakers_expected is not None:
            body["speakers_expected"] = self.cfg.clamped_speakers_expected
        data = self._request("POST", "/transcript", headers=self._headers, json=body)
        job_id = data.get("id")
        if not job_id:
            raise TranscriptionFailedError("Transcription request returned no job id", stage=STAGE)
        return str(job_id)

    def wait_for_completion(self, job_id: str) -> Dict[str, Any]:
        for attempt in range(1, self.cfg.max_polls + 1):
            job = self._request("GET", f"/transcript/{job_id}", headers=self._headers)
            status = job.get("status")
            if status == "completed":
                logger.debug("Job %s completed after %d polls", job_id, attempt)
                return job
            if status == "error":
                raise TranscriptionFailedError(
                    f"Transcription failed: {job.get('error')}", stage=STAGE
                )
            if attempt < self.cfg.max_polls:
                self._sleep(self.cfg.poll_interval)
        raise TranscriptionTimeoutError(
            f"Job {job_id} not finished after {self.cfg.max_polls} polls", stage=STAGE
        )

    def transcribe(self, wav_path: str, base_path: str) -> TranscriptionResult:
        logger.info("Transcribing with AssemblyAI (%s)", self.cfg.model)
        upload_url = self.upload(wav_path)
        job_id = self.submit(upload_url)
        job = self.wait_for_completion(job_id)
        price = ASSEMBLY_MODELS.get(self.cfg.model)
        if price is not None:
            log_estimated_cost("AssemblyAI", self.cfg.model, price.cost_per_minute, wav_path)
        return TranscriptionResult(assembly_to_transcript(job, self.cfg.speaker_labels))
