"""whisper.cpp backends: the local CLI build and the Docker container."""

from __future__ import annotations

import logging
import os
import posixpath
from typing import List

from ..config import TranscriptionConfig
from ..config_constants import DEFAULT_WHISPER_DOCKER_SERVICE
from ..exceptions import DependencyMissingError, TranscriptionFailedError
from ..model_tables import WHISPER_MODELS
from ..normalizer import lrc_to_transcript
from ..utils.process import check_command, ensure_tool, run_command
from .base import TranscriptionResult

logger = logging.getLogger(__name__)

STAGE = "transcription"
CONTAINER_APP_DIR = "/app"


def _download_name(model_file: str) -> str:
    """Name the download script expects: ``ggml-large-v3-turbo.bin`` -> ``large-v3-turbo``."""
    return model_file[len("ggml-") : -len(".bin")]


def _read_lrc(base_path: str) -> TranscriptionResult:
    lrc_path = f"{base_path}.lrc"
    try:
        with open(lrc_path, "r", encoding="utf-8") as handle:
            text = handle.read()
    except FileNotFoundError as exc:
        raise TranscriptionFailedError(
            f"whisper.cpp did not produce {lrc_path}", stage=STAGE
        ) from exc
    return TranscriptionResult(lrc_to_transcript(text), [lrc_path])


class WhisperCppBackend:
    """Run a locally built ``whisper-cli`` and parse its ``.lrc`` output."""

    name = "whisper"

    def __init__(self, cfg: TranscriptionConfig):
        self.cfg = cfg
        self.model_file = WHISPER_MODELS[cfg.model]
        self.model_path = os.path.join(cfg.whisper_cpp_dir, "models", self.model_file)
        self.binary = os.path.join(cfg.whisper_cpp_dir, "build", "bin", "whisper-cli")

    def _ensure_model(self) -> None:
        if os.path.exists(self.model_path):
            return
        logger.info("Model %s not found, downloading...", self.model_file)
        ensure_tool("bash", stage=STAGE)
        run_command(
            [
                "bash",
                os.path.join(self.cfg.whisper_cpp_dir, "models", "download-ggml-model.sh"),
                _download_name(self.model_file),
            ],
            error_cls=TranscriptionFailedError,
            stage=STAGE,
            description="whisper.cpp model download",
        )

    def transcribe(self, wav_path: str, base_path: str) -> TranscriptionResult:
        if not os.path.exists(self.binary):
            raise DependencyMissingError(
                f"whisper-cli not found at {self.binary}",
                stage=STAGE,
                dependency="whisper.cpp",
                suggestion="Build whisper.cpp with cmake or set whisper_cpp_dir",
            )
        self._ensure_model()
        logger.info("Transcribing with whisper.cpp (%s)", self.cfg.model)
        run_command(
            [self.binary, "-m", self.model_path, "-f", wav_path, "-of", base_path, "--output-lrc"],
            error_cls=TranscriptionFailedError,
            stage=STAGE,
            description="whisper-cli",
        )
        return _read_lrc(base_path)


class WhisperDockerBackend:
    """Run whisper.cpp inside the compose-managed container.

    The working directory is mounted at ``/app`` in the container, so host
    paths below it map under ``/app`` and paths outside it cannot be reached.
    """

    name = "whisper_docker"

    def __init__(self, cfg: TranscriptionConfig):
        self.cfg = cfg
        self.container = cfg.whisper_docker_container
        self.model_file = WHISPER_MODELS[cfg.model]
        self.container_model_path = posixpath.join(CONTAINER_APP_DIR, "models", self.model_file)

    @staticmethod
    def _container_path(host_path: str) -> str:
        """Map a host path to the container, which mounts the working directory at /app.

        Raises:
            TranscriptionFailedError: If the path lies outside the working directory
        """
        try:
            relative = os.path.relpath(host_path)
        except ValueError:
            # Different drive on Windows
            relative = os.pardir
        if relative == os.pardir or relative.startswith(os.pardir + os.sep):
            raise TranscriptionFailedError(
                f"{host_path} is outside the working directory mounted at {CONTAINER_APP_DIR}; "
                "use an output directory inside it for whisper_docker",
                stage=STAGE,
            )
        return posixpath.join(CONTAINER_APP_DIR, relative.replace(os.sep, "/"))

    def _docker_exec(self, *args: str) -> List[str]:
        return ["docker", "exec", self.container, *args]

    def _ensure_container(self) -> None:
        running = run_command(
            ["docker", "ps", "--filter", f"name={self.container}", "--format", "{{.Names}}"],
            error_cls=TranscriptionFailedError,
            stage=STAGE,
            description="docker ps",
        )
        if self.container in running.split():
            return
        logger.info("Starting %s container", self.container)
        run_command(
            ["docker", "compose", "up", "-d", DEFAULT_WHISPER_DOCKER_SERVICE],
            error_cls=TranscriptionFailedError,
            stage=STAGE,
            description="docker compose up",
        )

    def _ensure_model(self) -> None:
        if check_command(self._docker_exec("test", "-f", self.container_model_path)):
            return
        logger.info("Model %s not found in container, downloading...", self.model_file)
        run_command(
            self._docker_exec(
                posixpath.join(CONTAINER_APP_DIR, "models", "download-ggml-model.sh"),
                _download_name(self.model_file),
            ),
            error_cls=TranscriptionFailedError,
            stage=STAGE,
            description="whisper.cpp model download (docker)",
        )

    def transcribe(self, wav_path: str, base_path: str) -> TranscriptionResult:
        ensure_tool("docker", stage=STAGE)
        container_wav = self._container_path(wav_path)
        container_base = self._container_path(base_path)
        self._ensure_container()
        self._ensure_model()
        logger.info("Transcribing with whisper.cpp in %s (%s)", self.container, self.cfg.model)
        run_command(
            self._docker_exec(
                posixpath.join(CONTAINER_APP_DIR, "main"),
                "-m",
                self.container_model_path,
                "-f",
                container_wav,
                "-of",
                container_base,
                "--output-lrc",
            ),
            error_cls=TranscriptionFailedError,
            stage=STAGE,
            description="whisper.cpp (docker)",
        )
        return _read_lrc(base_path)
