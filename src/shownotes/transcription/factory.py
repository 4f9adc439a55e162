"""Factory for transcription backends (closed dispatch over the backend enum)."""

from __future__ import annotations

from typing import Callable, Dict

from ..config import TranscriptionBackendKind, TranscriptionConfig
from .assembly import AssemblyBackend
from .base import TranscriptionBackend
from .deepgram import DeepgramBackend
from .whisper_cpp import WhisperCppBackend, WhisperDockerBackend
from .whisper_python import WhisperDiarizationBackend, WhisperPythonBackend

_BACKENDS: Dict[TranscriptionBackendKind, Callable[[TranscriptionConfig], TranscriptionBackend]] = {
    TranscriptionBackendKind.WHISPER: WhisperCppBackend,
    TranscriptionBackendKind.WHISPER_DOCKER: WhisperDockerBackend,
    TranscriptionBackendKind.WHISPER_PYTHON: WhisperPythonBackend,
    TranscriptionBackendKind.WHISPER_DIARIZATION: WhisperDiarizationBackend,
    TranscriptionBackendKind.DEEPGRAM: DeepgramBackend,
    TranscriptionBackendKind.ASSEMBLY: AssemblyBackend,
}


def create_transcription_backend(cfg: TranscriptionConfig) -> TranscriptionBackend:
    """Create the backend selected by ``cfg.backend``.

    Example:
        >>> from shownotes.config import TranscriptionConfig
        >>> backend = create_transcription_backend(
        ...     TranscriptionConfig(backend="whisper", model="base")
        ... )
        >>> backend.name
        'whisper'
    """
    return _BACKENDS[cfg.backend](cfg)
