"""Speech-to-text backends.

This package contains:
- Protocol and result type (base.py)
- whisper.cpp CLI and Docker backends (whisper_cpp.py)
- openai-whisper and whisper-diarization backends (whisper_python.py)
- Deepgram and AssemblyAI cloud backends (deepgram.py, assembly.py)
- Factory (factory.py)
"""

from .base import TranscriptionBackend, TranscriptionResult
from .factory import create_transcription_backend

__all__ = ["TranscriptionBackend", "TranscriptionResult", "create_transcription_backend"]
