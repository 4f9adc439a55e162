"""Configuration constants for shownotes.

All constants are re-exported from config.py for convenience.
"""

# General defaults
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_OUTPUT_DIR = "content"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/119.0 Safari/537.36"
)
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Feed fetching
DEFAULT_FEED_TIMEOUT_SECONDS = 10
FEED_ACCEPT_HEADER = "application/rss+xml"

# RSS selection
VALID_FEED_ORDERS = ("newest", "oldest")
DEFAULT_FEED_ORDER = "newest"
DATE_FORMAT = "%Y-%m-%d"

# Transcription defaults
DEFAULT_TRANSCRIPTION_BACKEND = "whisper"
DEFAULT_WHISPER_MODEL = "base"
DEFAULT_WHISPER_CPP_DIR = "whisper.cpp"
DEFAULT_WHISPER_DOCKER_CONTAINER = "autoshow-whisper-1"
DEFAULT_WHISPER_DOCKER_SERVICE = "whisper"
DEFAULT_WHISPER_DIARIZATION_DIR = "whisper-diarization"
DEFAULT_DEEPGRAM_MODEL = "nova-2"
DEFAULT_ASSEMBLY_MODEL = "best"
DEFAULT_ASSEMBLY_POLL_INTERVAL_SECONDS = 3.0
DEFAULT_ASSEMBLY_MAX_POLLS = 1200
MIN_SPEAKERS_EXPECTED = 1
MAX_SPEAKERS_EXPECTED = 25

# Audio
AUDIO_SAMPLE_RATE = 16000
AUDIO_CHANNELS = 1
SUPPORTED_MEDIA_EXTENSIONS = (
    "wav",
    "mp3",
    "m4a",
    "aac",
    "ogg",
    "flac",
    "mp4",
    "mkv",
    "avi",
    "mov",
    "webm",
)

# Prompt defaults
DEFAULT_PROMPT_SECTIONS = ("summary", "long_chapters")

# LLM defaults
LLM_MAX_OUTPUT_TOKENS = 4000
DEFAULT_OLLAMA_HOST = "localhost"
DEFAULT_OLLAMA_PORT = 11434

# Title sanitization
MAX_TITLE_LENGTH = 200
