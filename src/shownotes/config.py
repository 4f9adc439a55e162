from __future__ import annotations

import json
import os
import re
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from . import config_constants, model_tables
from .exceptions import CredentialMissingError, InvalidSelectionError


# SKIP .env loading in test environments - tests should use Config objects and
# environment variables directly, never rely on .env files
def _is_test_environment() -> bool:
    """Check if we're running in a test environment."""
    import sys

    if "pytest" in sys.modules or "PYTEST_CURRENT_TEST" in os.environ:
        return True
    if os.environ.get("TESTING", "").lower() in ("1", "true", "yes"):
        return True
    return False


if not _is_test_environment():
    try:
        load_dotenv(override=False)
    except (PermissionError, OSError):
        # If loading fails, continue without .env file
        pass

DEFAULT_LOG_LEVEL = config_constants.DEFAULT_LOG_LEVEL
DEFAULT_OUTPUT_DIR = config_constants.DEFAULT_OUTPUT_DIR
DEFAULT_USER_AGENT = config_constants.DEFAULT_USER_AGENT
DEFAULT_FEED_TIMEOUT_SECONDS = config_constants.DEFAULT_FEED_TIMEOUT_SECONDS
DEFAULT_PROMPT_SECTIONS = config_constants.DEFAULT_PROMPT_SECTIONS
VALID_LOG_LEVELS = config_constants.VALID_LOG_LEVELS
VALID_FEED_ORDERS = config_constants.VALID_FEED_ORDERS

_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class SourceKind(str, Enum):
    VIDEO = "video"
    PLAYLIST = "playlist"
    CHANNEL = "channel"
    URLS = "urls"
    FILE = "file"
    RSS = "rss"


class TranscriptionBackendKind(str, Enum):
    WHISPER = "whisper"
    WHISPER_DOCKER = "whisper_docker"
    WHISPER_PYTHON = "whisper_python"
    WHISPER_DIARIZATION = "whisper_diarization"
    DEEPGRAM = "deepgram"
    ASSEMBLY = "assembly"


class LLMBackendKind(str, Enum):
    CHATGPT = "chatgpt"
    CLAUDE = "claude"
    GEMINI = "gemini"
    COHERE = "cohere"
    MISTRAL = "mistral"
    OLLAMA = "ollama"
    DEEPSEEK = "deepseek"
    GROK = "grok"
    FIREWORKS = "fireworks"
    TOGETHER = "together"
    GROQ = "groq"


# Config field -> environment variable
API_KEY_ENV_VARS: Dict[str, str] = {
    "openai_api_key": "OPENAI_API_KEY",
    "anthropic_api_key": "ANTHROPIC_API_KEY",
    "gemini_api_key": "GEMINI_API_KEY",
    "cohere_api_key": "COHERE_API_KEY",
    "mistral_api_key": "MISTRAL_API_KEY",
    "deepseek_api_key": "DEEPSEEK_API_KEY",
    "grok_api_key": "GROK_API_KEY",
    "fireworks_api_key": "FIREWORKS_API_KEY",
    "together_api_key": "TOGETHER_API_KEY",
    "groq_api_key": "GROQ_API_KEY",
    "deepgram_api_key": "DEEPGRAM_API_KEY",
    "assembly_api_key": "ASSEMBLY_API_KEY",
}

TRANSCRIPTION_KEY_FIELDS: Dict[TranscriptionBackendKind, str] = {
    TranscriptionBackendKind.DEEPGRAM: "deepgram_api_key",
    TranscriptionBackendKind.ASSEMBLY: "assembly_api_key",
}

LLM_KEY_FIELDS: Dict[LLMBackendKind, str] = {
    LLMBackendKind.CHATGPT: "openai_api_key",
    LLMBackendKind.CLAUDE: "anthropic_api_key",
    LLMBackendKind.GEMINI: "gemini_api_key",
    LLMBackendKind.COHERE: "cohere_api_key",
    LLMBackendKind.MISTRAL: "mistral_api_key",
    LLMBackendKind.DEEPSEEK: "deepseek_api_key",
    LLMBackendKind.GROK: "grok_api_key",
    LLMBackendKind.FIREWORKS: "fireworks_api_key",
    LLMBackendKind.TOGETHER: "together_api_key",
    LLMBackendKind.GROQ: "groq_api_key",
}

# Backend -> (model table, default friendly key)
LLM_MODEL_TABLES: Dict[LLMBackendKind, tuple] = {
    LLMBackendKind.CHATGPT: (model_tables.OPENAI_MODELS, "GPT_4o_MINI"),
    LLMBackendKind.CLAUDE: (model_tables.CLAUDE_MODELS, "CLAUDE_3_HAIKU"),
    LLMBackendKind.GEMINI: (model_tables.GEMINI_MODELS, "GEMINI_1_5_FLASH"),
    LLMBackendKind.COHERE: (model_tables.COHERE_MODELS, "COMMAND_R"),
    LLMBackendKind.MISTRAL: (model_tables.MISTRAL_MODELS, "MISTRAL_NEMO"),
    LLMBackendKind.OLLAMA: (model_tables.OLLAMA_MODELS, "QWEN_2_5_0B"),
    LLMBackendKind.DEEPSEEK: (model_tables.DEEPSEEK_MODELS, "DEEPSEEK_CHAT"),
    LLMBackendKind.GROK: (model_tables.GROK_MODELS, "GROK_2_LATEST"),
    LLMBackendKind.FIREWORKS: (model_tables.FIREWORKS_MODELS, "LLAMA_3_2_3B"),
    LLMBackendKind.TOGETHER: (model_tables.TOGETHER_MODELS, "LLAMA_3_2_3B"),
    LLMBackendKind.GROQ: (model_tables.GROQ_MODELS, "LLAMA_3_2_1B_PREVIEW"),
}

# OpenAI-compatible endpoints
LLM_BASE_URLS: Dict[LLMBackendKind, str] = {
    LLMBackendKind.DEEPSEEK: "https://api.deepseek.com",
    LLMBackendKind.GROK: "https://api.x.ai/v1",
    LLMBackendKind.FIREWORKS: "https://api.fireworks.ai/inference/v1",
    LLMBackendKind.TOGETHER: "https://api.together.xyz/v1",
    LLMBackendKind.GROQ: "https://api.groq.com/openai/v1",
}

# Model names accepted by the openai-whisper CLI (also used by whisper-diarization)
PYTHON_WHISPER_MODELS = (
    "tiny",
    "tiny.en",
    "base",
    "base.en",
    "small",
    "small.en",
    "medium",
    "medium.en",
    "large",
    "large-v1",
    "large-v2",
    "large-v3",
    "large-v3-turbo",
    "turbo",
)


def default_transcription_model(backend: TranscriptionBackendKind) -> str:
    if backend is TranscriptionBackendKind.DEEPGRAM:
        return config_constants.DEFAULT_DEEPGRAM_MODEL
    if backend is TranscriptionBackendKind.ASSEMBLY:
        return config_constants.DEFAULT_ASSEMBLY_MODEL
    return config_constants.DEFAULT_WHISPER_MODEL


def valid_transcription_models(backend: TranscriptionBackendKind) -> tuple:
    if backend in (TranscriptionBackendKind.WHISPER, TranscriptionBackendKind.WHISPER_DOCKER):
        return tuple(model_tables.WHISPER_MODELS)
    if backend is TranscriptionBackendKind.DEEPGRAM:
        return tuple(model_tables.DEEPGRAM_MODELS)
    if backend is TranscriptionBackendKind.ASSEMBLY:
        return tuple(model_tables.ASSEMBLY_MODELS)
    return PYTHON_WHISPER_MODELS


def selection_errors(
    order: Optional[str],
    skip: Optional[int],
    last: Optional[int],
    last_days: Optional[int],
    dates: List[str],
    items: List[str],
) -> List[str]:
    """Collect every problem with a combination of RSS selection parameters.

    Returns:
        List of human-readable problems (empty when the combination is valid)
    """
    errors: List[str] = []
    if order is not None and order not in VALID_FEED_ORDERS:
        errors.append(f"order must be one of {VALID_FEED_ORDERS}, got: {order}")
    if skip is not None and skip < 0:
        errors.append(f"skip must be a non-negative integer, got: {skip}")
    if last is not None and last < 1:
        errors.append(f"last must be a positive integer, got: {last}")
    if last_days is not None and last_days < 1:
        errors.append(f"last_days must be a positive integer, got: {last_days}")
    for value in dates:
        if not _DATE_PATTERN.match(value):
            errors.append(f"dates must use YYYY-MM-DD, got: {value}")

    if items and any(
        v is not None for v in (order, skip, last, last_days)
    ) or (items and dates):
        errors.append("items cannot be combined with order, skip, last, last_days or dates")
    if last is not None and any(v is not None for v in (order, skip, last_days)) or (
        last is not None and dates
    ):
        errors.append("last cannot be combined with order, skip, last_days or dates")
    if last_days is not None and (order is not None or skip is not None or dates):
        errors.append("last_days cannot be combined with order, skip or dates")
    if dates and (order is not None or skip is not None):
        errors.append("dates cannot be combined with order or skip")
    return errors


class Config(BaseModel):
    """Configuration model for one shownotes run.

    Exactly one source is set per run. Selection parameters only apply to RSS
    and channel sources (channels accept order, skip and last). API keys
    default to their environment variables (loaded from ``.env`` by
    python-dotenv outside of tests). The model is immutable after creation;
    stages receive narrowed views built from it (``TranscriptionConfig``,
    ``LLMConfig``, ``FeedSelection``).

    Attributes:
        video: Single video URL.
        playlist: Playlist URL, expanded into video URLs.
        channel: Channel URL, expanded into its videos by upload time.
        urls: Path to a text file with one URL per line.
        file: Local audio or video file.
        rss: One or more podcast RSS feed URLs, processed in order.
        transcription_backend: Which speech-to-text backend to run.
        transcription_model: Backend-specific model name (backend default if None).
        llm_backend: Optional LLM used to write the show notes.
        llm_model: Friendly model key or raw model id for the LLM backend.
        prompt_sections: Prompt section keys, in output order.
        custom_prompt: Markdown file used verbatim instead of the built prompt.
        order: RSS or channel processing order ("newest" or "oldest").
        skip: Number of RSS items or channel videos to skip after ordering.
        last: Process only the N most recent RSS items or channel videos.
        last_days: Process RSS items published in the last N days.
        dates: Process RSS items published on these dates (YYYY-MM-DD).
        items: Process only RSS items with these enclosure URLs.
        info: Write an info JSON sidecar and stop before processing.
        speaker_labels: Ask the transcription backend for speaker labels.
        speakers_expected: Expected speaker count for diarization.
        no_cleanup: Keep intermediate files.
        output_dir: Directory for all artifacts.

    Example:
        >>> from shownotes import Config
        >>> cfg = Config(file="episode.mp3", llm_backend="chatgpt")
        >>> cfg.source_kind
        <SourceKind.FILE: 'file'>
    """

    video: Optional[str] = Field(default=None, alias="video")
    playlist: Optional[str] = Field(default=None, alias="playlist")
    channel: Optional[str] = Field(default=None, alias="channel")
    urls: Optional[str] = Field(default=None, alias="urls")
    file: Optional[str] = Field(default=None, alias="file")
    rss: List[str] = Field(default_factory=list, alias="rss")

    transcription_backend: TranscriptionBackendKind = Field(
        default=TranscriptionBackendKind.WHISPER, alias="transcription_backend"
    )
    transcription_model: Optional[str] = Field(default=None, alias="transcription_model")
    llm_backend: Optional[LLMBackendKind] = Field(default=None, alias="llm_backend")
    llm_model: Optional[str] = Field(default=None, alias="llm_model")
    prompt_sections: List[str] = Field(
        default_factory=lambda: list(DEFAULT_PROMPT_SECTIONS),
        alias="prompt",
        description="Prompt section keys (titles, summary, short_chapters, ...)",
    )
    custom_prompt: Optional[str] = Field(default=None, alias="custom_prompt")

    order: Optional[Literal["newest", "oldest"]] = Field(default=None, alias="order")
    skip: Optional[int] = Field(default=None, alias="skip")
    last: Optional[int] = Field(default=None, alias="last")
    last_days: Optional[int] = Field(default=None, alias="last_days")
    dates: List[str] = Field(default_factory=list, alias="dates")
    items: List[str] = Field(default_factory=list, alias="items")
    info: bool = Field(default=False, alias="info")

    speaker_labels: bool = Field(default=False, alias="speaker_labels")
    speakers_expected: Optional[int] = Field(default=None, alias="speakers_expected")
    no_cleanup: bool = Field(default=False, alias="no_cleanup")

    output_dir: str = Field(default=DEFAULT_OUTPUT_DIR, alias="output_dir")
    log_level: str = Field(default=DEFAULT_LOG_LEVEL, alias="log_level")
    log_file: Optional[str] = Field(default=None, alias="log_file")
    user_agent: str = Field(default=DEFAULT_USER_AGENT, alias="user_agent")
    feed_timeout: float = Field(default=DEFAULT_FEED_TIMEOUT_SECONDS, alias="feed_timeout", gt=0)

    assembly_poll_interval: float = Field(
        default=config_constants.DEFAULT_ASSEMBLY_POLL_INTERVAL_SECONDS,
        alias="assembly_poll_interval",
        ge=0,
    )
    assembly_max_polls: int = Field(
        default=config_constants.DEFAULT_ASSEMBLY_MAX_POLLS, alias="assembly_max_polls", ge=1
    )
    whisper_cpp_dir: str = Field(
        default=config_constants.DEFAULT_WHISPER_CPP_DIR, alias="whisper_cpp_dir"
    )
    whisper_docker_container: str = Field(
        default=config_constants.DEFAULT_WHISPER_DOCKER_CONTAINER, alias="whisper_docker_container"
    )
    whisper_diarization_dir: str = Field(
        default=config_constants.DEFAULT_WHISPER_DIARIZATION_DIR, alias="whisper_diarization_dir"
    )

    # API keys (prefer environment variables or .env file)
    openai_api_key: Optional[str] = Field(default=None, alias="openai_api_key")
    anthropic_api_key: Optional[str] = Field(default=None, alias="anthropic_api_key")
    gemini_api_key: Optional[str] = Field(default=None, alias="gemini_api_key")
    cohere_api_key: Optional[str] = Field(default=None, alias="cohere_api_key")
    mistral_api_key: Optional[str] = Field(default=None, alias="mistral_api_key")
    deepseek_api_key: Optional[str] = Field(default=None, alias="deepseek_api_key")
    grok_api_key: Optional[str] = Field(default=None, alias="grok_api_key")
    fireworks_api_key: Optional[str] = Field(default=None, alias="fireworks_api_key")
    together_api_key: Optional[str] = Field(default=None, alias="together_api_key")
    groq_api_key: Optional[str] = Field(default=None, alias="groq_api_key")
    deepgram_api_key: Optional[str] = Field(default=None, alias="deepgram_api_key")
    assembly_api_key: Optional[str] = Field(default=None, alias="assembly_api_key")

    ollama_host: str = Field(default=config_constants.DEFAULT_OLLAMA_HOST, alias="ollama_host")
    ollama_port: int = Field(default=config_constants.DEFAULT_OLLAMA_PORT, alias="ollama_port")

    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _preprocess_config_data(cls, data: Any) -> Any:
        """Fill API keys, log level and Ollama endpoint from the environment."""
        if not isinstance(data, dict):
            return data
        data = dict(data)

        env_log_level = os.getenv("LOG_LEVEL")
        if env_log_level and "log_level" not in data:
            env_value = env_log_level.strip().upper()
            if env_value in VALID_LOG_LEVELS:
                data["log_level"] = env_value

        for field_name, env_var in API_KEY_ENV_VARS.items():
            if data.get(field_name) is None:
                env_key = os.getenv(env_var)
                if env_key and env_key.strip():
                    data[field_name] = env_key.strip()

        if data.get("ollama_host") is None and os.getenv("OLLAMA_HOST"):
            data["ollama_host"] = os.environ["OLLAMA_HOST"].strip()
        if data.get("ollama_port") is None and os.getenv("OLLAMA_PORT"):
            data["ollama_port"] = os.environ["OLLAMA_PORT"].strip()
        return data

    @field_validator(*API_KEY_ENV_VARS.keys(), mode="before")
    @classmethod
    def _strip_api_key(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        return str(value).strip() or None

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: Any) -> str:
        level = str(value or DEFAULT_LOG_LEVEL).strip().upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {VALID_LOG_LEVELS}, got: {value}")
        return level

    @field_validator("prompt_sections", "dates", "items", mode="before")
    @classmethod
    def _coerce_string_list(cls, value: Any) -> List[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return [str(v).strip() for v in value if str(v).strip()]

    @field_validator("rss", mode="before")
    @classmethod
    def _coerce_feed_urls(cls, value: Any) -> List[str]:
        # Feed URLs may contain commas, so a single string is one feed
        if value is None:
            return []
        if isinstance(value, str):
            return [value.strip()] if value.strip() else []
        return [str(v).strip() for v in value if str(v).strip()]

    @model_validator(mode="after")
    def _validate_single_source(self) -> "Config":
        """Exactly one of video, playlist, channel, urls, file and rss must be set."""
        chosen = [kind.value for kind in SourceKind if getattr(self, kind.value)]
        if len(chosen) != 1:
            raise ValueError(
                "Exactly one source is required (video, playlist, channel, urls, file or rss), "
                f"got: {', '.join(chosen) or 'none'}"
            )
        return self

    @model_validator(mode="after")
    def _validate_feed_selection(self) -> "Config":
        rss_only = {
            "last_days": self.last_days,
            "dates": self.dates or None,
            "items": self.items or None,
        }
        ordering = {"order": self.order, "skip": self.skip, "last": self.last}
        if self.channel:
            used = [name for name, value in rss_only.items() if value is not None]
            if used:
                raise ValueError(
                    f"Channel sources only accept order, skip and last: {', '.join(used)}"
                )
        elif not self.rss:
            used = [
                name for name, value in {**ordering, **rss_only}.items() if value is not None
            ]
            if used:
                raise ValueError(
                    f"Selection options require an rss or channel source: {', '.join(used)}"
                )
            return self
        errors = selection_errors(
            self.order, self.skip, self.last, self.last_days, self.dates, self.items
        )
        if errors:
            raise ValueError("Invalid selection: " + "; ".join(errors))
        return self

    @model_validator(mode="after")
    def _validate_transcription_model(self) -> "Config":
        if self.transcription_model is None:
            return self
        valid = valid_transcription_models(self.transcription_backend)
        if self.transcription_model not in valid:
            raise ValueError(
                f"transcription_model for {self.transcription_backend.value} must be one of "
                f"{valid}, got: {self.transcription_model}"
            )
        return self

    @property
    def source_kind(self) -> SourceKind:
        for kind in SourceKind:
            if getattr(self, kind.value):
                return kind
        raise ValueError("No source configured")  # pragma: no cover - guarded by validator

    @property
    def source(self) -> str:
        value = getattr(self, self.source_kind.value)
        if isinstance(value, list):
            return ", ".join(value)
        return str(value)


class TranscriptionConfig(BaseModel):
    """Settings the transcription stage needs, and nothing else.

    Raises:
        CredentialMissingError: From ``from_config`` when a cloud backend has no API key
    """

    backend: TranscriptionBackendKind
    model: str
    output_dir: str = DEFAULT_OUTPUT_DIR
    speaker_labels: bool = False
    speakers_expected: Optional[int] = None
    api_key: Optional[str] = None
    whisper_cpp_dir: str = config_constants.DEFAULT_WHISPER_CPP_DIR
    whisper_docker_container: str = config_constants.DEFAULT_WHISPER_DOCKER_CONTAINER
    whisper_diarization_dir: str = config_constants.DEFAULT_WHISPER_DIARIZATION_DIR
    poll_interval: float = config_constants.DEFAULT_ASSEMBLY_POLL_INTERVAL_SECONDS
    max_polls: int = config_constants.DEFAULT_ASSEMBLY_MAX_POLLS

    model_config = ConfigDict(extra="forbid", frozen=True)

    @model_validator(mode="after")
    def _validate_model_and_key(self) -> "TranscriptionConfig":
        valid = valid_transcription_models(self.backend)
        if self.model not in valid:
            raise ValueError(
                f"model for {self.backend.value} must be one of {valid}, got: {self.model}"
            )
        key_field = TRANSCRIPTION_KEY_FIELDS.get(self.backend)
        if key_field and not self.api_key:
            raise CredentialMissingError(
                f"API key required for {self.backend.value} transcription",
                stage="transcription",
                env_var=API_KEY_ENV_VARS[key_field],
            )
        return self

    @property
    def clamped_speakers_expected(self) -> Optional[int]:
        if self.speakers_expected is None:
            return None
        return max(
            config_constants.MIN_SPEAKERS_EXPECTED,
            min(config_constants.MAX_SPEAKERS_EXPECTED, self.speakers_expected),
        )

    @classmethod
    def from_config(cls, cfg: Config) -> "TranscriptionConfig":
        backend = cfg.transcription_backend
        key_field = TRANSCRIPTION_KEY_FIELDS.get(backend)
        return cls(
            backend=backend,
            model=cfg.transcription_model or default_transcription_model(backend),
            output_dir=cfg.output_dir,
            speaker_labels=cfg.speaker_labels,
            speakers_expected=cfg.speakers_expected,
            api_key=getattr(cfg, key_field) if key_field else None,
            whisper_cpp_dir=cfg.whisper_cpp_dir,
            whisper_docker_container=cfg.whisper_docker_container,
            whisper_diarization_dir=cfg.whisper_diarization_dir,
            poll_interval=cfg.assembly_poll_interval,
            max_polls=cfg.assembly_max_polls,
        )


class LLMConfig(BaseModel):
    """Settings the LLM stage needs: backend, resolved model, credentials, endpoint."""

    backend: LLMBackendKind
    model: model_tables.LLMModel
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    max_output_tokens: int = config_constants.LLM_MAX_OUTPUT_TOKENS

    model_config = ConfigDict(extra="forbid", frozen=True)

    @model_validator(mode="after")
    def _validate_api_key(self) -> "LLMConfig":
        key_field = LLM_KEY_FIELDS.get(self.backend)
        if key_field and not self.api_key:
            raise CredentialMissingError(
                f"API key required for {self.backend.value}",
                stage="llm",
                env_var=API_KEY_ENV_VARS[key_field],
            )
        return self

    @property
    def name(self) -> str:
        """Backend name used in artifact filenames."""
        return self.backend.value

    @classmethod
    def from_config(cls, cfg: Config) -> Optional["LLMConfig"]:
        """Build the LLM view of ``cfg``, or None when no LLM is selected."""
        if cfg.llm_backend is None:
            return None
        backend = cfg.llm_backend
        table, default_key = LLM_MODEL_TABLES[backend]
        model = model_tables.resolve_llm_model(table, cfg.llm_model or default_key)
        key_field = LLM_KEY_FIELDS.get(backend)
        if backend is LLMBackendKind.OLLAMA:
            base_url = f"http://{cfg.ollama_host}:{cfg.ollama_port}/v1"
        else:
            base_url = LLM_BASE_URLS.get(backend)
        return cls(
            backend=backend,
            model=model,
            api_key=getattr(cfg, key_field) if key_field else None,
            base_url=base_url,
        )


class FeedSelection(BaseModel):
    """RSS selection policy, validated on construction.

    Raises:
        InvalidSelectionError: When parameters conflict or are out of range
    """

    order: Optional[Literal["newest", "oldest"]] = None
    skip: Optional[int] = None
    last: Optional[int] = None
    last_days: Optional[int] = None
    dates: List[str] = Field(default_factory=list)
    items: List[str] = Field(default_factory=list)
    info: bool = False

    model_config = ConfigDict(extra="forbid", frozen=True)

    @model_validator(mode="after")
    def _validate_combination(self) -> "FeedSelection":
        errors = selection_errors(
            self.order, self.skip, self.last, self.last_days, self.dates, self.items
        )
        if errors:
            raise InvalidSelectionError("; ".join(errors), stage="rss")
        return self

    @classmethod
    def from_config(cls, cfg: Config) -> "FeedSelection":
        return cls(
            order=cfg.order,
            skip=cfg.skip,
            last=cfg.last,
            last_days=cfg.last_days,
            dates=list(cfg.dates),
            items=list(cfg.items),
            info=cfg.info,
        )


def load_config_file(
    path: str,
) -> Dict[str, Any]:
    """Load configuration from a JSON or YAML file.

    The file format is auto-detected from the extension (`.json`, `.yaml` or
    `.yml`). The returned dictionary can be merged with CLI arguments or
    unpacked into `Config`.

    Args:
        path: Path to configuration file. Supports tilde expansion.

    Returns:
        Dict[str, Any]: Configuration values keyed by `Config` field name or alias.

    Raises:
        ValueError: If the path is empty or missing, the format is unsupported,
            or the content does not parse to a mapping.

    Example:
        >>> config_dict = load_config_file("shownotes.yaml")
        >>> cfg = Config(**config_dict)

    Note:
        Configuration files should not contain API keys; use environment
        variables or a `.env` file instead.
    """
    if not path:
        raise ValueError("Config path cannot be empty")

    cfg_path = Path(path).expanduser()
    try:
        resolved = cfg_path.resolve()
    except (OSError, RuntimeError) as exc:
        raise ValueError(f"Invalid config path: {path} ({exc})") from exc

    if not resolved.exists():
        raise ValueError(f"Config file not found: {resolved}")

    suffix = resolved.suffix.lower()
    try:
        text = resolved.read_text(encoding="utf-8")
    except OSError as exc:
        raise ValueError(f"Failed to read config file {resolved}: {exc}") from exc

    if suffix == ".json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON config file {resolved}: {exc}") from exc
    elif suffix in (".yaml", ".yml"):
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML config file {resolved}: {exc}") from exc
    else:
        raise ValueError(f"Unsupported config file type: {resolved.suffix}")

    if not isinstance(data, dict):
        raise ValueError("Config file must contain a mapping/object at the top level")

    return data
