"""Command-line interface helpers for shownotes."""

from __future__ import annotations

import argparse
import logging
import os
from contextlib import contextmanager
from typing import (
    Any,
    Callable,
    cast,
    Dict,
    Iterator,
    List,
    Optional,
    Sequence,
    Tuple,
    TYPE_CHECKING,
)
from urllib.parse import urlparse

from pydantic import ValidationError

from . import __version__, config, filesystem, progress, workflow
from .exceptions import ShowNotesError
from .prompts import SECTION_KEYS

if TYPE_CHECKING:  # pragma: no cover - typing only
    import tqdm

_LOGGER = logging.getLogger(__name__)

# Progress bar constants
TQDM_NCOLS = 80
TQDM_MIN_INTERVAL = 0.5
TQDM_LABEL_WIDTH = 40

# Shortcut flag -> backend; a bare flag selects the backend's default model
TRANSCRIPTION_FLAGS: Dict[str, config.TranscriptionBackendKind] = {
    "whisper": config.TranscriptionBackendKind.WHISPER,
    "whisperDocker": config.TranscriptionBackendKind.WHISPER_DOCKER,
    "whisperPython": config.TranscriptionBackendKind.WHISPER_PYTHON,
    "whisperDiarization": config.TranscriptionBackendKind.WHISPER_DIARIZATION,
    "deepgram": config.TranscriptionBackendKind.DEEPGRAM,
    "assembly": config.TranscriptionBackendKind.ASSEMBLY,
}
LLM_FLAGS: Dict[str, config.LLMBackendKind] = {kind.value: kind for kind in config.LLMBackendKind}
_SOURCE_FLAGS = tuple(kind.value for kind in config.SourceKind)

_DEFAULT_MODEL = ""


class _TqdmProgress:
    """Item progress rendered as a tqdm bar; the current item and failures go in the postfix."""

    def __init__(self, bar: "tqdm.tqdm") -> None:
        self._bar = bar
        self._failed = 0

    def start_item(self, label: str) -> None:
        self._bar.set_postfix_str(self._postfix(label), refresh=True)

    def finish_item(self, succeeded: bool) -> None:
        if not succeeded:
            self._failed += 1
        self._bar.update(1)

    def _postfix(self, label: str) -> str:
        text = label if len(label) <= TQDM_LABEL_WIDTH else label[: TQDM_LABEL_WIDTH - 3] + "..."
        return f"{text} ({self._failed} failed)" if self._failed else text


@contextmanager
def _tqdm_progress(total: Optional[int], description: str) -> Iterator[_TqdmProgress]:
    """Create a tqdm progress context matching the shared progress API."""
    from tqdm import tqdm

    kwargs: Dict[str, Any] = {"desc": description, "total": total, "unit": "item"}
    if total is None:
        kwargs.update(
            leave=False,
            mininterval=TQDM_MIN_INTERVAL,
            bar_format="{desc}: {elapsed}",
            ncols=TQDM_NCOLS,
        )
    else:
        kwargs.update(leave=True)

    with tqdm(**kwargs) as bar:
        yield _TqdmProgress(bar)


def _validate_url(flag: str, value: Optional[str], errors: List[str]) -> None:
    """Validate an http(s) URL argument.

    Args:
        flag: Flag name used in the error message
        value: URL string (None when the flag was not given)
        errors: List to append validation errors to
    """
    if value is None:
        return
    parsed_obj = urlparse(value.strip())
    if parsed_obj.scheme not in ("http", "https"):
        errors.append(f"--{flag} must be an http or https URL: {value}")
    elif not parsed_obj.netloc:
        errors.append(f"--{flag} must have a valid hostname: {value}")


def _selected_flags(args: argparse.Namespace, flags: Sequence[str]) -> List[str]:
    return [flag for flag in flags if getattr(args, flag, None) is not None]


def validate_args(args: argparse.Namespace) -> None:
    """Validate parsed CLI arguments and raise ValueError when invalid."""
    errors: List[str] = []

    for flag in ("video", "playlist", "channel"):
        _validate_url(flag, getattr(args, flag), errors)
    for url in args.rss or []:
        _validate_url("rss", url, errors)
    for url in args.item or []:
        _validate_url("item", url, errors)

    if args.urls is not None and not os.path.isfile(args.urls):
        errors.append(f"--urls file not found: {args.urls}")
    if args.customPrompt is not None and not os.path.isfile(args.customPrompt):
        errors.append(f"--customPrompt file not found: {args.customPrompt}")

    transcription = _selected_flags(args, list(TRANSCRIPTION_FLAGS))
    if len(transcription) > 1:
        errors.append(
            "Only one transcription backend may be selected, got: " + ", ".join(transcription)
        )
    llms = _selected_flags(args, list(LLM_FLAGS))
    if len(llms) > 1:
        errors.append("Only one LLM backend may be selected, got: " + ", ".join(llms))

    if args.speakersExpected is not None and args.speakersExpected < 1:
        errors.append(f"--speakersExpected must be positive, got: {args.speakersExpected}")

    # Validate output directory
    if args.output_dir:
        try:
            filesystem.validate_and_normalize_output_dir(args.output_dir)
        except ValueError as exc:
            errors.append(str(exc))

    if errors:
        raise ValueError("Invalid input parameters:\n  " + "\n  ".join(errors))


def _add_source_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the mutually exclusive input source arguments to parser."""
    group = parser.add_argument_group("Input Source")
    sources = group.add_mutually_exclusive_group()
    sources.add_argument("--video", default=None, help="Process a single video URL")
    sources.add_argument("--playlist", default=None, help="Process every video in a playlist")
    sources.add_argument(
        "--channel", default=None, help="Process videos of a channel, newest first by default"
    )
    sources.add_argument("--urls", default=None, help="Process URLs listed in a text file")
    sources.add_argument("--file", default=None, help="Process a local audio or video file")
    sources.add_argument(
        "--rss",
        nargs="+",
        default=None,
        metavar="URL",
        help="Process episodes of one or more podcast RSS feeds, in order",
    )


def _add_transcription_arguments(parser: argparse.ArgumentParser) -> None:
    """Add transcription backend shortcut flags to parser.

    Args:
        parser: Argument parser to add arguments to
    """
    group = parser.add_argument_group("Transcription")
    for flag, kind in TRANSCRIPTION_FLAGS.items():
        group.add_argument(
            f"--{flag}",
            nargs="?",
            const=_DEFAULT_MODEL,
            default=None,
            metavar="MODEL",
            help=f"Transcribe with {kind.value} (optional model name)",
        )
    group.add_argument(
        "--speakerLabels",
        action="store_true",
        default=None,
        help="Request speaker labels (Deepgram, AssemblyAI)",
    )
    group.add_argument(
        "--speakersExpected",
        type=int,
        default=None,
        help="Expected number of speakers for diarization (clamped to 1-25)",
    )


def _add_llm_arguments(parser: argparse.ArgumentParser) -> None:
    """Add LLM backend shortcut flags and prompt selection to parser.

    Args:
        parser: Argument parser to add arguments to
    """
    group = parser.add_argument_group("Show Notes Generation")
    for flag in LLM_FLAGS:
        group.add_argument(
            f"--{flag}",
            nargs="?",
            const=_DEFAULT_MODEL,
            default=None,
            metavar="MODEL",
            help=f"Write show notes with {flag} (optional model key or id)",
        )
    group.add_argument(
        "--prompt",
        nargs="+",
        default=None,
        metavar="SECTION",
        help=f"Prompt sections to include ({', '.join(SECTION_KEYS)})",
    )
    group.add_argument(
        "--customPrompt",
        default=None,
        metavar="FILE",
        help="Use the Markdown prompt in FILE instead of the built sections",
    )


def _add_rss_arguments(parser: argparse.ArgumentParser) -> None:
    """Add RSS selection arguments to parser; channels accept order, skip and last."""
    group = parser.add_argument_group("RSS and Channel Selection")
    group.add_argument("--order", choices=config.VALID_FEED_ORDERS, default=None)
    group.add_argument("--skip", type=int, default=None, help="Skip the first N items")
    group.add_argument("--last", type=int, default=None, help="Process the N most recent items")
    group.add_argument(
        "--lastDays", type=int, default=None, help="Process items from the last N days"
    )
    group.add_argument(
        "--date", nargs="+", default=None, metavar="YYYY-MM-DD", help="Process items by date"
    )
    group.add_argument(
        "--item", nargs="+", default=None, metavar="URL", help="Process items by enclosure URL"
    )
    group.add_argument(
        "--info",
        action="store_true",
        default=None,
        help="Write an info JSON file and skip processing",
    )


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    """Add common arguments to parser.

    Args:
        parser: Argument parser to add arguments to
    """
    parser.add_argument("--config", default=None, help="Path to configuration file (JSON or YAML)")
    parser.add_argument(
        "--output-dir",
        default=None,
        help=f"Output directory (default: {config.DEFAULT_OUTPUT_DIR})",
    )
    parser.add_argument(
        "--noCleanUp", action="store_true", default=None, help="Keep intermediate files"
    )
    parser.add_argument("--version", action="store_true", help="Show program version and exit")
    parser.add_argument(
        "--log-file",
        default=None,
        help="Path to log file (logs will be written to both console and file)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        type=str.upper,
        help="Logging level (e.g., DEBUG, INFO)",
    )


def _load_and_merge_config(config_path: str) -> Dict[str, Any]:
    """Load a configuration file and reject keys the Config model does not know.

    Args:
        config_path: Path to configuration file

    Returns:
        Raw configuration values, to be overridden by explicit flags

    Raises:
        ValueError: If the file is invalid or contains unknown keys
    """
    config_data = config.load_config_file(config_path)
    valid_keys = set(config.Config.model_fields)
    valid_keys.update(
        field.alias for field in config.Config.model_fields.values() if field.alias is not None
    )
    unknown_keys = [key for key in config_data if key not in valid_keys]
    if unknown_keys:
        raise ValueError("Unknown config option(s): " + ", ".join(sorted(unknown_keys)))
    return config_data


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments and attach configuration file defaults."""
    parser = argparse.ArgumentParser(
        prog="shownotes",
        description="Generate show notes from videos, playlists, channels, local files and podcast feeds.",
    )

    _add_common_arguments(parser)
    _add_source_arguments(parser)
    _add_transcription_arguments(parser)
    _add_llm_arguments(parser)
    _add_rss_arguments(parser)

    args = parser.parse_args(argv)

    if args.version:
        print(f"shownotes {__version__}")
        raise SystemExit(0)

    args.file_config = _load_and_merge_config(args.config) if args.config else {}
    validate_args(args)
    return args


def _backend_choice(
    args: argparse.Namespace, flags: Dict[str, Any]
) -> Tuple[Optional[Any], Optional[str]]:
    for flag, kind in flags.items():
        value = getattr(args, flag, None)
        if value is not None:
            return kind, value or None
    return None, None


def _build_config(args: argparse.Namespace) -> config.Config:
    """Materialize a Config object from already-validated CLI arguments.

    Values from ``--config`` are the base; any flag given explicitly wins.
    """
    transcription_backend, transcription_model = _backend_choice(args, TRANSCRIPTION_FLAGS)
    llm_backend, llm_model = _backend_choice(args, LLM_FLAGS)
    flags: Dict[str, Any] = {
        "video": args.video,
        "playlist": args.playlist,
        "channel": args.channel,
        "urls": args.urls,
        "file": args.file,
        "rss": args.rss,
        "transcription_backend": transcription_backend,
        "transcription_model": transcription_model,
        "llm_backend": llm_backend,
        "llm_model": llm_model,
        "prompt": args.prompt,
        "custom_prompt": args.customPrompt,
        "order": args.order,
        "skip": args.skip,
        "last": args.last,
        "last_days": args.lastDays,
        "dates": args.date,
        "items": args.item,
        "info": args.info,
        "speaker_labels": args.speakerLabels,
        "speakers_expected": args.speakersExpected,
        "no_cleanup": args.noCleanUp,
        "output_dir": args.output_dir,
        "log_level": args.log_level,
        "log_file": args.log_file,
    }
    payload: Dict[str, Any] = dict(getattr(args, "file_config", {}) or {})
    if any(flags[name] is not None for name in _SOURCE_FLAGS):
        # An explicit source replaces whatever source the config file named
        for name in _SOURCE_FLAGS:
            payload.pop(name, None)
    if llm_backend is not None:
        payload.pop("llm_model", None)
    if transcription_backend is not None:
        payload.pop("transcription_model", None)
    if flags["prompt"] is not None:
        payload.pop("prompt", None)
        payload.pop("prompt_sections", None)
    payload.update({key: value for key, value in flags.items() if value is not None})
    # Pydantic's model_validate returns the correct type, but mypy needs help
    return cast(config.Config, config.Config.model_validate(payload))


def _log_configuration(cfg: config.Config, logger: logging.Logger) -> None:
    """Log all configuration values in a structured format.

    Args:
        cfg: Configuration object
        logger: Logger instance to use
    """
    logger.info("=" * 80)
    logger.info("Configuration")
    logger.info("=" * 80)

    logger.info("Core Settings:")
    logger.info(f"  Source: {cfg.source_kind.value} {cfg.source}")
    logger.info(f"  Output Directory: {cfg.output_dir}")
    logger.info(f"  Log Level: {cfg.log_level}")
    logger.info(f"  Log File: {cfg.log_file or 'console only'}")
    logger.info(f"  Keep Intermediates: {cfg.no_cleanup}")

    logger.info("Transcription Settings:")
    logger.info(f"  Backend: {cfg.transcription_backend.value}")
    transcription_model = cfg.transcription_model or config.default_transcription_model(
        cfg.transcription_backend
    )
    logger.info(f"  Model: {transcription_model}")
    logger.info(f"  Speaker Labels: {cfg.speaker_labels}")
    if cfg.speakers_expected is not None:
        logger.info(f"  Speakers Expected: {cfg.speakers_expected}")

    logger.info("Show Notes Settings:")
    logger.info(f"  Prompt Sections: {', '.join(cfg.prompt_sections) or 'none'}")
    if cfg.custom_prompt:
        logger.info(f"  Custom Prompt: {cfg.custom_prompt}")
    if cfg.llm_backend is None:
        logger.info("  LLM: none (prompt and transcript only)")
    else:
        logger.info(f"  LLM: {cfg.llm_backend.value}")
        logger.info(f"  LLM Model: {cfg.llm_model or 'default'}")

    if cfg.rss or cfg.channel:
        logger.info("Selection:")
        logger.info(f"  Order: {cfg.order or config.config_constants.DEFAULT_FEED_ORDER}")
        logger.info(f"  Skip: {cfg.skip or 0}")
        if cfg.last is not None:
            logger.info(f"  Last: {cfg.last}")
        if cfg.last_days is not None:
            logger.info(f"  Last Days: {cfg.last_days}")
        if cfg.dates:
            logger.info(f"  Dates: {', '.join(cfg.dates)}")
        if cfg.items:
            logger.info(f"  Items: {len(cfg.items)}")
        if cfg.rss:
            logger.info(f"  Feeds: {len(cfg.rss)}")
            logger.info(f"  Timeout: {cfg.feed_timeout}s")
    if cfg.info:
        logger.info("  Info Only: True")

    logger.info("=" * 80)


def main(
    argv: Optional[Sequence[str]] = None,
    *,
    apply_log_level_fn: Optional[Callable[[str, Optional[str]], None]] = None,
    run_pipeline_fn: Optional[Callable[[config.Config], Tuple[int, str]]] = None,
    logger: Optional[logging.Logger] = None,
) -> int:
    """Entry point for the CLI; returns an exit status code."""
    progress.set_progress_factory(_tqdm_progress)
    log = logger or _LOGGER
    if apply_log_level_fn is None:
        apply_log_level_fn = workflow.apply_log_level
    if run_pipeline_fn is None:
        run_pipeline_fn = workflow.run_pipeline

    try:
        args = parse_args(argv)
    except ValueError as exc:
        log.error(f"Error: {exc}")
        return 1

    try:
        cfg = _build_config(args)
    except ValidationError as exc:
        log.error(f"Invalid configuration: {exc}")
        return 1

    apply_log_level_fn(cfg.log_level, cfg.log_file)

    log.info("Starting shownotes")
    _log_configuration(cfg, log)

    try:
        _, summary = run_pipeline_fn(cfg)
    except ShowNotesError as exc:
        log.error(f"Run failed: {exc}")
        return 1
    except Exception as exc:  # pragma: no cover
        log.error(f"Unexpected failure: {exc}")
        return 1

    log.info(summary)
    return 0


if __name__ == "__main__":  # pragma: no cover - script entry
    raise SystemExit(main())
