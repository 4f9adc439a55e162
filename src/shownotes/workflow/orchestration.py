"""Run entry point and logging setup."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Dict, Optional, Tuple

from ..config import Config, SourceKind
from . import batch
from .types import BatchSummary

logger = logging.getLogger(__name__)

_DRIVERS: Dict[SourceKind, Callable[[Config], BatchSummary]] = {
    SourceKind.VIDEO: batch.run_video,
    SourceKind.PLAYLIST: batch.run_playlist,
    SourceKind.CHANNEL: batch.run_channel,
    SourceKind.URLS: batch.run_urls,
    SourceKind.FILE: batch.run_file,
    SourceKind.RSS: batch.run_rss,
}


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Third-party loggers that drown out pipeline output at DEBUG
_NOISY_LOGGERS = ("urllib3", "httpx", "httpcore", "openai", "anthropic", "google", "grpc")


def _has_file_handler(root: logging.Logger, path: str) -> bool:
    target = os.path.abspath(path)
    return any(
        isinstance(handler, logging.FileHandler) and handler.baseFilename == target
        for handler in root.handlers
    )


def apply_log_level(level: str, log_file: Optional[str] = None) -> None:
    """Configure the root logger for a run.

    Installs a console handler when the root logger has none, re-levels the
    existing handlers otherwise, and appends to ``log_file`` when given. The
    file handler is only added once per path.

    Raises:
        ValueError: If ``level`` is not a logging level name
        OSError: If the log file cannot be opened
    """
    numeric_level = logging.getLevelName(str(level).upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")

    root = logging.getLogger()
    root.setLevel(numeric_level)
    formatter = logging.Formatter(LOG_FORMAT)
    if not root.handlers:
        root.addHandler(logging.StreamHandler())
    for handler in root.handlers:
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)

    if log_file and not _has_file_handler(root, log_file):
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
        logger.info("Logging to file: %s", log_file)

    if numeric_level <= logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def run_pipeline(cfg: Config) -> Tuple[int, str]:
    """Execute the show-notes pipeline for the configured source.

    This is the entry point for programmatic use. It dispatches on the source
    kind (video, playlist, channel, urls file, local file or RSS feeds) and processes
    items strictly one at a time.

    Args:
        cfg: Validated configuration. Exactly one source is set.

    Returns:
        Tuple[int, str]: Number of items processed successfully and a
        human-readable summary of the run.

    Raises:
        RunScopedError: Missing tools or credentials, or invalid selection
        ItemFailedError: A single video or file failed
        FeedFetchError: A lone RSS feed could not be fetched or parsed
        NoMatchingItemsError: A lone feed, the channel or the selection is empty

    Example:
        >>> from shownotes import Config, run_pipeline
        >>> cfg = Config(file="episode.mp3", prompt=["titles", "summary"])
        >>> count, summary = run_pipeline(cfg)
        >>> summary
        'Processed 1/1 items'
    """
    kind = cfg.source_kind
    logger.info("Processing %s: %s", kind.value, cfg.source)
    summary = _DRIVERS[kind](cfg)
    if cfg.info:
        return 0, "Info written; no items processed"
    return summary.processed, summary.describe()
