"""Filesystem utilities for shownotes."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_data_dir

from . import config_constants

logger = logging.getLogger(__name__)

_PLATFORMDIR_APP_NAMES = ("shownotes", "show-notes")

_UNSAFE_TITLE_CHARS = re.compile(r"[^\w\s-]", re.ASCII)
_SEPARATOR_RUNS = re.compile(r"[\s_]+")
_HYPHEN_RUNS = re.compile(r"-+")


def _platformdirs_safe_roots() -> set[Path]:
    """Return resolved platformdirs locations considered safe for outputs."""
    roots: set[Path] = set()
    for app_name in _PLATFORMDIR_APP_NAMES:
        location = user_data_dir(app_name)
        if not location:
            continue
        try:
            roots.add(Path(location).expanduser().resolve())
        except (OSError, RuntimeError):
            continue
    return roots


def sanitize_title(title: str) -> str:
    """Turn a title into the slug used for artifact filenames.

    Characters outside letters, digits, underscore, whitespace and hyphen are
    removed; whitespace and underscores collapse to single hyphens; the result
    is lowercased and truncated.

    Args:
        title: Raw title or base filename

    Returns:
        Slug of at most ``MAX_TITLE_LENGTH`` characters
    """
    slug = _UNSAFE_TITLE_CHARS.sub("", title).strip()
    slug = _SEPARATOR_RUNS.sub("-", slug)
    slug = _HYPHEN_RUNS.sub("-", slug)
    return slug.lower()[: config_constants.MAX_TITLE_LENGTH]


def write_text(path: str, text: str) -> None:
    """Write UTF-8 text to disk, creating parent directories as needed."""
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as handle:
        handle.write(text)


def remove_if_exists(path: str) -> bool:
    """Delete a file, treating a missing file as success.

    Returns:
        True if a file was removed, False if it did not exist
    """
    try:
        os.remove(path)
    except FileNotFoundError:
        logger.debug("Nothing to remove at %s", path)
        return False
    logger.debug("Removed %s", path)
    return True


def validate_and_normalize_output_dir(path: str) -> str:
    """Validate an output directory path and return an absolute, normalized version."""
    if not path or not path.strip():
        raise ValueError("Output directory path cannot be empty")

    path_obj = Path(path).expanduser()
    try:
        resolved = path_obj.resolve()
    except (OSError, RuntimeError) as exc:
        raise ValueError(f"Invalid output directory path: {path} ({exc})")

    safe_roots = {Path.cwd().resolve(), Path.home().resolve(), *_platformdirs_safe_roots()}
    if not any(resolved == root or resolved.is_relative_to(root) for root in safe_roots):
        logger.warning(
            f"Output directory {resolved} is outside recommended locations (home or app data)."
        )
    return str(resolved)


@dataclass(frozen=True)
class ItemPaths:
    """Every on-disk location derived from one item's filename stem.

    Attributes:
        output_dir: Directory holding all artifacts (``content`` by default)
        stem: Deterministic filename stem of the item
    """

    output_dir: str
    stem: str

    @property
    def base(self) -> str:
        """Path without extension; external tools append their own suffixes."""
        return os.path.join(self.output_dir, self.stem)

    @property
    def wav(self) -> str:
        return f"{self.base}.wav"

    @property
    def txt(self) -> str:
        return f"{self.base}.txt"

    @property
    def lrc(self) -> str:
        return f"{self.base}.lrc"

    @property
    def srt(self) -> str:
        return f"{self.base}.srt"

    @property
    def front_matter(self) -> str:
        return f"{self.base}.md"

    @property
    def prompt_output(self) -> str:
        return f"{self.base}-prompt.md"

    def llm_temp(self, llm_name: str) -> str:
        return f"{self.base}-{llm_name}-temp.md"

    def shownotes_output(self, llm_name: str) -> str:
        return f"{self.base}-{llm_name}-shownotes.md"


__all__ = [
    "ItemPaths",
    "remove_if_exists",
    "sanitize_title",
    "validate_and_normalize_output_dir",
    "write_text",
]
