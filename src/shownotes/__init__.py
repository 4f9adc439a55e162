# This project is intended for personal, non-commercial use only.
# Respect the terms of service of the sites and APIs you process content from.

"""Shownotes - Turn videos, playlists, local media and podcast feeds into show notes.

Each item is resolved to metadata, converted to 16 kHz mono WAV, transcribed
by one of several speech-to-text backends, normalized to a timestamped
transcript and, optionally, sent to an LLM together with a prompt assembled
from the selected sections. Everything lands as Markdown in ``content/``.

Programmatic API Example:
    >>> import shownotes
    >>>
    >>> cfg = shownotes.Config(
    ...     rss="https://example.com/feed.xml",
    ...     last=2,
    ...     llm_backend="claude",
    ...     prompt=["titles", "summary", "short_chapters"],
    ... )
    >>> count, summary = shownotes.run_pipeline(cfg)
    >>> print(summary)

CLI Usage:
    $ shownotes --video https://www.youtube.com/watch?v=abc123 --chatgpt
    $ shownotes --rss https://example.com/feed.xml --last 2 --deepgram
    $ python -m shownotes --config shownotes.yaml
"""

from __future__ import annotations

__version__ = "0.3.0"

from .config import Config, load_config_file
from .workflow import run_pipeline

__all__ = [
    "Config",
    "load_config_file",
    "run_pipeline",
    "__version__",
]
