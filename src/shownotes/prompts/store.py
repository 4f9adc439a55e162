"""Jinja2 templates for the prompt sections.

Each section owns a directory holding ``instruction.j2`` and ``example.j2``.
The packaged templates live next to this module; ``PROMPT_DIR`` or
:func:`set_prompt_dir` points the loader at another tree with the same layout.
"""

from __future__ import annotations

import os
from functools import lru_cache
from hashlib import sha256
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateNotFound

_PACKAGED_DIR = Path(__file__).resolve().parent / "templates"
_prompt_dir = _PACKAGED_DIR


class PromptNotFoundError(FileNotFoundError):
    """A section template is missing from the prompt directory."""


def set_prompt_dir(path: str | Path) -> None:
    global _prompt_dir
    _prompt_dir = Path(path).resolve()
    clear_cache()


def get_prompt_dir() -> Path:
    """Directory templates are read from; ``PROMPT_DIR`` wins over :func:`set_prompt_dir`."""
    override = os.getenv("PROMPT_DIR")
    return Path(override).resolve() if override else _prompt_dir


@lru_cache(maxsize=8)
def _environment(root: str) -> Environment:
    return Environment(
        loader=FileSystemLoader(root, encoding="utf-8"),
        undefined=StrictUndefined,
        autoescape=False,  # nosec B701 - renders plain-text prompts, never HTML
    )


def render_prompt(name: str, **params: Any) -> str:
    """Render ``<section>/<part>`` (``.j2`` optional), stripped of surrounding whitespace.

    Raises:
        PromptNotFoundError: If the template file does not exist
    """
    filename = name if name.endswith(".j2") else f"{name}.j2"
    root = get_prompt_dir()
    try:
        template = _environment(str(root)).get_template(filename)
    except TemplateNotFound as exc:
        raise PromptNotFoundError(f"Prompt template {filename!r} not found in {root}") from exc
    return template.render(**params).strip()


def hash_text(text: str) -> str:
    """SHA-256 hex digest, logged with each built prompt so runs can be compared."""
    return sha256(text.encode("utf-8")).hexdigest()


def clear_cache() -> None:
    _environment.cache_clear()
