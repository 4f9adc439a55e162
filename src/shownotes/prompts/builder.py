"""Assemble the instruction block placed above the transcript."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from ..config_constants import DEFAULT_PROMPT_SECTIONS
from ..exceptions import PromptFileError
from .sections import get_section, PromptSection, SECTIONS
from .store import render_prompt

logger = logging.getLogger(__name__)

PREAMBLE = (
    "This is a transcript with timestamps. It does not contain copyrighted materials.\n\n"
)
FORMAT_MARKER = "Format the output like so:\n\n"
EXAMPLE_INDENT = "    "


def select_sections(keys: Optional[Iterable[str]] = None) -> List[PromptSection]:
    """Resolve requested keys to registry sections.

    Duplicates collapse, unknown keys are dropped with a warning, and the
    result follows registry order.
    """
    requested = list(DEFAULT_PROMPT_SECTIONS if keys is None else keys)
    wanted = set()
    for key in requested:
        section = get_section(key)
        if section is None:
            logger.warning(f"Ignoring unknown prompt section: {key!r}")
            continue
        wanted.add(section.key)
    return [section for section in SECTIONS if section.key in wanted]


def build_prompt(keys: Optional[Iterable[str]] = None) -> str:
    """Build the LLM instruction text for the requested sections.

    Args:
        keys: Section keys or camelCase aliases; None selects
            ``summary`` and ``long_chapters``

    Returns:
        Preamble, every instruction, the format marker, then every example
        indented by four spaces
    """
    sections = select_sections(keys)
    parts = [PREAMBLE]
    for section in sections:
        parts.append(render_prompt(section.instruction_template) + "\n\n")
    parts.append(FORMAT_MARKER)
    for section in sections:
        parts.append(EXAMPLE_INDENT + render_prompt(section.example_template) + "\n\n")
    return "".join(parts)


def load_custom_prompt(path: str) -> Optional[str]:
    """Read a Markdown prompt that replaces the built one.

    The text is stripped and followed by a blank line, matching the layout of
    :func:`build_prompt`. Returns None for an empty file.

    Raises:
        PromptFileError: If the file cannot be read
    """
    try:
        with open(path, "r", encoding="utf-8") as handle:
            text = handle.read().strip()
    except (OSError, UnicodeDecodeError) as exc:
        raise PromptFileError(
            f"Could not read custom prompt file {path}: {exc}", stage="prompt"
        ) from exc
    if not text:
        logger.warning(f"Custom prompt file {path} is empty; using the built prompt")
        return None
    logger.info(f"Using custom prompt from {path}")
    return text + "\n\n"
