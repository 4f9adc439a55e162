"""Prompt sections and the builder that turns them into LLM instructions.

This package contains:
- Prompt store (store.py): loading and caching of Jinja2 section templates
- Section registry (sections.py): known sections and their camelCase aliases
- Builder (builder.py): the instruction block written above the transcript, or
  a custom prompt file used in its place
"""

from .builder import build_prompt, load_custom_prompt, select_sections
from .sections import get_section, PromptSection, SECTION_KEYS, SECTIONS
from .store import clear_cache, hash_text, PromptNotFoundError, render_prompt, set_prompt_dir

__all__ = [
    "PromptNotFoundError",
    "PromptSection",
    "SECTIONS",
    "SECTION_KEYS",
    "build_prompt",
    "clear_cache",
    "get_section",
    "hash_text",
    "load_custom_prompt",
    "render_prompt",
    "select_sections",
    "set_prompt_dir",
]
