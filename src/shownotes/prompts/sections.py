"""Registry of prompt sections, in the order they appear in a built prompt."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class PromptSection:
    """One selectable block of LLM instructions plus its worked example.

    Attributes:
        key: Canonical snake_case key (``long_chapters``)
        alias: camelCase spelling also accepted on input (``longChapters``)
    """

    key: str
    alias: str

    @property
    def instruction_template(self) -> str:
        return f"{self.key}/instruction"

    @property
    def example_template(self) -> str:
        return f"{self.key}/example"


SECTIONS: Tuple[PromptSection, ...] = (
    PromptSection("titles", "titles"),
    PromptSection("summary", "summary"),
    PromptSection("short_summary", "shortSummary"),
    PromptSection("long_summary", "longSummary"),
    PromptSection("bullet_points", "bulletPoints"),
    PromptSection("quotes", "quotes"),
    PromptSection("chapter_titles_and_quotes", "chapterTitlesAndQuotes"),
    # Social posts
    PromptSection("x", "x"),
    PromptSection("facebook", "facebook"),
    PromptSection("linkedin", "linkedin"),
    PromptSection("chapter_titles", "chapterTitles"),
    PromptSection("short_chapters", "shortChapters"),
    PromptSection("medium_chapters", "mediumChapters"),
    PromptSection("long_chapters", "longChapters"),
    PromptSection("takeaways", "takeaways"),
    PromptSection("questions", "questions"),
    PromptSection("faq", "faq"),
    PromptSection("blog", "blog"),
    # Songs
    PromptSection("rap_song", "rapSong"),
    PromptSection("rock_song", "rockSong"),
    PromptSection("country_song", "countrySong"),
)

_LOOKUP: Dict[str, PromptSection] = {}
for _section in SECTIONS:
    _LOOKUP[_section.key] = _section
    _LOOKUP[_section.alias] = _section


def get_section(name: str) -> Optional[PromptSection]:
    """Return the section for a key or camelCase alias, or None if unknown."""
    return _LOOKUP.get(name.strip())


SECTION_KEYS: Tuple[str, ...] = tuple(section.key for section in SECTIONS)
