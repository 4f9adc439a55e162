"""Write the Markdown artifacts of one item and clean up intermediate files."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from .filesystem import ItemPaths, remove_if_exists, write_text
from .metadata import build_front_matter
from .models import MediaItem

logger = logging.getLogger(__name__)

TRANSCRIPT_HEADING = "## Transcript\n\n"


class CleanupManifest:
    """Intermediate files registered by pipeline stages as they create them.

    Paths are kept in registration order without duplicates. Final outputs are
    never registered.
    """

    def __init__(self) -> None:
        self._paths: List[str] = []

    def register(self, path: str) -> None:
        if path not in self._paths:
            self._paths.append(path)

    def extend(self, paths: Iterable[str]) -> None:
        for path in paths:
            self.register(path)

    @property
    def paths(self) -> List[str]:
        return list(self._paths)

    def __len__(self) -> int:
        return len(self._paths)

    def cleanup(self) -> List[str]:
        """Delete every registered file; missing files are not an error.

        Returns:
            Paths that were actually removed
        """
        removed = [path for path in self._paths if remove_if_exists(path)]
        logger.debug("Cleanup removed %d of %d intermediate files", len(removed), len(self._paths))
        return removed


class ArtifactAssembler:
    """Compose the per-item Markdown files under ``paths.output_dir``."""

    def __init__(self, paths: ItemPaths, manifest: Optional[CleanupManifest] = None):
        self.paths = paths
        self.manifest = manifest if manifest is not None else CleanupManifest()

    def write_front_matter(self, item: MediaItem) -> str:
        """Write ``{stem}.md`` and return the front matter text."""
        front_matter = build_front_matter(item)
        write_text(self.paths.front_matter, front_matter)
        self.manifest.register(self.paths.front_matter)
        return front_matter

    def write_transcript(self, text: str) -> str:
        """Write the canonical transcript to ``{stem}.txt``."""
        write_text(self.paths.txt, text)
        self.manifest.register(self.paths.txt)
        return self.paths.txt

    def assemble_with_notes(
        self, front_matter: str, llm_name: str, notes: str, transcript: str
    ) -> str:
        """Write the final show notes file via the LLM temp file.

        Returns:
            Path of ``{stem}-{llm}-shownotes.md``
        """
        temp_path = self.paths.llm_temp(llm_name)
        write_text(temp_path, notes)
        self.manifest.register(temp_path)

        output_path = self.paths.shownotes_output(llm_name)
        write_text(output_path, f"{front_matter}\n{notes}\n\n{TRANSCRIPT_HEADING}{transcript}")
        remove_if_exists(temp_path)
        logger.info("Show notes written to %s", output_path)
        return output_path

    def assemble_prompt_only(self, front_matter: str, prompt: str, transcript: str) -> str:
        """Write ``{stem}-prompt.md`` for pasting into any chat LLM by hand."""
        output_path = self.paths.prompt_output
        write_text(output_path, f"{front_matter}\n{prompt}{TRANSCRIPT_HEADING}{transcript}")
        logger.info("Prompt and transcript written to %s", output_path)
        return output_path
