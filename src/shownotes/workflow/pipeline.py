"""Per-item pipeline: metadata, audio, transcription, prompt, LLM, assembly, cleanup.

The orchestrator resolves its transcription and LLM backends once. Each
``process_*`` call walks one item through the states in
:class:`~shownotes.workflow.types.PipelineState`. Run-scoped errors (missing
tools, missing credentials) propagate unchanged; anything else raised by a
stage becomes an ``ItemFailedError`` on the returned :class:`ItemResult`.
"""

from __future__ import annotations

import logging
import os
from typing import Callable, Optional

from ..artifacts import ArtifactAssembler, CleanupManifest
from ..audio import acquire_file, acquire_url
from ..config import Config, LLMConfig, TranscriptionConfig
from ..exceptions import ItemFailedError, RunScopedError
from ..filesystem import ItemPaths, validate_and_normalize_output_dir
from ..metadata import resolve_file, resolve_video
from ..models import FeedItem, MediaItem
from ..prompts import build_prompt, hash_text, load_custom_prompt
from ..providers import create_llm_backend, LLMBackend
from ..transcription import create_transcription_backend, TranscriptionBackend
from .types import ItemResult, PipelineState

logger = logging.getLogger(__name__)

Resolver = Callable[[], MediaItem]
Acquirer = Callable[[MediaItem, str], str]


def _is_source(item: MediaItem, path: str) -> bool:
    """True when ``path`` is the user's own input file, which cleanup must keep."""
    if item.source_path is None:
        return False
    return os.path.abspath(item.source_path) == os.path.abspath(path)


class PipelineOrchestrator:
    """Run items through the fixed show-notes pipeline, one at a time.

    Args:
        cfg: Validated run configuration
        transcription_backend: Overrides the backend selected by ``cfg``
        llm_backend: Overrides the LLM selected by ``cfg``

    Raises:
        CredentialMissingError: If the selected backends lack API keys
        PromptFileError: If the custom prompt file cannot be read
        DependencyMissingError: If an LLM SDK is not installed
    """

    def __init__(
        self,
        cfg: Config,
        transcription_backend: Optional[TranscriptionBackend] = None,
        llm_backend: Optional[LLMBackend] = None,
    ):
        self.cfg = cfg
        self.output_dir = validate_and_normalize_output_dir(cfg.output_dir)
        self.transcription_config = TranscriptionConfig.from_config(cfg)
        self.llm_config = LLMConfig.from_config(cfg)
        self.custom_prompt = load_custom_prompt(cfg.custom_prompt) if cfg.custom_prompt else None
        self.transcription_backend = transcription_backend or create_transcription_backend(
            self.transcription_config
        )
        if llm_backend is None and self.llm_config is not None:
            llm_backend = create_llm_backend(self.llm_config)
        self.llm_backend = llm_backend
        logger.debug(
            "Pipeline ready: transcription=%s llm=%s",
            self.transcription_backend.name,
            self.llm_backend.name if self.llm_backend else "none",
        )

    def process_video(self, url: str) -> ItemResult:
        return self._process(
            url, lambda: resolve_video(url), lambda _item, wav: acquire_url(url, wav)
        )

    def process_file(self, path: str) -> ItemResult:
        return self._process(
            path, lambda: resolve_file(path), lambda _item, wav: acquire_file(path, wav)
        )

    def process_feed_item(self, feed_item: FeedItem) -> ItemResult:
        return self._process(
            feed_item.title or feed_item.show_link,
            feed_item.to_media_item,
            lambda item, wav: acquire_url(item.show_link, wav),
        )

    def _process(self, label: str, resolve: Resolver, acquire: Acquirer) -> ItemResult:
        result = ItemResult(label=label)
        manifest = CleanupManifest()
        stage = "metadata"
        try:
            item = resolve()
            result.label = item.label or label
            result.advance(PipelineState.METADATA_RESOLVED)
            paths = ItemPaths(self.output_dir, item.stem)
            assembler = ArtifactAssembler(paths, manifest)
            front_matter = assembler.write_front_matter(item)

            stage = "audio"
            acquire(item, paths.wav)
            if not _is_source(item, paths.wav):
                manifest.register(paths.wav)
            result.advance(PipelineState.AUDIO_ACQUIRED)

            stage = "transcription"
            transcription = self.transcription_backend.transcribe(paths.wav, paths.base)
            manifest.extend(transcription.produced_files)
            result.advance(PipelineState.TRANSCRIBED)

            stage = "normalization"
            transcript = transcription.transcript.render()
            assembler.write_transcript(transcript)
            result.advance(PipelineState.NORMALIZED)

            stage = "prompt"
            prompt = self.custom_prompt or build_prompt(self.cfg.prompt_sections)
            logger.debug("Prompt sha256=%s", hash_text(prompt))
            result.advance(PipelineState.PROMPT_BUILT)

            if self.llm_backend is not None:
                stage = "llm"
                generated = self.llm_backend.generate(prompt, transcript)
                result.advance(PipelineState.LLM_GENERATED)
                stage = "assembly"
                result.output_path = assembler.assemble_with_notes(
                    front_matter, self.llm_backend.name, generated.text, transcript
                )
            else:
                stage = "assembly"
                result.output_path = assembler.assemble_prompt_only(
                    front_matter, prompt, transcript
                )
            result.advance(PipelineState.ASSEMBLED)

            stage = "cleanup"
            if self.cfg.no_cleanup:
                logger.debug("Keeping %d intermediate files (no_cleanup)", len(manifest))
            else:
                manifest.cleanup()
            result.advance(PipelineState.CLEANED_UP)
        except RunScopedError:
            raise
        except Exception as exc:
            error = ItemFailedError(stage, result.label, exc)
            error.__cause__ = exc
            result.fail(stage, error)
            logger.error("[%s] %s failed: %s", stage, result.label, exc)
            if manifest.paths:
                logger.info("Intermediate files kept for inspection: %s", ", ".join(manifest.paths))
        return result
