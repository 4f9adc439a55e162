"""Type definitions for the per-item pipeline and batch drivers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class PipelineState(str, Enum):
    PENDING = "pending"
    METADATA_RESOLVED = "metadata_resolved"
    AUDIO_ACQUIRED = "audio_acquired"
    TRANSCRIBED = "transcribed"
    NORMALIZED = "normalized"
    PROMPT_BUILT = "prompt_built"
    LLM_GENERATED = "llm_generated"
    ASSEMBLED = "assembled"
    CLEANED_UP = "cleaned_up"
    FAILED = "failed"


@dataclass
class ItemResult:
    """Outcome of running one item through the pipeline.

    Attributes:
        label: Item identifier used in logs (URL, title or path)
        state: Last state reached; CLEANED_UP on success, FAILED otherwise
        stage: Stage that failed, if any
        output_path: Final Markdown file, if one was written
        error: ``ItemFailedError`` wrapping the stage exception, if any
        history: Every state entered, in order
    """

    label: str
    state: PipelineState = PipelineState.PENDING
    stage: Optional[str] = None
    output_path: Optional[str] = None
    error: Optional[Exception] = None
    history: List[PipelineState] = field(default_factory=lambda: [PipelineState.PENDING])

    @property
    def succeeded(self) -> bool:
        return self.state is PipelineState.CLEANED_UP

    def advance(self, state: PipelineState) -> None:
        self.state = state
        self.history.append(state)

    def fail(self, stage: str, error: Exception) -> None:
        self.stage = stage
        self.error = error
        self.advance(PipelineState.FAILED)


@dataclass
class BatchSummary:
    """Totals for one run. Item failures are counted here, never raised."""

    processed: int = 0
    failed: int = 0
    outputs: List[str] = field(default_factory=list)
    failures: List[Tuple[str, str]] = field(default_factory=list)

    def record(self, result: ItemResult) -> None:
        if result.succeeded:
            self.processed += 1
            if result.output_path:
                self.outputs.append(result.output_path)
        else:
            self.record_failure(result.label, result.error)

    def record_failure(self, label: str, error: Optional[Exception]) -> None:
        """Count a failure that never produced an ``ItemResult`` (e.g. a feed that would not load)."""
        self.failed += 1
        self.failures.append((label, str(error)))

    def merge(self, other: "BatchSummary") -> None:
        self.processed += other.processed
        self.failed += other.failed
        self.outputs.extend(other.outputs)
        self.failures.extend(other.failures)

    def describe(self) -> str:
        total = self.processed + self.failed
        summary = f"Processed {self.processed}/{total} items"
        if self.failed:
            summary += f" ({self.failed} failed)"
        return summary
