"""Pipeline orchestration: per-item state machine, batch drivers, run entry point."""

from .orchestration import apply_log_level, run_pipeline
from .pipeline import PipelineOrchestrator
from .types import BatchSummary, ItemResult, PipelineState

__all__ = [
    "BatchSummary",
    "ItemResult",
    "PipelineOrchestrator",
    "PipelineState",
    "apply_log_level",
    "run_pipeline",
]
