"""LLM backend protocol and helpers shared by every provider."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Protocol

from ..model_tables import estimate_llm_cost, LLMModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LLMResult:
    """Show notes returned by one LLM call.

    Token counts are None when the provider does not report usage.
    """

    text: str
    model: str
    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None


class LLMBackend(Protocol):
    """Protocol for LLM providers that turn prompt + transcript into show notes."""

    name: str

    def generate(self, prompt: str, transcript: str) -> LLMResult:
        """Generate show notes.

        Raises:
            LLMGenerationError: The provider call failed or returned nothing
        """
        ...


def build_user_message(prompt: str, transcript: str) -> str:
    """Single user turn sent to every provider: instructions, newline, transcript."""
    return f"{prompt}\n{transcript}"


def token_count(value: Any) -> Optional[int]:
    """Coerce a usage field to int; anything non-numeric (absent, mocked) is None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return int(value)


def quiet_sdk_loggers(names: Iterable[str]) -> None:
    """Set SDK loggers to WARNING when the root logger is at DEBUG.

    Keeps our debug logs visible while hiding request/response dumps.
    """
    root_logger = logging.getLogger()
    root_level = root_logger.level if root_logger.level else logging.INFO
    if root_level <= logging.DEBUG:
        for logger_name in names:
            logging.getLogger(logger_name).setLevel(logging.WARNING)


def log_usage(
    provider: str,
    model: LLMModel,
    input_tokens: Optional[int],
    output_tokens: Optional[int],
) -> None:
    if input_tokens is None and output_tokens is None:
        logger.info("%s (%s) did not report token usage", provider, model.model_id)
        return
    cost = estimate_llm_cost(model, input_tokens or 0, output_tokens or 0)
    logger.info(
        "%s (%s) usage: %s input tokens, %s output tokens, estimated cost $%.4f",
        provider,
        model.model_id,
        input_tokens if input_tokens is not None else "?",
        output_tokens if output_tokens is not None else "?",
        cost,
    )
