"""Cohere provider (chat endpoint)."""

from __future__ import annotations

import logging

from ...config import LLMConfig
from ...exceptions import DependencyMissingError, LLMGenerationError
from ..base import build_user_message, log_usage, LLMResult, quiet_sdk_loggers, token_count

logger = logging.getLogger(__name__)


class CohereProvider:
    name = "cohere"
    display_name = "Cohere"

    def __init__(self, cfg: LLMConfig):
        try:
            import cohere
        except ImportError as exc:
            raise DependencyMissingError(
                "cohere package is required for Cohere",
                stage="llm",
                dependency="cohere",
                suggestion="Install it with: pip install cohere",
            ) from exc

        self.cfg = cfg
        quiet_sdk_loggers(("cohere", "httpx", "httpcore"))
        self.client = cohere.Client(api_key=cfg.api_key)

    def generate(self, prompt: str, transcript: str) -> LLMResult:
        model_id = self.cfg.model.model_id
        logger.info("Generating show notes with Cohere (%s)", model_id)
        try:
            response = self.client.chat(
                model=model_id,
                message=build_user_message(prompt, transcript),
                max_tokens=self.cfg.max_output_tokens,
            )
        except Exception as exc:
            logger.error("Cohere API error: %s", exc)
            raise LLMGenerationError(f"Cohere request failed: {exc}", stage="Cohere") from exc

        text = getattr(response, "text", None)
        if not text:
            raise LLMGenerationError("Cohere returned an empty response", stage="Cohere")

        tokens = getattr(getattr(response, "meta", None), "tokens", None)
        input_tokens = token_count(getattr(tokens, "input_tokens", None))
        output_tokens = token_count(getattr(tokens, "output_tokens", None))
        log_usage(self.display_name, self.cfg.model, input_tokens, output_tokens)
        return LLMResult(text, model_id, input_tokens, output_tokens)
