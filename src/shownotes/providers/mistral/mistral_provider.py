"""Mistral provider (mistralai v1 SDK)."""

from __future__ import annotations

import logging

from ...config import LLMConfig
from ...exceptions import DependencyMissingError, LLMGenerationError
from ..base import build_user_message, log_usage, LLMResult, quiet_sdk_loggers, token_count

logger = logging.getLogger(__name__)


class MistralProvider:
    name = "mistral"
    display_name = "Mistral"

    def __init__(self, cfg: LLMConfig):
        try:
            from mistralai import Mistral
        except ImportError as exc:
            raise DependencyMissingError(
                "mistralai package is required for Mistral",
                stage="llm",
                dependency="mistralai",
                suggestion="Install it with: pip install mistralai",
            ) from exc

        self.cfg = cfg
        quiet_sdk_loggers(("mistralai", "httpx", "httpcore"))
        self.client = Mistral(api_key=cfg.api_key)

    def generate(self, prompt: str, transcript: str) -> LLMResult:
        model_id = self.cfg.model.model_id
        logger.info("Generating show notes with Mistral (%s)", model_id)
        try:
            response = self.client.chat.complete(
                model=model_id,
                messages=[{"role": "user", "content": build_user_message(prompt, transcript)}],
                max_tokens=self.cfg.max_output_tokens,
            )
        except Exception as exc:
            logger.error("Mistral API error: %s", exc)
            raise LLMGenerationError(f"Mistral request failed: {exc}", stage="Mistral") from exc

        choices = getattr(response, "choices", None) or []
        content = choices[0].message.content if choices else None
        if not content or not isinstance(content, str):
            raise LLMGenerationError("Mistral returned an empty response", stage="Mistral")

        usage = getattr(response, "usage", None)
        input_tokens = token_count(getattr(usage, "prompt_tokens", None))
        output_tokens = token_count(getattr(usage, "completion_tokens", None))
        log_usage(self.display_name, self.cfg.model, input_tokens, output_tokens)
        return LLMResult(content, model_id, input_tokens, output_tokens)
