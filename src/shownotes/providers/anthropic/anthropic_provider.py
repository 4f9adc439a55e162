"""Anthropic Claude provider (Messages API)."""

from __future__ import annotations

import logging

from ...config import LLMConfig
from ...exceptions import DependencyMissingError, LLMGenerationError
from ..base import build_user_message, log_usage, LLMResult, quiet_sdk_loggers, token_count

logger = logging.getLogger(__name__)


class AnthropicProvider:
    name = "claude"
    display_name = "Claude"

    def __init__(self, cfg: LLMConfig):
        """Create the Anthropic client.

        Raises:
            DependencyMissingError: If the anthropic package is not installed
        """
        try:
            from anthropic import Anthropic
        except ImportError as exc:
            raise DependencyMissingError(
                "anthropic package is required for Claude",
                stage="llm",
                dependency="anthropic",
                suggestion="Install it with: pip install anthropic",
            ) from exc

        self.cfg = cfg
        quiet_sdk_loggers(("anthropic", "anthropic._base_client", "httpx", "httpcore"))
        self.client = Anthropic(api_key=cfg.api_key)

    def generate(self, prompt: str, transcript: str) -> LLMResult:
        model_id = self.cfg.model.model_id
        logger.info("Generating show notes with Claude (%s)", model_id)
        try:
            response = self.client.messages.create(
                model=model_id,
                max_tokens=self.cfg.max_output_tokens,
                messages=[{"role": "user", "content": build_user_message(prompt, transcript)}],
            )
        except Exception as exc:
            logger.error("Claude API error: %s", exc)
            raise LLMGenerationError(f"Claude request failed: {exc}", stage="Claude") from exc

        # Text blocks only; tool-use blocks carry no text
        text = "".join(
            getattr(block, "text", "") for block in (response.content or [])
            if isinstance(getattr(block, "text", None), str)
        )
        if not text:
            raise LLMGenerationError("Claude returned an empty response", stage="Claude")

        usage = getattr(response, "usage", None)
        input_tokens = token_count(getattr(usage, "input_tokens", None))
        output_tokens = token_count(getattr(usage, "output_tokens", None))
        log_usage(self.display_name, self.cfg.model, input_tokens, output_tokens)
        return LLMResult(text, model_id, input_tokens, output_tokens)
