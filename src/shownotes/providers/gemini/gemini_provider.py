"""Google Gemini provider.

The only LLM backend that retries: up to three attempts with exponential
backoff (2 s, then 4 s) before the item fails.
"""

from __future__ import annotations

import logging
from typing import Any

from ...config import LLMConfig
from ...exceptions import DependencyMissingError, LLMGenerationError
from ...utils.retry import retry_with_exponential_backoff
from ..base import build_user_message, log_usage, LLMResult, quiet_sdk_loggers, token_count

logger = logging.getLogger(__name__)

GEMINI_MAX_RETRIES = 2
GEMINI_INITIAL_RETRY_DELAY = 2.0


class GeminiProvider:
    name = "gemini"
    display_name = "Gemini"

    def __init__(self, cfg: LLMConfig):
        """Configure the google-generativeai SDK.

        Raises:
            DependencyMissingError: If google-generativeai is not installed
        """
        try:
            import google.generativeai as genai
        except ImportError as exc:
            raise DependencyMissingError(
                "google-generativeai package is required for Gemini",
                stage="llm",
                dependency="google-generativeai",
                suggestion="Install it with: pip install google-generativeai",
            ) from exc

        self.cfg = cfg
        quiet_sdk_loggers(("google", "google.auth", "urllib3", "grpc"))
        genai.configure(api_key=cfg.api_key)
        self.model = genai.GenerativeModel(cfg.model.model_id)

    def _generate_content(self, message: str) -> Any:
        response = self.model.generate_content(
            message,
            generation_config={"max_output_tokens": self.cfg.max_output_tokens},
        )
        # Accessing .text raises when the candidate was blocked; retry covers it too
        if not response.text:
            raise LLMGenerationError("Gemini returned an empty response", stage="Gemini")
        return response

    def generate(self, prompt: str, transcript: str) -> LLMResult:
        model_id = self.cfg.model.model_id
        logger.info("Generating show notes with Gemini (%s)", model_id)
        message = build_user_message(prompt, transcript)
        try:
            response = retry_with_exponential_backoff(
                lambda: self._generate_content(message),
                max_retries=GEMINI_MAX_RETRIES,
                initial_delay=GEMINI_INITIAL_RETRY_DELAY,
                label="Gemini generate_content",
            )
        except LLMGenerationError:
            raise
        except Exception as exc:
            raise LLMGenerationError(f"Gemini request failed: {exc}", stage="Gemini") from exc

        usage = getattr(response, "usage_metadata", None)
        input_tokens = token_count(getattr(usage, "prompt_token_count", None))
        output_tokens = token_count(getattr(usage, "candidates_token_count", None))
        log_usage(self.display_name, self.cfg.model, input_tokens, output_tokens)
        return LLMResult(response.text, model_id, input_tokens, output_tokens)
