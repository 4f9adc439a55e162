"""OpenAI chat provider, also the base for OpenAI-compatible vendors.

DeepSeek, Grok, Fireworks, Together, Groq and Ollama expose the OpenAI chat
completions API at their own base URL, so they reuse this client with a
different ``base_url``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from ...config import LLMConfig
from ...exceptions import DependencyMissingError, LLMGenerationError
from ..base import build_user_message, log_usage, LLMResult, quiet_sdk_loggers, token_count

logger = logging.getLogger(__name__)

OPENAI_SDK_LOGGERS = (
    "openai",
    "openai._base_client",
    "httpx",
    "httpcore",
    "httpcore.connection",
    "httpcore.http11",
)


class OpenAIProvider:
    """Generate show notes with ``chat.completions.create``."""

    name = "chatgpt"
    display_name = "ChatGPT"
    # Newer OpenAI models reject max_tokens; compatible vendors only know max_tokens
    token_limit_param = "max_completion_tokens"
    placeholder_api_key: Optional[str] = None

    def __init__(self, cfg: LLMConfig):
        """Create the SDK client.

        Raises:
            DependencyMissingError: If the openai package is not installed
        """
        # Lazy import so the package imports without the SDK installed
        try:
            from openai import OpenAI
        except ImportError as exc:
            raise DependencyMissingError(
                f"openai package is required for {self.display_name}",
                stage="llm",
                dependency="openai",
                suggestion="Install it with: pip install openai",
            ) from exc

        self.cfg = cfg
        quiet_sdk_loggers(OPENAI_SDK_LOGGERS)

        client_kwargs: Dict[str, Any] = {"api_key": cfg.api_key or self.placeholder_api_key}
        if cfg.base_url:
            client_kwargs["base_url"] = cfg.base_url
        self.client = OpenAI(**client_kwargs)

    def _create(self, prompt: str, transcript: str) -> Any:
        return self.client.chat.completions.create(
            model=self.cfg.model.model_id,
            messages=[{"role": "user", "content": build_user_message(prompt, transcript)}],
            **{self.token_limit_param: self.cfg.max_output_tokens},
        )

    def generate(self, prompt: str, transcript: str) -> LLMResult:
        model_id = self.cfg.model.model_id
        logger.info("Generating show notes with %s (%s)", self.display_name, model_id)
        try:
            response = self._create(prompt, transcript)
        except LLMGenerationError:
            raise
        except Exception as exc:
            logger.error("%s API error: %s", self.display_name, exc)
            raise LLMGenerationError(
                f"{self.display_name} request failed: {exc}", stage=self.display_name
            ) from exc

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise LLMGenerationError(
                f"{self.display_name} returned an empty response", stage=self.display_name
            )

        usage = getattr(response, "usage", None)
        input_tokens = token_count(getattr(usage, "prompt_tokens", None))
        output_tokens = token_count(getattr(usage, "completion_tokens", None))
        log_usage(self.display_name, self.cfg.model, input_tokens, output_tokens)
        return LLMResult(content, model_id, input_tokens, output_tokens)


class OpenAICompatibleProvider(OpenAIProvider):
    """OpenAI SDK pointed at a vendor's OpenAI-compatible endpoint."""

    token_limit_param = "max_tokens"

    def __init__(self, cfg: LLMConfig):
        if not cfg.base_url:
            raise ValueError(f"{self.display_name} requires a base URL")
        super().__init__(cfg)
