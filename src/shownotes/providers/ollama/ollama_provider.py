"""Ollama provider for fully local show-notes generation.

Ollama serves an OpenAI-compatible API under ``/v1``, so generation reuses the
OpenAI SDK. Before the first call the native ``/api/tags`` endpoint is checked
with httpx to confirm the server is up and the model has been pulled.
"""

from __future__ import annotations

import logging
from typing import List

try:
    import httpx
except ImportError:
    httpx = None  # type: ignore

from ...config import LLMConfig
from ...exceptions import DependencyMissingError, LLMGenerationError
from ..base import LLMResult
from ..openai.openai_provider import OpenAICompatibleProvider

logger = logging.getLogger(__name__)

OLLAMA_HEALTH_TIMEOUT_SECONDS = 10.0

OLLAMA_NOT_RUNNING_ERROR = "Ollama server is not running at {url}. Start it with: ollama serve"
MODEL_NOT_FOUND_ERROR = (
    "Model '{model}' is not available in Ollama. Install it with: ollama pull {model}"
)


class OllamaProvider(OpenAICompatibleProvider):
    name = "ollama"
    display_name = "Ollama"
    # The server ignores the key but the SDK refuses to start without one
    placeholder_api_key = "ollama"

    def __init__(self, cfg: LLMConfig):
        if httpx is None:
            raise DependencyMissingError(
                "httpx package is required for Ollama health checks",
                stage="llm",
                dependency="httpx",
                suggestion="Install it with: pip install httpx",
            )
        super().__init__(cfg)
        self._validated = False

    @property
    def server_url(self) -> str:
        base_url = self.cfg.base_url or ""
        return base_url[: -len("/v1")] if base_url.endswith("/v1") else base_url

    def _available_models(self) -> List[str]:
        tags_url = f"{self.server_url}/api/tags"
        try:
            response = httpx.get(tags_url, timeout=OLLAMA_HEALTH_TIMEOUT_SECONDS)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise LLMGenerationError(
                OLLAMA_NOT_RUNNING_ERROR.format(url=self.server_url), stage="Ollama"
            ) from exc
        return [m.get("name", "") for m in data.get("models", [])]

    def validate(self) -> None:
        """Check the server and the model once per provider instance.

        Raises:
            LLMGenerationError: If the server is unreachable or the model is not pulled
        """
        if self._validated:
            return
        model_id = self.cfg.model.model_id
        available = self._available_models()
        # Untagged names are listed by /api/tags with the implicit ":latest" tag
        if model_id not in available and f"{model_id}:latest" not in available:
            logger.error(
                "Model '%s' not found in Ollama. Available models: %s",
                model_id,
                ", ".join(sorted(available)) if available else "(none)",
            )
            raise LLMGenerationError(MODEL_NOT_FOUND_ERROR.format(model=model_id), stage="Ollama")
        logger.debug("Ollama model %s is available", model_id)
        self._validated = True

    def generate(self, prompt: str, transcript: str) -> LLMResult:
        self.validate()
        return super().generate(prompt, transcript)
