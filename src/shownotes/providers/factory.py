"""Factory for LLM backends (closed dispatch over the backend enum)."""

from __future__ import annotations

from typing import Callable, Dict

from ..config import LLMBackendKind, LLMConfig
from .anthropic.anthropic_provider import AnthropicProvider
from .base import LLMBackend
from .cohere.cohere_provider import CohereProvider
from .deepseek.deepseek_provider import DeepSeekProvider
from .fireworks.fireworks_provider import FireworksProvider
from .gemini.gemini_provider import GeminiProvider
from .grok.grok_provider import GrokProvider
from .groq.groq_provider import GroqProvider
from .mistral.mistral_provider import MistralProvider
from .ollama.ollama_provider import OllamaProvider
from .openai.openai_provider import OpenAIProvider
from .together.together_provider import TogetherProvider

_PROVIDERS: Dict[LLMBackendKind, Callable[[LLMConfig], LLMBackend]] = {
    LLMBackendKind.CHATGPT: OpenAIProvider,
    LLMBackendKind.CLAUDE: AnthropicProvider,
    LLMBackendKind.GEMINI: GeminiProvider,
    LLMBackendKind.COHERE: CohereProvider,
    LLMBackendKind.MISTRAL: MistralProvider,
    LLMBackendKind.OLLAMA: OllamaProvider,
    LLMBackendKind.DEEPSEEK: DeepSeekProvider,
    LLMBackendKind.GROK: GrokProvider,
    LLMBackendKind.FIREWORKS: FireworksProvider,
    LLMBackendKind.TOGETHER: TogetherProvider,
    LLMBackendKind.GROQ: GroqProvider,
}


def create_llm_backend(cfg: LLMConfig) -> LLMBackend:
    """Create the provider selected by ``cfg.backend``.

    Raises:
        DependencyMissingError: If the provider's SDK is not installed
    """
    return _PROVIDERS[cfg.backend](cfg)
