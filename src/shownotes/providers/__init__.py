"""LLM providers that turn a prompt and transcript into show notes.

One subpackage per vendor; OpenAI-compatible vendors (DeepSeek, Grok,
Fireworks, Together, Groq, Ollama) share the OpenAI client.
"""

from .base import LLMBackend, LLMResult
from .factory import create_llm_backend

__all__ = ["LLMBackend", "LLMResult", "create_llm_backend"]
