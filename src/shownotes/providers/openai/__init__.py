"""OpenAI provider and the OpenAI-compatible base."""

from .openai_provider import OpenAICompatibleProvider, OpenAIProvider

__all__ = ["OpenAICompatibleProvider", "OpenAIProvider"]
