"""DeepSeek provider."""

from .deepseek_provider import DeepSeekProvider

__all__ = ["DeepSeekProvider"]
