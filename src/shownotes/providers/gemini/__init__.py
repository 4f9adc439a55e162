"""Gemini provider."""

from .gemini_provider import GeminiProvider

__all__ = ["GeminiProvider"]
