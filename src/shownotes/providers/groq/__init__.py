"""Groq provider."""

from .groq_provider import GroqProvider

__all__ = ["GroqProvider"]
