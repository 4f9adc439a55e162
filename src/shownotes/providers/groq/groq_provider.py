"""Groq provider (OpenAI-compatible API)."""

from __future__ import annotations

from ..openai.openai_provider import OpenAICompatibleProvider


class GroqProvider(OpenAICompatibleProvider):
    name = "groq"
    display_name = "Groq"
