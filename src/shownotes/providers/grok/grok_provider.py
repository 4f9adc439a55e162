"""Grok provider (OpenAI-compatible API)."""

from __future__ import annotations

from ..openai.openai_provider import OpenAICompatibleProvider


class GrokProvider(OpenAICompatibleProvider):
    name = "grok"
    display_name = "Grok"
