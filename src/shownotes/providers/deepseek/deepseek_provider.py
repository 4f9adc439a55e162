"""DeepSeek provider (OpenAI-compatible API)."""

from __future__ import annotations

from ..openai.openai_provider import OpenAICompatibleProvider


class DeepSeekProvider(OpenAICompatibleProvider):
    name = "deepseek"
    display_name = "DeepSeek"
