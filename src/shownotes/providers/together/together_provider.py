"""Together provider (OpenAI-compatible API)."""

from __future__ import annotations

from ..openai.openai_provider import OpenAICompatibleProvider


class TogetherProvider(OpenAICompatibleProvider):
    name = "together"
    display_name = "Together"
