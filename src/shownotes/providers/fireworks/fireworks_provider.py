"""Fireworks provider (OpenAI-compatible API)."""

from __future__ import annotations

from ..openai.openai_provider import OpenAICompatibleProvider


class FireworksProvider(OpenAICompatibleProvider):
    name = "fireworks"
    display_name = "Fireworks"
