"""Grok provider."""

from .grok_provider import GrokProvider

__all__ = ["GrokProvider"]
