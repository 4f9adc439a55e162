"""Mistral provider."""

from .mistral_provider import MistralProvider

__all__ = ["MistralProvider"]
