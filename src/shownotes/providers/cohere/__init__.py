"""Cohere provider."""

from .cohere_provider import CohereProvider

__all__ = ["CohereProvider"]
