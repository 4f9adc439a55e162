"""Fireworks provider."""

from .fireworks_provider import FireworksProvider

__all__ = ["FireworksProvider"]
