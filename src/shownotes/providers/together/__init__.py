"""Together provider."""

from .together_provider import TogetherProvider

__all__ = ["TogetherProvider"]
