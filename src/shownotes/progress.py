"""Progress reporting over the items of a batch.

Library code only talks to :func:`progress_context`; front-ends decide how
progress is shown by registering a factory with :func:`set_progress_factory`.
The default reporter discards everything.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, ContextManager, Iterator, Optional, Protocol


class ItemProgress(Protocol):
    """Callbacks for one pass over a list of items."""

    def start_item(self, label: str) -> None: ...

    def finish_item(self, succeeded: bool) -> None: ...


ProgressFactory = Callable[[Optional[int], str], ContextManager[ItemProgress]]


class _SilentProgress:
    def start_item(self, label: str) -> None:
        return None

    def finish_item(self, succeeded: bool) -> None:
        return None


@contextmanager
def _silent_progress(total: Optional[int], description: str) -> Iterator[ItemProgress]:
    yield _SilentProgress()


_factory: ProgressFactory = _silent_progress


def set_progress_factory(factory: Optional[ProgressFactory]) -> None:
    """Register the factory used by :func:`progress_context`; None restores the silent one."""
    global _factory
    _factory = factory or _silent_progress


@contextmanager
def progress_context(total: Optional[int], description: str) -> Iterator[ItemProgress]:
    with _factory(total, description) as reporter:
        yield reporter


__all__ = [
    "ItemProgress",
    "ProgressFactory",
    "progress_context",
    "set_progress_factory",
]
