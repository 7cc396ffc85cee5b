"""Port for the randomness source used by banner selection."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, TypeVar

T = TypeVar("T")


class RandomSourcePort(Protocol):
    """Anything exposing ``choice`` (``random.Random`` satisfies it)."""

    def choice(self, seq: Sequence[T]) -> T: ...
