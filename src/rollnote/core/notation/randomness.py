"""
Random sources for dice evaluation.

The evaluator never touches the global ``random`` module; callers pass a
source explicitly so tests and replays can script every draw.
"""

from __future__ import annotations

import random
from collections.abc import Iterable
from typing import Protocol


class RandomSource(Protocol):
    """Anything that can draw a uniform integer in ``[a, b]``.

    ``random.Random`` satisfies this protocol.
    """

    def randint(self, a: int, b: int) -> int: ...


def make_random(seed: int | None = None) -> random.Random:
    """Create a fresh source, seeded for reproducible output when given a seed."""
    return random.Random(seed)


class ScriptedRandom:
    """Replay a fixed sequence of draws.

    Args:
        values: Draws returned in order by :meth:`randint`.

    Raises:
        ValueError: From :meth:`randint` when a scripted value falls outside
            the requested range.
        LookupError: From :meth:`randint` when the script is exhausted.
    """

    def __init__(self, values: Iterable[int]) -> None:
        self._values = list(values)
        self._index = 0

    @property
    def remaining(self) -> int:
        """Number of scripted draws not yet consumed."""
        return len(self._values) - self._index

    def randint(self, a: int, b: int) -> int:
        if self._index >= len(self._values):
            raise LookupError(f"Scripted random source exhausted after {self._index} draws")
        value = self._values[self._index]
        if not a <= value <= b:
            raise ValueError(f"Scripted draw {value} outside requested range [{a}, {b}]")
        self._index += 1
        return value
