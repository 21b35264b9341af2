from __future__ import annotations

import random
from typing import Any, MutableSequence, Protocol, Sequence, TypeVar

from esper import World

T = TypeVar("T")


class RandomSource(Protocol):
    """Uniform picker the board draws orbs, cells and permutations from.

    ``random.Random`` satisfies it; tests inject a seeded instance.
    """

    def choice(self, seq: Sequence[T]) -> T: ...

    def randrange(self, start: int, stop: int | None = None, step: int = 1) -> int: ...

    def shuffle(self, x: MutableSequence[Any]) -> None: ...


def resolve_rng(world: World, rng: RandomSource | None = None) -> RandomSource:
    """Return the explicit rng, else the world's, else a fresh unseeded Random."""

    if rng is not None:
        return rng
    candidate = getattr(world, "random", None)
    if candidate is not None:
        return candidate
    return random.Random()
