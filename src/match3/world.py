from __future__ import annotations

import random
from typing import Hashable, Iterable, List, Optional

from esper import World

from match3.components.tile_type_registry import TileTypeRegistry
from match3.components.tile_types import TileTypes
from match3.constants import CLEARED, DEFAULT_COLS, DEFAULT_ROWS, DEFAULT_TYPES, MIN_TYPES
from match3.errors import ConfigurationError
from match3.events.bus import EventBus
from match3.systems.board import BoardSystem
from match3.utils.random_source import RandomSource


def _distinct_types(types: Iterable[Hashable]) -> List[Hashable]:
    distinct: List[Hashable] = []
    seen = set()
    for name in types:
        try:
            if name in seen:
                continue
        except TypeError:
            raise ConfigurationError(f"orb type {name!r} is not hashable") from None
        if name == CLEARED:
            raise ConfigurationError("the cleared-cell marker cannot be used as an orb type")
        seen.add(name)
        distinct.append(name)
    if len(distinct) < MIN_TYPES:
        raise ConfigurationError(
            f"at least {MIN_TYPES} distinct orb types are required, got {len(distinct)}"
        )
    return distinct


def create_world(
    event_bus: EventBus,
    *,
    types: Optional[Iterable[Hashable]] = None,
    spawnable: Optional[Iterable[Hashable]] = None,
    rng: RandomSource | None = None,
) -> World:
    """Build a World holding the orb type registry and the shared rng.

    The grid itself is added by BoardSystem.
    """
    distinct = _distinct_types(DEFAULT_TYPES if types is None else types)
    world = World()
    setattr(world, "random", rng or random.Random())
    world.create_entity(
        TileTypeRegistry(),
        TileTypes(types=distinct, spawnable=list(spawnable or [])),
    )
    return world


def create_board(
    width: int = DEFAULT_COLS,
    height: int = DEFAULT_ROWS,
    types: Optional[Iterable[Hashable]] = None,
    rng: RandomSource | None = None,
    *,
    event_bus: EventBus | None = None,
    spawnable: Optional[Iterable[Hashable]] = None,
) -> BoardSystem:
    """Construct a ready-to-play board: no matches, at least one move."""
    bus = event_bus or EventBus()
    world = create_world(bus, types=types, spawnable=spawnable, rng=rng)
    return BoardSystem(world, bus, rows=height, cols=width)
