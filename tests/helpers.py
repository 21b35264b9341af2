from __future__ import annotations

import random
from typing import Hashable, Sequence

from match3.events.bus import EventBus
from match3.systems.board import BoardSystem
from match3.world import create_world


def make_board(
    layout: Sequence[Sequence[Hashable]],
    types: Sequence[Hashable] | None = None,
    *,
    seed: int = 7,
    bus: EventBus | None = None,
) -> BoardSystem:
    """Build a board of the layout's shape and stage the layout on it verbatim."""

    if types is None:
        types = sorted({token for row in layout for token in row})
    bus = bus or EventBus()
    world = create_world(bus, types=types, rng=random.Random(seed))
    board = BoardSystem(world, bus, rows=len(layout), cols=len(layout[0]))
    board.load(layout)
    return board


def record_events(bus: EventBus, *names: str) -> dict[str, list[dict]]:
    """Subscribe to each event name and collect payloads in emission order."""

    received: dict[str, list[dict]] = {name: [] for name in names}
    for name in names:
        bus.subscribe(name, lambda sender, _name=name, **payload: received[_name].append(payload))
    return received
