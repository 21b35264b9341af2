from typing import Hashable, List, Optional, Sequence, Tuple
from esper import World
from match3.events.bus import (EventBus, EVENT_MATCH_FOUND, EVENT_MATCH_CLEARED,
                               EVENT_REFILL_COMPLETED, EVENT_BOARD_CHANGED)
from match3.components.match_event import MatchEvent
from match3.systems.board_ops import clear_and_drop, find_all_matches, get_grid, get_tile_registry
from match3.utils.random_source import RandomSource, resolve_rng

Position = Tuple[int, int]


class MatchResolutionSystem:
    """Runs one clear/drop/refill step and reports it on the bus.

    A single call never chains: if the refill lines up a new run, the caller
    decides whether to evaluate again.
    """
    def __init__(self, world: World, event_bus: EventBus, rng: Optional[RandomSource] = None):
        self.world = world
        self.event_bus = event_bus
        self.rng = resolve_rng(world, rng)

    def evaluate(
        self,
        matches: Optional[Sequence[Sequence[Position]]] = None,
        drop_options: Optional[Sequence[Hashable]] = None,
    ) -> List[MatchEvent]:
        grid = get_grid(self.world)
        if matches is None:
            matches = find_all_matches(grid)
        if not matches:
            return []
        if drop_options is None:
            drop_options = get_tile_registry(self.world).spawnable_types()
        events, cleared, new_tiles = clear_and_drop(grid, matches, list(drop_options), self.rng)
        if not events:
            return []
        flat_positions = sorted({tuple(pos) for group in matches for pos in group})
        self.event_bus.emit(EVENT_MATCH_FOUND, positions=flat_positions, size=len(flat_positions))
        self.event_bus.emit(EVENT_MATCH_CLEARED, positions=cleared, events=list(events))
        self.event_bus.emit(EVENT_REFILL_COMPLETED, new_tiles=new_tiles)
        self.event_bus.emit(EVENT_BOARD_CHANGED, reason="evaluate")
        return events
