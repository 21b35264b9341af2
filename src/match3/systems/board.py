from __future__ import annotations

import logging
from typing import Hashable, Iterable, List, Optional, Sequence, Tuple

from esper import World

from match3.components.grid import Grid
from match3.components.match_event import MatchEvent
from match3.constants import DEFAULT_COLS, DEFAULT_ROWS, MAX_BOARD_ATTEMPTS, MIN_SCAN_LENGTH
from match3.errors import ConfigurationError, InvariantViolationError
from match3.events.bus import (
    EVENT_BOARD_CHANGED,
    EVENT_BOARD_READY,
    EVENT_TILE_SWAP_INVALID,
    EVENT_TILE_SWAP_REQUEST,
    EVENT_TILE_SWAP_VALID,
    EventBus,
)
from match3.systems import match as detector
from match3.systems.board_ops import (
    ensure_in_bounds,
    find_all_matches,
    get_tile_registry,
    restore_orbs,
    set_spawnable_tile_types,
    swap_orbs,
)
from match3.systems.match_resolution import MatchResolutionSystem
from match3.systems.repair import RepairSystem
from match3.utils.random_source import RandomSource, resolve_rng

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


class BoardSystem:
    """Owns the orb grid and exposes the board's state transitions.

    The grid lives as a Grid component on its own entity. Detection, merging,
    resolution and repair all work on that component; nothing else keeps a
    reference to the rows.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        rows: int = DEFAULT_ROWS,
        cols: int = DEFAULT_COLS,
        *,
        rng: Optional[RandomSource] = None,
    ):
        if rows < MIN_SCAN_LENGTH or cols < MIN_SCAN_LENGTH:
            raise ConfigurationError(
                f"board must be at least {MIN_SCAN_LENGTH}x{MIN_SCAN_LENGTH}, got {rows}x{cols}"
            )
        self.world = world
        self.event_bus = event_bus
        self.rng = resolve_rng(world, rng)
        self.board_entity = self.world.create_entity()
        self.world.add_component(self.board_entity, Grid(rows=rows, cols=cols))
        self.resolution = MatchResolutionSystem(world, event_bus, rng=self.rng)
        self.repair = RepairSystem(world, event_bus, rng=self.rng)
        self.event_bus.subscribe(EVENT_TILE_SWAP_REQUEST, self.on_swap_request)
        self._init_board()
        self.event_bus.emit(EVENT_BOARD_READY, rows=rows, cols=cols)

    def _init_board(self):
        grid = self.grid
        choices = get_tile_registry(self.world).all_types()
        for attempt in range(1, MAX_BOARD_ATTEMPTS + 1):
            grid.orbs = [
                [self.rng.choice(choices) for _ in range(grid.cols)]
                for _ in range(grid.rows)
            ]
            if not (self.has_match() or self.needs_shuffle()):
                return
            try:
                self.repair.shuffle()
                return
            except InvariantViolationError:
                # Row shuffles keep the orb counts, so an unlucky draw can be unrepairable.
                logger.debug("initial layout %d could not be repaired, resampling", attempt)
        raise InvariantViolationError(
            f"could not build a playable {grid.rows}x{grid.cols} board from {len(choices)} types"
        )

    @property
    def grid(self) -> Grid:
        return self.world.component_for_entity(self.board_entity, Grid)

    @property
    def rows(self) -> int:
        return self.grid.rows

    @property
    def cols(self) -> int:
        return self.grid.cols

    height = rows
    width = cols

    @property
    def size(self) -> Tuple[int, int]:
        """(width, height) of the board."""
        return self.grid.cols, self.grid.rows

    @property
    def types(self) -> List[Hashable]:
        return get_tile_registry(self.world).all_types()

    @property
    def available_types(self) -> List[Hashable]:
        """Configured orb types currently on the board, in configured order."""
        present = {token for row in self.grid.orbs for token in row}
        return [token for token in self.types if token in present]

    def spawnable_types(self) -> List[Hashable]:
        return get_tile_registry(self.world).spawnable_types()

    def set_spawnable_types(self, type_names: Iterable[Hashable]) -> List[Hashable]:
        return set_spawnable_tile_types(self.world, type_names)

    def enable_spawnable_type(self, type_name: Hashable) -> List[Hashable]:
        registry = get_tile_registry(self.world)
        registry.enable_type(type_name)
        return registry.spawnable_types()

    def disable_spawnable_type(self, type_name: Hashable) -> List[Hashable]:
        registry = get_tile_registry(self.world)
        registry.disable_type(type_name)
        return registry.spawnable_types()

    def snapshot(self) -> List[List[Hashable]]:
        return self.grid.snapshot()

    def orb_at(self, row: int, col: int) -> Hashable:
        row, col = ensure_in_bounds(self.grid, (row, col))
        return self.grid.orbs[row][col]

    def load(self, layout: Sequence[Sequence[Hashable]]) -> None:
        """Replace every orb with layout, as is; no matches are removed."""
        grid = self.grid
        if len(layout) != grid.rows or any(len(row) != grid.cols for row in layout):
            raise ConfigurationError(f"layout must be {grid.rows}x{grid.cols}")
        known = self.types
        for row in layout:
            for token in row:
                if token not in known:
                    raise ConfigurationError(f"unknown orb type {token!r}")
        restore_orbs(grid, layout)
        self.event_bus.emit(EVENT_BOARD_CHANGED, reason="load")

    # -- detection -------------------------------------------------------

    def has_match(self) -> bool:
        return detector.has_match(self.grid.orbs)

    def has_potential_match(self) -> bool:
        return detector.has_potential_match(self.grid.orbs)

    def needs_shuffle(self) -> bool:
        return detector.needs_shuffle(self.grid.orbs)

    def find_triples(self) -> List[List[Position]]:
        return detector.find_triples(self.grid.orbs)

    def find_matches(self) -> List[List[Position]]:
        return find_all_matches(self.grid)

    def find_valid_swaps(self) -> List[Tuple[Position, Position]]:
        return detector.find_valid_swaps(self.grid.orbs)

    # -- transitions -----------------------------------------------------

    def swap(self, src: Sequence[int], dst: Sequence[int], player_move: bool = True) -> bool:
        """Exchange two orbs. A player swap that forms no match is undone.

        Returns True when the swap stands.
        """
        grid = self.grid
        src = ensure_in_bounds(grid, src)
        dst = ensure_in_bounds(grid, dst)
        before = grid.snapshot()
        swap_orbs(grid, src, dst)
        if player_move and not detector.has_match(grid.orbs):
            restore_orbs(grid, before)
            self.event_bus.emit(EVENT_TILE_SWAP_INVALID, src=src, dst=dst)
            return False
        if player_move:
            self.event_bus.emit(EVENT_TILE_SWAP_VALID, src=src, dst=dst)
        self.event_bus.emit(EVENT_BOARD_CHANGED, reason="swap")
        return True

    def on_swap_request(self, sender, **kwargs):
        src = kwargs.get('src')
        dst = kwargs.get('dst')
        if not src or not dst:
            return
        self.swap(src, dst)

    def evaluate(
        self,
        matches: Optional[Sequence[Sequence[Position]]] = None,
        drop_options: Optional[Sequence[Hashable]] = None,
    ) -> List[MatchEvent]:
        return self.resolution.evaluate(matches, drop_options)

    def unmatch(self) -> int:
        passes = self.repair.unmatch()
        if passes:
            self.event_bus.emit(EVENT_BOARD_CHANGED, reason="unmatch")
        return passes

    def shuffle(self) -> int:
        return self.repair.shuffle()
