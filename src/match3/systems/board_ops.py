from __future__ import annotations

from typing import Dict, Hashable, Iterable, List, Sequence, Tuple

from esper import World

from match3.components.grid import Grid
from match3.components.match_event import MatchEvent
from match3.components.tile_type_registry import TileTypeRegistry
from match3.components.tile_types import TileTypes
from match3.constants import CLEARED
from match3.errors import ConfigurationError, OutOfBoundsError
from match3.systems.match import find_triples
from match3.systems.merge import combine_matches
from match3.utils.random_source import RandomSource

Position = Tuple[int, int]


def get_grid(world: World) -> Grid:
    for _, grid in world.get_component(Grid):
        return grid
    raise RuntimeError("Grid component not found")


def get_tile_registry(world: World) -> TileTypes:
    for entity, _ in world.get_component(TileTypeRegistry):
        return world.component_for_entity(entity, TileTypes)
    raise RuntimeError("TileTypes definitions not found")


def set_spawnable_tile_types(world: World, type_names: Iterable[Hashable], *, allow_empty: bool = False) -> List[Hashable]:
    registry = get_tile_registry(world)
    registry.set_spawnable(type_names, allow_empty=allow_empty)
    return registry.spawnable_types()


def board_dimensions(world: World) -> Tuple[int, int] | None:
    for _, grid in world.get_component(Grid):
        return grid.rows, grid.cols
    return None


def ensure_in_bounds(grid: Grid, position: Sequence[int]) -> Position:
    """Normalise position to a (row, col) tuple or raise OutOfBoundsError."""
    try:
        row, col = position
        row, col = int(row), int(col)
    except (TypeError, ValueError):
        raise OutOfBoundsError(position, grid.rows, grid.cols) from None
    if not grid.in_bounds(row, col):
        raise OutOfBoundsError(position, grid.rows, grid.cols)
    return row, col


def swap_orbs(grid: Grid, src: Position, dst: Position) -> None:
    """Exchange two cells in place. Callers validate coordinates first."""
    (r1, c1), (r2, c2) = src, dst
    orbs = grid.orbs
    orbs[r1][c1], orbs[r2][c2] = orbs[r2][c2], orbs[r1][c1]


def restore_orbs(grid: Grid, layout: Sequence[Sequence[Hashable]]) -> None:
    for row, values in zip(grid.orbs, layout):
        row[:] = values


def find_all_matches(grid: Grid) -> List[List[Position]]:
    """Detect every run of three or more and merge crossing runs into groups."""
    return combine_matches(find_triples(grid.orbs))


def clear_and_drop(
    grid: Grid,
    matches: Sequence[Sequence[Position]],
    drop_options: Sequence[Hashable],
    rng: RandomSource,
) -> Tuple[List[MatchEvent], List[Position], List[Position]]:
    """Clear matched cells, let orbs above fall, and refill from the top.

    Returns (match events, cleared positions, refilled positions). Every
    coordinate is checked before anything is written.
    """
    groups = [[ensure_in_bounds(grid, pos) for pos in match] for match in matches]
    groups = [group for group in groups if group]
    if not groups:
        return [], [], []
    if not drop_options:
        raise ConfigurationError("evaluate needs at least one refill type")
    orbs = grid.orbs
    events = [MatchEvent(orbs[group[0][0]][group[0][1]], len(group)) for group in groups]
    cleared: List[Position] = []
    for group in groups:
        for row, col in group:
            if orbs[row][col] != CLEARED:
                orbs[row][col] = CLEARED
                cleared.append((row, col))
    per_column: Dict[int, int] = {}
    for _, col in cleared:
        per_column[col] = per_column.get(col, 0) + 1
    # Rows above a processed cell are already filled, so one top-down sweep
    # drains stacked gaps.
    for row in range(grid.rows):
        for col in range(grid.cols):
            if orbs[row][col] != CLEARED:
                continue
            for z in range(row, -1, -1):
                if z > 0:
                    orbs[z][col] = orbs[z - 1][col]
                else:
                    orbs[z][col] = rng.choice(drop_options)
    new_tiles = sorted(
        (row, col) for col, count in per_column.items() for row in range(count)
    )
    return events, sorted(cleared), new_tiles
