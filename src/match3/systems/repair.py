from __future__ import annotations

import logging
from collections import Counter
from enum import Enum, auto
from typing import List, Optional, Sequence, Tuple

from esper import World

from match3.components.grid import Grid
from match3.constants import MAX_SHUFFLES, MAX_UNMATCH_PASSES
from match3.errors import InvariantViolationError
from match3.events.bus import EVENT_BOARD_CHANGED, EVENT_BOARD_SHUFFLED, EventBus
from match3.systems.board_ops import find_all_matches, get_grid, swap_orbs
from match3.systems.match import has_match, needs_shuffle
from match3.utils.random_source import RandomSource, resolve_rng

logger = logging.getLogger(__name__)

Position = Tuple[int, int]

DIRECTIONS: Tuple[Position, ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))


class RepairPhase(Enum):
    SCANNING_DIRECTIONS = auto()
    FALLBACK_RANDOM = auto()
    DONE = auto()


def is_simple_match(match: Sequence[Position]) -> bool:
    rows = {row for row, _ in match}
    cols = {col for _, col in match}
    return len(rows) == 1 or len(cols) == 1


def median_position(match: Sequence[Position]) -> Position:
    ordered = sorted(match)
    return ordered[len(ordered) // 2]


def intersections(match: Sequence[Position]) -> List[Position]:
    """Cells that sit on both a row and a column holding three or more of the group."""
    row_counts = Counter(row for row, _ in match)
    col_counts = Counter(col for _, col in match)
    return [
        (row, col)
        for row, col in match
        if row_counts[row] > 2 and col_counts[col] > 2
    ]


def is_side_by_side(grid: Grid, match: Sequence[Position], median: Position) -> bool:
    """True when an in-line neighbour of the median already holds its token.

    Swapping a median like that with a neighbour can bounce a run between two
    parallel lines forever, so the repair jumps straight to a random partner.
    """
    row, col = median
    if len({r for r, _ in match}) == 1:
        neighbours = ((row, col - 1), (row, col + 1))
    else:
        neighbours = ((row - 1, col), (row + 1, col))
    token = grid.orbs[row][col]
    return any(
        grid.in_bounds(r, c) and grid.orbs[r][c] == token
        for r, c in neighbours
    )


class RepairSystem:
    """Removes runs left by randomisation and guarantees a playable board.

    ``unmatch`` breaks one merged group per pass by swapping a single orb out
    of it: the median of a straight run or a random crossing cell of an
    irregular one. ``shuffle`` permutes every row, unmatches, and repeats
    until at least one move exists.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        rng: Optional[RandomSource] = None,
        *,
        max_passes: int = MAX_UNMATCH_PASSES,
        max_shuffles: int = MAX_SHUFFLES,
    ):
        self.world = world
        self.event_bus = event_bus
        self.rng = resolve_rng(world, rng)
        self.max_passes = max_passes
        self.max_shuffles = max_shuffles

    def needs_shuffle(self) -> bool:
        return needs_shuffle(get_grid(self.world).orbs)

    def unmatch(self) -> int:
        """Swap orbs out of matches until none remain; returns the number of passes."""
        grid = get_grid(self.world)
        passes = 0
        while has_match(grid.orbs):
            if passes >= self.max_passes:
                raise InvariantViolationError(
                    f"unmatch gave up after {passes} passes; the board may hold a single orb type"
                )
            passes += 1
            match = find_all_matches(grid)[0]
            skip_to_random = False
            if is_simple_match(match):
                target = median_position(match)
                skip_to_random = is_side_by_side(grid, match, target)
            else:
                crossing = intersections(match)
                target = self.rng.choice(crossing) if crossing else median_position(match)
            self._unmatch_at(grid, target, match, skip_to_random)
        if passes:
            logger.debug("unmatch cleared board in %d passes", passes)
        return passes

    def _unmatch_at(
        self,
        grid: Grid,
        target: Position,
        match: Sequence[Position],
        skip_to_random: bool = False,
    ) -> Position:
        """Swap target with a differing neighbour, or a random differing cell outside match."""
        row, col = target
        token = grid.orbs[row][col]
        phase = RepairPhase.FALLBACK_RANDOM if skip_to_random else RepairPhase.SCANNING_DIRECTIONS
        partner: Position = target
        while phase is not RepairPhase.DONE:
            if phase is RepairPhase.SCANNING_DIRECTIONS:
                directions = list(DIRECTIONS)
                self.rng.shuffle(directions)
                phase = RepairPhase.FALLBACK_RANDOM
                for dr, dc in directions:
                    r, c = row + dr, col + dc
                    if grid.in_bounds(r, c) and grid.orbs[r][c] != token:
                        partner = (r, c)
                        phase = RepairPhase.DONE
                        break
            else:
                excluded = set(match)
                candidates = [
                    (r, c)
                    for r in range(grid.rows)
                    for c in range(grid.cols)
                    if (r, c) not in excluded and grid.orbs[r][c] != token
                ]
                if not candidates:
                    raise InvariantViolationError(
                        f"no orb outside the match differs from {token!r}; cannot break the run"
                    )
                partner = self.rng.choice(candidates)
                phase = RepairPhase.DONE
        swap_orbs(grid, target, partner)
        return partner

    def shuffle(self) -> int:
        """Permute each row, strip matches, and retry until a move exists.

        Returns the number of shuffle attempts it took.
        """
        grid = get_grid(self.world)
        repairs = 0
        for attempt in range(1, self.max_shuffles + 1):
            for row in grid.orbs:
                self.rng.shuffle(row)
            repairs += self.unmatch()
            if not needs_shuffle(grid.orbs):
                self.event_bus.emit(EVENT_BOARD_SHUFFLED, attempts=attempt, repairs=repairs)
                self.event_bus.emit(EVENT_BOARD_CHANGED, reason="shuffle")
                return attempt
            logger.debug("shuffle attempt %d left the board without moves", attempt)
        raise InvariantViolationError(
            f"no playable layout found after {self.max_shuffles} shuffles"
        )
