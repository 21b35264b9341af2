from __future__ import annotations

from collections import Counter
from typing import Hashable, Iterator, List, Sequence, Tuple

from match3.constants import CLEARED, RUN_SHAPES, TRIPLE_WINDOW, WIDE_WINDOW
from match3.systems.scanner import Chunk, iter_chunks

Position = Tuple[int, int]
Rows = Sequence[Sequence[Hashable]]


def iter_triples(orbs: Rows) -> Iterator[List[Position]]:
    """Yield one three-coordinate group per window of three equal orbs.

    Horizontal windows come first (row-major), then vertical ones
    (column-major). Longer or crossing runs produce overlapping groups;
    combine_matches folds them together.
    """
    for chunk in iter_chunks(orbs, TRIPLE_WINDOW, positions=True):
        a, b, c = chunk.cells[0]
        if a == CLEARED or not (a == b == c):
            continue
        row, col = chunk.first
        if chunk.transposed:
            yield [(row, col), (row + 1, col), (row + 2, col)]
        else:
            yield [(row, col), (row, col + 1), (row, col + 2)]


def find_triples(orbs: Rows) -> List[List[Position]]:
    return list(iter_triples(orbs))


def has_match(orbs: Rows) -> bool:
    return next(iter_triples(orbs), None) is not None


def _segment_has_run(segment: Sequence[Hashable]) -> bool:
    counts = Counter(token for token in segment if token != CLEARED)
    return any(count > 2 for count in counts.values())


def _rows_align(chunk: Chunk) -> bool:
    tokens = {token for segment in chunk.cells for token in segment if token != CLEARED}
    for token in tokens:
        indices = frozenset(
            index
            for segment in chunk.cells
            for index, value in enumerate(segment)
            if value == token
        )
        if indices in RUN_SHAPES:
            return True
    return False


def wide_scan(orbs: Rows) -> bool:
    """Cheap scan over 4x2 windows flagging runs and one-swap-away runs.

    A window flags when one of its row segments holds some token more than
    twice, or when a token's column indices across both segments form one of
    the contiguous run shapes. It is true whenever a real run exists, so it
    cannot locate matches; use find_triples for coordinates.
    """
    for chunk in iter_chunks(orbs, WIDE_WINDOW, clip=True):
        if any(_segment_has_run(segment) for segment in chunk.cells):
            return True
        if _rows_align(chunk):
            return True
    return False


def has_potential_match(orbs: Rows) -> bool:
    return wide_scan(orbs)


def needs_shuffle(orbs: Rows) -> bool:
    return not has_potential_match(orbs)


def _has_line_match(orbs: Rows, pos: Position) -> bool:
    """Return True if a horizontal or vertical run of three passes through pos."""
    row, col = pos
    rows = len(orbs)
    cols = len(orbs[0])
    tval = orbs[row][col]
    if tval == CLEARED:
        return False
    # Horizontal sweep
    h_run = 1
    c_left = col - 1
    while c_left >= 0 and orbs[row][c_left] == tval:
        h_run += 1
        c_left -= 1
    c_right = col + 1
    while c_right < cols and orbs[row][c_right] == tval:
        h_run += 1
        c_right += 1
    if h_run >= 3:
        return True
    # Vertical sweep
    v_run = 1
    r_up = row - 1
    while r_up >= 0 and orbs[r_up][col] == tval:
        v_run += 1
        r_up -= 1
    r_down = row + 1
    while r_down < rows and orbs[r_down][col] == tval:
        v_run += 1
        r_down += 1
    return v_run >= 3


def predict_swap_creates_match(orbs: Rows, src: Position, dst: Position) -> bool:
    """Return True if swapping src/dst would put a run through either cell."""

    swapped = [list(row) for row in orbs]
    (r1, c1), (r2, c2) = src, dst
    swapped[r1][c1], swapped[r2][c2] = swapped[r2][c2], swapped[r1][c1]
    return _has_line_match(swapped, src) or _has_line_match(swapped, dst)


def find_valid_swaps(orbs: Rows) -> List[Tuple[Position, Position]]:
    """Enumerate adjacent swaps that would produce a match."""

    rows = len(orbs)
    cols = len(orbs[0]) if rows else 0
    swaps: List[Tuple[Position, Position]] = []
    for row in range(rows):
        for col in range(cols):
            pos = (row, col)
            if col + 1 < cols and orbs[row][col] != orbs[row][col + 1]:
                right = (row, col + 1)
                if predict_swap_creates_match(orbs, pos, right):
                    swaps.append((pos, right))
            if row + 1 < rows and orbs[row][col] != orbs[row + 1][col]:
                down = (row + 1, col)
                if predict_swap_creates_match(orbs, pos, down):
                    swaps.append((pos, down))
    return swaps
