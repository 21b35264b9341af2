from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable, Iterator, List, Sequence, Tuple

Position = Tuple[int, int]
Rows = Sequence[Sequence[Hashable]]


@dataclass(frozen=True, slots=True)
class Chunk:
    """A ``height x width`` window cut out of the grid or its transpose.

    ``cells`` is indexed in scan orientation: for a transposed chunk the first
    index runs along grid columns. ``first``/``last`` are absolute grid
    coordinates of the window corners, already transposed back.
    """
    cells: Tuple[Tuple[Hashable, ...], ...]
    first: Position | None = None
    last: Position | None = None
    transposed: bool = False


def transpose(orbs: Rows) -> List[List[Hashable]]:
    return [list(column) for column in zip(*orbs)]


def _windows(orbs: Rows, width: int, height: int) -> Iterator[Tuple[int, int, Tuple[Tuple[Hashable, ...], ...]]]:
    rows = len(orbs)
    cols = len(orbs[0]) if rows else 0
    for top in range(rows - height + 1):
        for left in range(cols - width + 1):
            cells = tuple(tuple(orbs[top + dy][left:left + width]) for dy in range(height))
            yield top, left, cells


def iter_chunks(
    orbs: Rows,
    size: Tuple[int, int],
    *,
    positions: bool = False,
    clip: bool = False,
) -> Iterator[Chunk]:
    """Yield every ``size`` window over the grid, then over its transpose.

    ``size`` is ``(width, height)`` in scan orientation, so a ``(3, 1)`` scan
    covers horizontal triples on the first pass and vertical ones on the
    second. With ``clip`` the width shrinks to the scanned axis length, which
    keeps narrow boards covered by wide windows. The sequence is recomputed
    from ``orbs`` on every call.
    """
    width, height = size
    for transposed, view in ((False, orbs), (True, transpose(orbs))):
        if not view:
            continue
        scan_width = min(width, len(view[0])) if clip else width
        for top, left, cells in _windows(view, scan_width, height):
            first = last = None
            if positions:
                first = (top, left)
                last = (top + height - 1, left + scan_width - 1)
                if transposed:
                    first = (first[1], first[0])
                    last = (last[1], last[0])
            yield Chunk(cells=cells, first=first, last=last, transposed=transposed)
