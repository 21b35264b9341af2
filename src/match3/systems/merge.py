from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

Position = Tuple[int, int]


def combine_matches(groups: Iterable[Sequence[Position]]) -> List[List[Position]]:
    """Fold overlapping raw groups into maximal connected match groups.

    Seeds are taken in input order. Each accumulator absorbs every remaining
    group that shares a coordinate with it, rescanning until nothing more
    intersects, so chains like a T or a run of five collapse into one group.
    Coordinates keep first-seen order.
    """
    pool = [list(group) for group in groups]
    merged: List[List[Position]] = []
    while pool:
        current = pool.pop(0)
        seen = set(current)
        changed = True
        while changed:
            changed = False
            for group in pool[:]:
                if seen.isdisjoint(group):
                    continue
                for pos in group:
                    if pos not in seen:
                        seen.add(pos)
                        current.append(pos)
                pool.remove(group)
                changed = True
        merged.append(current)
    return merged
