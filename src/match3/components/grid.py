from dataclasses import dataclass, field
from typing import Hashable, List

Token = Hashable


@dataclass(slots=True)
class Grid:
    """Board dimensions plus the row-major orb array, addressed ``orbs[row][col]``.

    Lives on the single board entity. Systems read it through board_ops helpers
    and mutate it in place. Callers outside the engine should read
    BoardSystem.snapshot(), which copies the rows.
    """
    rows: int
    cols: int
    orbs: List[List[Token]] = field(default_factory=list)

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def snapshot(self) -> List[List[Token]]:
        return [list(row) for row in self.orbs]
