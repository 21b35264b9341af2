class Match3Error(Exception):
    """Base class for every error raised by the board engine."""


class ConfigurationError(Match3Error, ValueError):
    """Board dimensions or token types cannot support a playable board."""


class OutOfBoundsError(Match3Error, IndexError):
    """A coordinate falls outside the grid."""

    def __init__(self, position, rows: int, cols: int):
        self.position = position
        self.rows = rows
        self.cols = cols
        super().__init__(f"{position!r} is outside a {rows}x{cols} board")


class InvariantViolationError(Match3Error, RuntimeError):
    """A repair loop could not restore the no-match/has-move invariant."""
