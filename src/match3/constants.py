DEFAULT_ROWS = 8
DEFAULT_COLS = 8
# Seven integer orb types, matching the classic board.
DEFAULT_TYPES = list(range(7))

# Marks a cell whose orb was cleared and is waiting for the drop/refill pass.
CLEARED = "\u241a"

# Shortest run that counts as a match; also the smallest legal board side.
MIN_SCAN_LENGTH = 3
# (width, height) of the sliding windows used by the scanner.
WIDE_WINDOW = (4, 2)
TRIPLE_WINDOW = (3, 1)
MIN_TYPES = 2

# Occurrence-index shapes a token may form across two stacked row segments
# of a wide window and still be one swap away from a run of three.
RUN_SHAPES = (
    frozenset({0, 1, 2}),
    frozenset({1, 2, 3}),
    frozenset({0, 1, 2, 3}),
)

# Repair loop guards. A board that needs more than this many passes is
# misconfigured (for example a single token type left on the grid).
MAX_UNMATCH_PASSES = 1_000
MAX_SHUFFLES = 200
# Fresh random layouts tried at construction before giving up.
MAX_BOARD_ATTEMPTS = 50
