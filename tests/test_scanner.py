from match3.systems.scanner import iter_chunks, transpose

GRID = [
    [1, 2, 3, 4],
    [5, 6, 7, 8],
    [9, 10, 11, 12],
]


def test_transpose_swaps_axes():
    assert transpose(GRID) == [[1, 5, 9], [2, 6, 10], [3, 7, 11], [4, 8, 12]]


def test_triple_windows_cover_rows_then_columns():
    chunks = list(iter_chunks(GRID, (3, 1)))
    # 3 rows x 2 offsets, then 4 columns x 1 offset
    assert len(chunks) == 10
    assert [c.cells[0] for c in chunks[:2]] == [(1, 2, 3), (2, 3, 4)]
    assert not chunks[0].transposed
    assert chunks[6].cells[0] == (1, 5, 9)
    assert chunks[6].transposed


def test_positions_are_absolute_and_transposed_back():
    chunks = list(iter_chunks(GRID, (3, 1), positions=True))
    horizontal = chunks[3]
    assert horizontal.cells[0] == (6, 7, 8)
    assert (horizontal.first, horizontal.last) == ((1, 1), (1, 3))
    vertical = [c for c in chunks if c.transposed][1]
    assert vertical.cells[0] == (2, 6, 10)
    assert (vertical.first, vertical.last) == ((0, 1), (2, 1))


def test_positions_omitted_by_default():
    chunk = next(iter_chunks(GRID, (3, 1)))
    assert chunk.first is None and chunk.last is None


def test_wide_windows_skip_short_axes_unless_clipped():
    # 3 rows: no 4-tall window fits over the transpose
    plain = list(iter_chunks(GRID, (4, 2)))
    assert len(plain) == 2
    assert all(not c.transposed for c in plain)
    clipped = list(iter_chunks(GRID, (4, 2), clip=True))
    # transpose is 4x3, clipped to 3 wide: 3 vertical offsets
    assert len(clipped) == 5
    assert clipped[-1].cells == ((3, 7, 11), (4, 8, 12))


def test_scan_recomputes_from_current_grid():
    grid = [row[:] for row in GRID]
    first = next(iter_chunks(grid, (3, 1)))
    grid[0][0] = 99
    second = next(iter_chunks(grid, (3, 1)))
    assert first.cells[0][0] == 1
    assert second.cells[0][0] == 99
