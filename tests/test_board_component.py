import random

import pytest

from match3.components.grid import Grid
from match3.components.tile_types import TileTypes
from match3.constants import DEFAULT_TYPES
from match3.errors import ConfigurationError
from match3.events.bus import EVENT_BOARD_READY, EventBus
from match3.systems.board import BoardSystem
from match3.systems.board_ops import board_dimensions, get_grid, get_tile_registry
from match3.world import create_board, create_world
from tests.helpers import make_board, record_events


def test_default_board_is_eight_by_eight_with_seven_types():
    board = create_board(rng=random.Random(0))
    assert board.size == (8, 8)
    assert (board.width, board.height) == (8, 8)
    assert board.types == DEFAULT_TYPES
    assert set(board.available_types) <= set(DEFAULT_TYPES)
    assert board.available_types == sorted(board.available_types)


def test_grid_lives_on_the_world():
    bus = EventBus()
    world = create_world(bus, types="xyz", rng=random.Random(1))
    board = BoardSystem(world, bus, rows=4, cols=6)
    assert board_dimensions(world) == (4, 6)
    assert get_grid(world) is board.grid
    assert len(board.snapshot()) == 4
    assert all(len(row) == 6 for row in board.snapshot())


def test_board_ready_event_reports_dimensions():
    bus = EventBus()
    received = record_events(bus, EVENT_BOARD_READY)
    create_board(5, 4, types="abcd", event_bus=bus, rng=random.Random(3))
    assert received[EVENT_BOARD_READY] == [{"rows": 4, "cols": 5}]


def test_snapshot_is_a_copy():
    board = create_board(4, 4, types="abcd", rng=random.Random(8))
    grid = board.snapshot()
    grid[0][0] = "zzz"
    assert board.orb_at(0, 0) != "zzz"


@pytest.mark.parametrize("width,height", [(2, 8), (8, 2), (0, 0)])
def test_too_small_board_is_rejected(width, height):
    with pytest.raises(ConfigurationError):
        create_board(width, height)


@pytest.mark.parametrize("types", [[], ["a"], ["a", "a", "a"], [[1], [2]], ["a", "␚"]])
def test_unusable_types_are_rejected(types):
    with pytest.raises(ConfigurationError):
        create_board(5, 5, types=types)


def test_configuration_error_is_a_value_error():
    with pytest.raises(ValueError):
        create_board(5, 5, types=[1])


def test_duplicate_types_are_collapsed():
    board = create_board(5, 5, types=["a", "b", "a", "c"], rng=random.Random(4))
    assert board.types == ["a", "b", "c"]


def test_spawnable_subset_narrows_refill():
    board = create_board(5, 5, types="abcd", spawnable=["b", "nope", "b"], rng=random.Random(5))
    assert board.spawnable_types() == ["b"]
    assert board.set_spawnable_types(["c", "a"]) == ["c", "a"]
    assert board.set_spawnable_types([]) == ["a", "b", "c", "d"]
    assert get_tile_registry(board.world).all_types() == ["a", "b", "c", "d"]


def test_load_validates_shape_and_tokens():
    board = make_board([["a", "b", "c"], ["b", "c", "a"], ["c", "a", "b"]])
    with pytest.raises(ConfigurationError):
        board.load([["a", "b", "c"]])
    with pytest.raises(ConfigurationError):
        board.load([["a", "b", "q"], ["b", "c", "a"], ["c", "a", "b"]])


def test_tile_types_filters_and_falls_back():
    registry = TileTypes(types=[1, 2, 3], spawnable=[3, 9, 3])
    assert registry.spawnable_types() == [3]
    registry.enable_type(1)
    assert registry.spawnable_types() == [3, 1]
    registry.disable_type(3)
    registry.disable_type(1)
    assert registry.spawnable_types() == [1, 2, 3]
    registry.disable_type(1, allow_empty=True)
    registry.set_spawnable([], allow_empty=True)
    assert registry.spawnable_types() == []


def test_grid_bounds():
    grid = Grid(rows=2, cols=3, orbs=[[1, 2, 3], [4, 5, 6]])
    assert grid.in_bounds(1, 2)
    assert not grid.in_bounds(2, 0)
    assert not grid.in_bounds(0, -1)


def test_available_types_with_mixed_token_kinds():
    board = create_board(4, 4, types=["red", 1, "blue"], rng=random.Random(0))
    present = {t for row in board.snapshot() for t in row}
    assert board.available_types == [t for t in ["red", 1, "blue"] if t in present]


def test_available_types_follow_configured_order():
    board = make_board([["c", "a", "c"], ["a", "c", "a"], ["c", "a", "c"]], types=["c", "b", "a"])
    assert board.available_types == ["c", "a"]


def test_spawnable_types_toggle_through_board():
    board = create_board(5, 5, types="abcd", spawnable=["a"], rng=random.Random(6))
    assert board.enable_spawnable_type("c") == ["a", "c"]
    assert board.enable_spawnable_type("zzz") == ["a", "c"]
    assert board.disable_spawnable_type("a") == ["c"]
    assert board.disable_spawnable_type("c") == ["a", "b", "c", "d"]
