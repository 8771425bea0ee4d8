import pytest

from zonekit.grid import WallGrid
from zonekit.walls import WallState


def test_out_of_bounds_reads_return_none_and_writes_are_ignored():
    grid = WallGrid(3, 2, fill=WallState.FLOOR)
    for x, y in [(-1, 0), (0, -1), (3, 0), (0, 2), (100, 100), (-5, -5)]:
        assert grid.get(x, y) == WallState.NONE
        grid.set(x, y, WallState.WALL)
    assert grid.count(WallState.WALL) == 0


def test_set_and_get_in_bounds():
    grid = WallGrid(4, 4)
    grid.set(2, 1, WallState.DOOR_CLOSED)
    assert grid.get(2, 1) == WallState.DOOR_CLOSED
    assert grid.get(1, 2) == WallState.FLOOR


def test_is_edge():
    grid = WallGrid(4, 3)
    edges = {(x, y) for y in range(3) for x in range(4) if grid.is_edge(x, y)}
    assert edges == {(x, y) for y in range(3) for x in range(4)} - {(1, 1), (2, 1)}


def test_neighbors_are_clamped_at_corners_and_exclude_self():
    grid = WallGrid(3, 3)
    assert set(grid.neighbors(0, 0)) == {(1, 0), (0, 1), (1, 1)}
    assert set(grid.neighbors(2, 2)) == {(1, 1), (2, 1), (1, 2)}
    center = grid.neighbors(1, 1)
    assert len(center) == 8
    assert (1, 1) not in center


def test_wall_neighbor_count_ignores_off_grid_and_other_states():
    grid = WallGrid.from_lines([
        "#+#",
        "#.=",
        "...",
    ])
    assert grid.wall_neighbor_count(1, 1) == 3
    # Corner: only in-bounds neighbours count, NONE off-grid is not a wall
    assert grid.wall_neighbor_count(0, 0) == 1


def test_from_lines_round_trip_and_validation():
    rows = ["#.'+", '="  ']
    grid = WallGrid.from_lines(rows)
    assert grid.to_lines() == rows
    assert grid.get(2, 0) == WallState.DOOR_OPEN
    assert grid.get(1, 1) == WallState.CURTAIN
    assert grid.get(3, 1) == WallState.NONE

    with pytest.raises(ValueError):
        WallGrid.from_lines([])
    with pytest.raises(ValueError):
        WallGrid.from_lines(["..", "."])


def test_copy_is_independent():
    grid = WallGrid(2, 2, fill=WallState.WALL)
    clone = grid.copy()
    assert clone == grid
    clone.set(0, 0, WallState.FLOOR)
    assert grid.get(0, 0) == WallState.WALL
    assert clone != grid


def test_vision_and_collision_helpers():
    grid = WallGrid.from_lines(["#=.+"])
    assert grid.blocks_vision(0, 0) and grid.collides(0, 0)
    assert not grid.blocks_vision(1, 0) and grid.collides(1, 0)
    assert not grid.blocks_vision(2, 0) and not grid.collides(2, 0)
    assert grid.blocks_vision(3, 0) and grid.collides(3, 0)
    # Off-grid cells block movement only
    assert grid.collides(-1, 0)
    assert not grid.blocks_vision(-1, 0)


def test_invalid_dimensions():
    with pytest.raises(ValueError):
        WallGrid(0, 3)
    with pytest.raises(ValueError):
        WallGrid(3, -1)


def test_unknown_state_values_are_ignored():
    grid = WallGrid(2, 2)
    grid.set(0, 0, 55)
    grid.set(1, 1, 100)
    assert grid.get(0, 0) == WallState.FLOOR
    assert grid.get(1, 1) == WallState.WALL
