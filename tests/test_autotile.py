import pytest

from zonekit.autotile import (
    DIAGONALS,
    DIRECTION_TABLE,
    Neighbor,
    WallDirection,
    classify_reference,
    direction_map,
    neighbor_mask,
    resolve,
)
from zonekit.walls import WallState
from zonekit.zone import Zone


def test_table_agrees_with_reference_for_every_mask():
    assert len(DIRECTION_TABLE) == 256
    mismatches = [m for m in range(256) if DIRECTION_TABLE[m] != classify_reference(m)]
    assert mismatches == []


def test_every_direction_key_but_cnul_is_reachable():
    assert set(WallDirection) - set(DIRECTION_TABLE) == {WallDirection.CORNER_NUPLEFT}


def test_fully_enclosed_cell_resolves_to_none():
    zone = Zone.from_lines(["###", "###", "###"])
    assert resolve(zone, 1, 1) == WallDirection.NONE


def test_isolated_wall_in_open_floor_is_pillar():
    zone = Zone.from_lines(["...", ".#.", "..."])
    assert resolve(zone, 1, 1) == WallDirection.PILLAR


def test_up_down_then_left():
    zone = Zone.from_lines([
        "#.#",
        "###",
        "#.#",
    ])
    assert resolve(zone, 1, 1) == WallDirection.UPDOWN
    zone.set(0, 1, WallState.FLOOR)
    assert resolve(zone, 1, 1) == WallDirection.UPDOWNLEFT


def test_off_grid_neighbours_are_closed():
    zone = Zone.from_lines(["#.", ".."])
    # Corner wall: right, down and down-right open; everything else is off-grid
    assert neighbor_mask(zone, 0, 0) == Neighbor.RIGHT | Neighbor.DOWN | Neighbor.DOWNRIGHT
    assert resolve(zone, 0, 0) == WallDirection.DOWNRIGHT


@pytest.mark.parametrize(
    "rows, expected",
    [
        (["#.#", "##.", "###"], WallDirection.UPRIGHT),
        (["#.#", "##.", ".##"], WallDirection.UPRIGHT_C),
        (["#.#", "###", ".#."], WallDirection.UP_CLR),
        (["###", "###", "#.#"], WallDirection.DOWN),
        ([".##", "###", "#.#"], WallDirection.DOWN_CL),
        (["###", ".#.", "###"], WallDirection.LEFTRIGHT),
        (["#.#", ".#.", "###"], WallDirection.LEFTRIGHTUP),
        ([".##", "###", "##."], WallDirection.CORNER_BACK),
        ([".#.", "###", ".##"], WallDirection.CORNER_NDOWNRIGHT),
        (["##.", "###", "##."], WallDirection.CORNER_RIGHT),
        (["##.", "###", ".#."], WallDirection.CORNER_NUPRIGHT),
        ([".##", "###", ".#."], WallDirection.CORNER_NUPRIGHT),
    ],
)
def test_representative_patterns(rows, expected):
    zone = Zone.from_lines(rows)
    assert resolve(zone, 1, 1) == expected


def test_top_left_closed_corner_shares_top_right_key():
    mask = int(DIAGONALS) & ~int(Neighbor.UPLEFT)
    assert classify_reference(mask) == WallDirection.CORNER_NUPRIGHT
    assert DIRECTION_TABLE[mask] == WallDirection.CORNER_NUPRIGHT
    assert DIRECTION_TABLE[int(DIAGONALS) & ~int(Neighbor.UPRIGHT)] == WallDirection.CORNER_NUPRIGHT


def test_doors_windows_and_curtains_open_edges():
    for glyph in ("+", "'", "=", '"'):
        zone = Zone.from_lines(["#" + glyph + "#", "###", "###"])
        assert resolve(zone, 1, 1) == WallDirection.UP


def test_vision_gating_closes_unlit_neighbours():
    zone = Zone.from_lines([
        "#.#",
        "###",
        "#.#",
    ])
    zone.set_light(1, 0, 0.8)
    assert resolve(zone, 1, 1, vision_gated=True) == WallDirection.UP
    zone.set_light(1, 2, 0.1)
    assert resolve(zone, 1, 1, vision_gated=True) == WallDirection.UPDOWN
    # Ungated resolution ignores light entirely
    zone.clear_light()
    assert resolve(zone, 1, 1, vision_gated=False) == WallDirection.UPDOWN


def test_direction_map_covers_walls_only():
    zone = Zone.from_lines([
        "###",
        "#..",
        "###",
    ])
    directions = direction_map(zone)
    assert set(directions) == {(0, 0), (1, 0), (2, 0), (0, 1), (0, 2), (1, 2), (2, 2)}
    assert directions[(0, 1)] == WallDirection.RIGHT
    assert directions[(1, 0)] == WallDirection.DOWN


def test_direction_keys_are_strings():
    assert WallDirection.PILLAR == "pillar"
    assert WallDirection.CORNER_FOR.value == "cfor"
