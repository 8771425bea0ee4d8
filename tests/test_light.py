import pytest

from zonekit.config import LightSettings
from zonekit.light import MIN_VISIBLE_LIGHT, is_visible_line, line_cells, propagate_light
from zonekit.zone import Zone


def test_line_cells_include_both_ends():
    line = list(line_cells(0, 0, 3, 1))
    assert line[0] == (0, 0)
    assert line[-1] == (3, 1)
    assert len(line) == 4


def test_wall_column_blocks_light():
    zone = Zone.from_lines(["...#..."] * 3)
    propagate_light(zone, 1, 1, 10, dispersion=0.0)
    assert zone.get_light(1, 1) == pytest.approx(1.0)
    assert zone.get_light(3, 1) > 0  # the wall facing the viewer is lit
    for y in range(3):
        for x in range(4, 7):
            assert zone.get_light(x, y) == 0


def test_light_falls_off_with_distance():
    zone = Zone(9, 1)
    propagate_light(zone, 0, 0, 8, darkness=1.0)
    values = [zone.get_light(x, 0) for x in range(9)]
    assert values == sorted(values, reverse=True)
    assert min(values) >= MIN_VISIBLE_LIGHT


def test_zero_darkness_lights_everything_fully():
    zone = Zone(5, 5)
    propagate_light(zone, 2, 2, 4, darkness=0.0)
    assert all(v == pytest.approx(1.0) for row in zone.light_map() for v in row)


def test_light_range_limits_reach():
    zone = Zone(11, 1)
    propagate_light(zone, 0, 0, 3)
    assert zone.get_light(3, 0) > 0
    assert zone.get_light(4, 0) == 0


CORRIDOR = [
    "#####",
    "#...#",
    "###.#",
    "###.#",
]


def test_dispersion_bends_light_one_cell_around_corner():
    zone = Zone.from_lines(CORRIDOR)
    propagate_light(zone, 1, 1, 5, dispersion=0.0)
    assert zone.get_light(3, 2) == 0
    assert zone.get_light(3, 3) == 0

    propagate_light(zone, 1, 1, 5, dispersion=0.5)
    assert zone.get_light(3, 2) == pytest.approx(0.5 * zone.get_light(2, 1))
    assert zone.get_light(3, 3) == 0


def test_light_is_cleared_between_updates():
    zone = Zone.from_lines(["...#..."] * 3)
    propagate_light(zone, 1, 1, 10)
    assert zone.get_light(0, 1) > 0
    propagate_light(zone, 5, 1, 10)
    assert zone.get_light(0, 1) == 0
    assert zone.get_light(5, 1) == pytest.approx(1.0)


def test_origin_outside_zone_leaves_it_dark():
    zone = Zone(4, 4)
    zone.set_light(1, 1, 0.9)
    propagate_light(zone, -1, 10, 5)
    assert all(v == 0 for row in zone.light_map() for v in row)


def test_values_are_never_negative():
    zone = Zone.from_lines(CORRIDOR)
    propagate_light(zone, 3, 3, 20, dispersion=1.0, darkness=1.0)
    assert all(v >= 0 for row in zone.light_map() for v in row)


def test_line_of_sight_ignores_endpoints():
    zone = Zone.from_lines(["#.#"])
    assert is_visible_line(zone, 0, 0, 2, 0)
    zone = Zone.from_lines([".#."])
    assert not is_visible_line(zone, 0, 0, 2, 0)


def test_opaque_target_can_be_excluded():
    zone = Zone.from_lines(["..#"])
    assert is_visible_line(zone, 0, 0, 2, 0)
    assert not is_visible_line(zone, 0, 0, 2, 0, include_opaque_target=False)
    assert is_visible_line(zone, 0, 0, 1, 0, include_opaque_target=False)


def test_line_to_cell_outside_zone_is_not_visible():
    zone = Zone(3, 3)
    assert not is_visible_line(zone, 1, 1, 5, 1)
    assert not is_visible_line(zone, -1, 1, 1, 1)


def test_zone_update_light_uses_default_propagator():
    zone = Zone(5, 5)
    zone.update_light_with(2, 2, LightSettings(light_range=1, dispersion=0.0))
    assert zone.get_light(2, 2) == pytest.approx(1.0)
    assert zone.get_light(3, 3) > 0
    assert zone.get_light(4, 4) == 0
