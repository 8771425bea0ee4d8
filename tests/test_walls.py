import pytest

from zonekit.walls import GLYPHS, WALL_PROPERTIES, WallProperty, WallState, is_open, state_for_glyph


EXPECTED_PROPERTIES = {
    WallState.NONE: (True, True),
    WallState.FLOOR: (True, False),
    WallState.WINDOW: (True, True),
    WallState.DOOR_OPEN: (True, False),
    WallState.WALL: (False, True),
    WallState.CURTAIN: (True, False),
    WallState.DOOR_CLOSED: (False, True),
}


def test_legacy_discriminants_are_stable():
    assert [(s.name, int(s)) for s in WallState] == [
        ("NONE", -1),
        ("FLOOR", 0),
        ("WINDOW", 1),
        ("DOOR_OPEN", 2),
        ("WALL", 100),
        ("CURTAIN", 101),
        ("DOOR_CLOSED", 102),
    ]


@pytest.mark.parametrize("state", list(WallState))
def test_property_table_matches_documented_flags(state):
    vision, collision = EXPECTED_PROPERTIES[state]
    prop = WALL_PROPERTIES[state]
    assert prop.vision is vision
    assert prop.collision is collision


def test_property_table_covers_every_state_and_is_read_only():
    assert set(WALL_PROPERTIES) == set(WallState)
    with pytest.raises(TypeError):
        WALL_PROPERTIES[WallState.WALL] = WallProperty(vision=True, collision=False)  # type: ignore[index]


def test_glyphs_are_unique_and_reversible():
    assert len(set(GLYPHS.values())) == len(WallState)
    for state, glyph in GLYPHS.items():
        assert state_for_glyph(glyph) is state
    assert state_for_glyph("?") is WallState.NONE


def test_only_walls_and_off_grid_are_closed():
    closed = {s for s in WallState if not is_open(s)}
    assert closed == {WallState.WALL, WallState.NONE}
