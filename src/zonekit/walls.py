from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from types import MappingProxyType
from typing import Dict, Mapping


class WallState(IntEnum):
    """What occupies a single zone cell.

    The integer values are the legacy encoding used by stored zone data and are
    kept stable for that reason; nothing in the package depends on their order.
    """

    NONE = -1  # Off-grid / unknown; returned for out-of-bounds reads
    FLOOR = 0
    WINDOW = 1
    DOOR_OPEN = 2
    WALL = 100
    CURTAIN = 101
    DOOR_CLOSED = 102


@dataclass(frozen=True)
class WallProperty:
    """Per-state behaviour flags.

    - vision: True if sight and light pass through the cell.
    - collision: True if the cell blocks movement.
    """

    vision: bool
    collision: bool


WALL_PROPERTIES: Mapping[WallState, WallProperty] = MappingProxyType({
    WallState.NONE: WallProperty(vision=True, collision=True),
    WallState.FLOOR: WallProperty(vision=True, collision=False),
    WallState.WINDOW: WallProperty(vision=True, collision=True),
    WallState.DOOR_OPEN: WallProperty(vision=True, collision=False),
    WallState.WALL: WallProperty(vision=False, collision=True),
    WallState.CURTAIN: WallProperty(vision=True, collision=False),
    WallState.DOOR_CLOSED: WallProperty(vision=False, collision=True),
})


# ASCII authoring format used by WallGrid.from_lines / to_lines
GLYPHS: Mapping[WallState, str] = MappingProxyType({
    WallState.NONE: " ",
    WallState.FLOOR: ".",
    WallState.WINDOW: "=",
    WallState.DOOR_OPEN: "'",
    WallState.WALL: "#",
    WallState.CURTAIN: '"',
    WallState.DOOR_CLOSED: "+",
})

_STATES_BY_GLYPH: Dict[str, WallState] = {glyph: state for state, glyph in GLYPHS.items()}


def state_for_glyph(ch: str) -> WallState:
    """Return the WallState for an ASCII glyph; unknown glyphs map to NONE."""
    return _STATES_BY_GLYPH.get(ch, WallState.NONE)


def is_open(state: WallState) -> bool:
    """Return True if the state counts as an opening for autotiling.

    Only solid walls and off-grid cells are closed; floors, doors, windows and
    curtains all open a wall's edge towards them.
    """
    return state != WallState.WALL and state != WallState.NONE
