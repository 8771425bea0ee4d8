from __future__ import annotations

import logging
from enum import Enum, IntFlag
from typing import Dict, Mapping, Tuple

from .walls import WallState, is_open

logger = logging.getLogger(__name__)


class WallDirection(str, Enum):
    """Rendering variant of a wall tile, named after the sides that open onto floor.

    Plain keys (u, d, ud, ...) name open orthogonal sides. ``*_C`` keys are
    orthogonal corners with the opposite diagonal also open ("rounded"), and
    ``CORNER_*`` keys are used when only diagonals are open.
    """

    PILLAR = "pillar"
    LEFT = "l"
    RIGHT = "r"
    UP = "u"
    DOWN = "d"
    UPLEFT = "ul"
    UPRIGHT = "ur"
    DOWNLEFT = "dl"
    DOWNRIGHT = "dr"
    UPDOWN = "ud"
    LEFTRIGHT = "lr"
    LEFTRIGHTDOWN = "lrd"
    LEFTRIGHTUP = "lru"
    UPDOWNLEFT = "udl"
    UPDOWNRIGHT = "udr"
    NONE = "n"
    CORNER_DOWNRIGHT = "cdr"
    CORNER_DOWNLEFT = "cdl"
    CORNER_UPRIGHT = "cur"
    CORNER_UPLEFT = "cul"
    DOWNRIGHT_C = "drc"
    DOWNLEFT_C = "dlc"
    UPRIGHT_C = "urc"
    UPLEFT_C = "ulc"
    DOWN_CLR = "dclr"
    DOWN_CL = "dcl"
    DOWN_CR = "dcr"
    UP_CLR = "uclr"
    UP_CL = "ucl"
    UP_CR = "ucr"
    RIGHT_CUD = "rcud"
    RIGHT_CD = "rcd"
    RIGHT_CU = "rcu"
    LEFT_CUD = "lcud"
    LEFT_CD = "lcd"
    LEFT_CU = "lcu"
    CORNER_NDOWNRIGHT = "cndr"
    CORNER_NDOWNLEFT = "cndl"
    CORNER_NUPRIGHT = "cnur"
    CORNER_NUPLEFT = "cnul"
    CORNER_DOWN = "cd"
    CORNER_LEFT = "cl"
    CORNER_RIGHT = "cr"
    CORNER_UP = "cu"
    CORNER_ALL = "call"
    CORNER_FOR = "cfor"  # forward slash: up-right and down-left
    CORNER_BACK = "cback"  # back slash: up-left and down-right


class Neighbor(IntFlag):
    """Bit assigned to each of the 8 neighbours in an openness mask."""

    UP = 1
    DOWN = 2
    LEFT = 4
    RIGHT = 8
    UPLEFT = 16
    UPRIGHT = 32
    DOWNLEFT = 64
    DOWNRIGHT = 128


ORTHOGONALS = Neighbor.UP | Neighbor.DOWN | Neighbor.LEFT | Neighbor.RIGHT
DIAGONALS = Neighbor.UPLEFT | Neighbor.UPRIGHT | Neighbor.DOWNLEFT | Neighbor.DOWNRIGHT

NEIGHBOR_OFFSETS: Tuple[Tuple[Neighbor, int, int], ...] = (
    (Neighbor.UP, 0, -1),
    (Neighbor.DOWN, 0, 1),
    (Neighbor.LEFT, -1, 0),
    (Neighbor.RIGHT, 1, 0),
    (Neighbor.UPLEFT, -1, -1),
    (Neighbor.UPRIGHT, 1, -1),
    (Neighbor.DOWNLEFT, -1, 1),
    (Neighbor.DOWNRIGHT, 1, 1),
)

_U, _D, _L, _R = Neighbor.UP, Neighbor.DOWN, Neighbor.LEFT, Neighbor.RIGHT
_UL, _UR, _DL, _DR = Neighbor.UPLEFT, Neighbor.UPRIGHT, Neighbor.DOWNLEFT, Neighbor.DOWNRIGHT
_W = WallDirection

# Orthogonal pattern -> (diagonals that refine it, refined-diagonals -> key).
# Patterns with two or more open sides on one axis ignore the diagonals.
_RULES: Mapping[int, Tuple[int, Mapping[int, WallDirection]]] = {
    _U | _D | _L | _R: (0, {0: _W.PILLAR}),
    _U | _D | _L: (0, {0: _W.UPDOWNLEFT}),
    _U | _D | _R: (0, {0: _W.UPDOWNRIGHT}),
    _U | _D: (0, {0: _W.UPDOWN}),
    _U | _L | _R: (0, {0: _W.LEFTRIGHTUP}),
    _D | _L | _R: (0, {0: _W.LEFTRIGHTDOWN}),
    _L | _R: (0, {0: _W.LEFTRIGHT}),
    _U | _L: (_DR, {0: _W.UPLEFT, _DR: _W.UPLEFT_C}),
    _U | _R: (_DL, {0: _W.UPRIGHT, _DL: _W.UPRIGHT_C}),
    _D | _L: (_UR, {0: _W.DOWNLEFT, _UR: _W.DOWNLEFT_C}),
    _D | _R: (_UL, {0: _W.DOWNRIGHT, _UL: _W.DOWNRIGHT_C}),
    _U: (_DL | _DR, {0: _W.UP, _DL: _W.UP_CL, _DR: _W.UP_CR, _DL | _DR: _W.UP_CLR}),
    _D: (_UL | _UR, {0: _W.DOWN, _UL: _W.DOWN_CL, _UR: _W.DOWN_CR, _UL | _UR: _W.DOWN_CLR}),
    _L: (_UR | _DR, {0: _W.LEFT, _UR: _W.LEFT_CU, _DR: _W.LEFT_CD, _UR | _DR: _W.LEFT_CUD}),
    _R: (_UL | _DL, {0: _W.RIGHT, _UL: _W.RIGHT_CU, _DL: _W.RIGHT_CD, _UL | _DL: _W.RIGHT_CUD}),
    0: (DIAGONALS, {
        0: _W.NONE,
        _UL: _W.CORNER_UPLEFT,
        _UR: _W.CORNER_UPRIGHT,
        _DL: _W.CORNER_DOWNLEFT,
        _DR: _W.CORNER_DOWNRIGHT,
        _UL | _UR: _W.CORNER_UP,
        _DL | _DR: _W.CORNER_DOWN,
        _UL | _DL: _W.CORNER_LEFT,
        _UR | _DR: _W.CORNER_RIGHT,
        _UR | _DL: _W.CORNER_FOR,
        _UL | _DR: _W.CORNER_BACK,
        _UL | _UR | _DR: _W.CORNER_NDOWNLEFT,
        _UL | _UR | _DL: _W.CORNER_NDOWNRIGHT,
        _UL | _DL | _DR: _W.CORNER_NUPRIGHT,
        # UL closed shares cnur with UR closed; no mask yields cnul
        _UR | _DL | _DR: _W.CORNER_NUPRIGHT,
        DIAGONALS: _W.CORNER_ALL,
    }),
}


def _build_table() -> Tuple[WallDirection, ...]:
    table = []
    for mask in range(256):
        relevant, keys = _RULES[mask & ORTHOGONALS]
        table.append(keys[mask & relevant])
    return tuple(table)


DIRECTION_TABLE: Tuple[WallDirection, ...] = _build_table()


def classify_reference(mask: int) -> WallDirection:
    """Classify an openness mask with explicit branching.

    This is the readable form of the autotiling rules, kept to validate
    DIRECTION_TABLE; runtime lookups go through the table.
    """
    u, d = bool(mask & _U), bool(mask & _D)
    l, r = bool(mask & _L), bool(mask & _R)
    ul, ur = bool(mask & _UL), bool(mask & _UR)
    dl, dr = bool(mask & _DL), bool(mask & _DR)

    if u and d:
        if l and r:
            return WallDirection.PILLAR
        if l:
            return WallDirection.UPDOWNLEFT
        if r:
            return WallDirection.UPDOWNRIGHT
        return WallDirection.UPDOWN

    if u or d:
        if l and r:
            return WallDirection.LEFTRIGHTUP if u else WallDirection.LEFTRIGHTDOWN
        if u:
            if l:
                return WallDirection.UPLEFT_C if dr else WallDirection.UPLEFT
            if r:
                return WallDirection.UPRIGHT_C if dl else WallDirection.UPRIGHT
            if dl and dr:
                return WallDirection.UP_CLR
            if dl:
                return WallDirection.UP_CL
            if dr:
                return WallDirection.UP_CR
            return WallDirection.UP
        if l:
            return WallDirection.DOWNLEFT_C if ur else WallDirection.DOWNLEFT
        if r:
            return WallDirection.DOWNRIGHT_C if ul else WallDirection.DOWNRIGHT
        if ul and ur:
            return WallDirection.DOWN_CLR
        if ul:
            return WallDirection.DOWN_CL
        if ur:
            return WallDirection.DOWN_CR
        return WallDirection.DOWN

    if l and r:
        return WallDirection.LEFTRIGHT
    if l:
        if ur and dr:
            return WallDirection.LEFT_CUD
        if ur:
            return WallDirection.LEFT_CU
        if dr:
            return WallDirection.LEFT_CD
        return WallDirection.LEFT
    if r:
        if ul and dl:
            return WallDirection.RIGHT_CUD
        if ul:
            return WallDirection.RIGHT_CU
        if dl:
            return WallDirection.RIGHT_CD
        return WallDirection.RIGHT

    # Only diagonals left
    if ur:
        if ul:
            if dr:
                return WallDirection.CORNER_ALL if dl else WallDirection.CORNER_NDOWNLEFT
            return WallDirection.CORNER_NDOWNRIGHT if dl else WallDirection.CORNER_UP
        if dr:
            return WallDirection.CORNER_NUPRIGHT if dl else WallDirection.CORNER_RIGHT
        return WallDirection.CORNER_FOR if dl else WallDirection.CORNER_UPRIGHT
    if ul:
        if dr:
            return WallDirection.CORNER_NUPRIGHT if dl else WallDirection.CORNER_BACK
        return WallDirection.CORNER_LEFT if dl else WallDirection.CORNER_UPLEFT
    if dr:
        return WallDirection.CORNER_DOWN if dl else WallDirection.CORNER_DOWNRIGHT
    if dl:
        return WallDirection.CORNER_DOWNLEFT
    return WallDirection.NONE


def neighbor_mask(zone, x: int, y: int, vision_gated: bool = False) -> int:
    """Build the 8-bit openness mask of (x, y).

    ``zone`` needs ``get(x, y)`` and, when ``vision_gated`` is set,
    ``get_light(x, y)``. In vision-gated mode an unlit neighbour reads as WALL
    so undiscovered geometry renders solid.
    """
    mask = 0
    for bit, dx, dy in NEIGHBOR_OFFSETS:
        nx, ny = x + dx, y + dy
        if vision_gated and zone.get_light(nx, ny) <= 0:
            state = WallState.WALL
        else:
            state = zone.get(nx, ny)
        if is_open(state):
            mask |= bit
    return mask


def resolve(zone, x: int, y: int, vision_gated: bool = False) -> WallDirection:
    """Return the rendering direction key for the wall at (x, y)."""
    return DIRECTION_TABLE[neighbor_mask(zone, x, y, vision_gated)]


def direction_map(zone, vision_gated: bool = False) -> Dict[Tuple[int, int], WallDirection]:
    """Resolve every WALL cell of ``zone``; handy for renderers that batch a whole frame."""
    result: Dict[Tuple[int, int], WallDirection] = {}
    for y in range(zone.height):
        for x in range(zone.width):
            if zone.get(x, y) == WallState.WALL:
                result[(x, y)] = resolve(zone, x, y, vision_gated)
    logger.debug("Resolved %d wall directions (vision_gated=%s)", len(result), vision_gated)
    return result
