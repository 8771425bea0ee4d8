from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .walls import GLYPHS, WALL_PROPERTIES, WallState, state_for_glyph

logger = logging.getLogger(__name__)

Coord = Tuple[int, int]

_NEIGHBOR_OFFSETS: Tuple[Coord, ...] = (
    (-1, -1), (0, -1), (1, -1),
    (-1, 0), (1, 0),
    (-1, 1), (0, 1), (1, 1),
)


@dataclass(frozen=True)
class Size:
    width: int
    height: int


class WallGrid:
    """A safe, bounds-checked 2D grid of WallState values.

    All reads and writes are bounds-checked and never raise:
    - get() returns WallState.NONE outside the grid;
    - set() ignores out-of-bounds coordinates and values that are not a WallState.

    Storage is row-major: cells[y][x]. The zone owns one of these as its wall
    layer; the maze generator builds a private one and hands it over when done.
    """

    __slots__ = ("_w", "_h", "_cells")

    def __init__(self, width: int, height: int, fill: WallState = WallState.FLOOR) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("WallGrid dimensions must be positive")
        self._w = int(width)
        self._h = int(height)
        self._cells: List[List[WallState]] = [[fill for _ in range(self._w)] for _ in range(self._h)]

    @property
    def size(self) -> Size:
        return Size(self._w, self._h)

    @property
    def width(self) -> int:
        return self._w

    @property
    def height(self) -> int:
        return self._h

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self._w and 0 <= y < self._h

    def get(self, x: int, y: int) -> WallState:
        if not self.in_bounds(x, y):
            return WallState.NONE
        return self._cells[y][x]

    def set(self, x: int, y: int, value: WallState) -> None:
        if not self.in_bounds(x, y):
            return
        try:
            state = WallState(value)
        except ValueError:
            logger.warning("Ignoring unknown wall state %r at (%d,%d)", value, x, y)
            return
        self._cells[y][x] = state

    def fill(self, value: WallState) -> None:
        value = WallState(value)
        for row in self._cells:
            for x in range(self._w):
                row[x] = value

    def is_edge(self, x: int, y: int) -> bool:
        """True if (x, y) lies on the outer boundary of the grid."""
        return x == 0 or y == 0 or x == self._w - 1 or y == self._h - 1

    def neighbors(self, x: int, y: int) -> List[Coord]:
        """Return the in-bounds cells of the 8-neighbourhood, excluding (x, y)."""
        return [
            (x + dx, y + dy)
            for dx, dy in _NEIGHBOR_OFFSETS
            if self.in_bounds(x + dx, y + dy)
        ]

    def wall_neighbor_count(self, x: int, y: int) -> int:
        """Count WALL cells in the 8-neighbourhood; off-grid cells do not count."""
        return sum(1 for nx, ny in self.neighbors(x, y) if self._cells[ny][nx] == WallState.WALL)

    def blocks_vision(self, x: int, y: int) -> bool:
        return not WALL_PROPERTIES[self.get(x, y)].vision

    def collides(self, x: int, y: int) -> bool:
        return WALL_PROPERTIES[self.get(x, y)].collision

    def count(self, value: WallState) -> int:
        return sum(1 for row in self._cells for cell in row if cell == value)

    def rows(self) -> List[List[WallState]]:
        """Return a copy of the cells as rows[y][x]."""
        return [row[:] for row in self._cells]

    def copy(self) -> "WallGrid":
        clone = WallGrid(self._w, self._h)
        clone._cells = self.rows()
        return clone

    @classmethod
    def from_lines(cls, lines: Sequence[str]) -> "WallGrid":
        """Create a WallGrid from ASCII rows (see walls.GLYPHS).

        Raises ValueError on empty input or ragged rows; this is an authoring
        helper, so malformed layouts are reported rather than patched up.
        """
        if not lines:
            raise ValueError("lines must not be empty")
        width = len(lines[0])
        if width == 0:
            raise ValueError("line width must be positive")
        for i, row in enumerate(lines):
            if len(row) != width:
                raise ValueError(f"All rows must have equal width; row 0 has {width}, row {i} has {len(row)}")

        grid = cls(width, len(lines))
        for y, row in enumerate(lines):
            for x, ch in enumerate(row):
                grid._cells[y][x] = state_for_glyph(ch)
        logger.debug("Built WallGrid %dx%d from ASCII", width, len(lines))
        return grid

    def to_lines(self) -> List[str]:
        return ["".join(GLYPHS[cell] for cell in row) for row in self._cells]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WallGrid):
            return NotImplemented
        return self._w == other._w and self._h == other._h and self._cells == other._cells

    def __repr__(self) -> str:
        return f"WallGrid(width={self._w}, height={self._h})"

