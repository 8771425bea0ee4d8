from __future__ import annotations

import dataclasses
import logging
from typing import List, Optional, Sequence

from . import autotile
from .autotile import WallDirection
from .config import LightSettings, MazeSettings
from .grid import Coord, Size, WallGrid
from .light import LightPropagator, propagate_light
from .maze import MazeGenerator
from .rng import DEFAULT_SEED, Seed
from .walls import WallState

logger = logging.getLogger(__name__)


class Zone:
    """A playable level: a wall layer plus a light layer of the same size.

    - Dimensions are fixed at construction; both layers always match them.
    - Reads outside the zone return WallState.NONE (walls) or 0.0 (light).
    - Writes outside the zone are ignored.
    - The wall layer is only ever swapped wholesale by ``replace_walls``; a
      maze run builds elsewhere and publishes once.

    Light is owned by the light collaborator (``light_propagator``), which
    overwrites the light layer on each ``update_light`` call. Resolve wall
    directions in vision-gated mode only after light is up to date.
    """

    def __init__(
        self,
        width: int,
        height: int,
        seed: Seed = DEFAULT_SEED,
        light_propagator: Optional[LightPropagator] = None,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("Zone width/height must be > 0")
        self._size = Size(int(width), int(height))
        self.seed = seed
        self._walls = WallGrid(self._size.width, self._size.height, fill=WallState.FLOOR)
        self._light: List[List[float]] = [[0.0] * self._size.width for _ in range(self._size.height)]
        self.light_propagator: LightPropagator = light_propagator or propagate_light
        logger.debug("Zone created: %dx%d seed=%r", self._size.width, self._size.height, seed)

    @property
    def size(self) -> Size:
        return self._size

    @property
    def width(self) -> int:
        return self._size.width

    @property
    def height(self) -> int:
        return self._size.height

    @property
    def walls(self) -> WallGrid:
        return self._walls

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self._size.width and 0 <= y < self._size.height

    # ------------------------ Walls ------------------------
    def get(self, x: int, y: int) -> WallState:
        return self._walls.get(x, y)

    def set(self, x: int, y: int, value: WallState) -> None:
        self._walls.set(x, y, value)

    def replace_walls(self, grid: WallGrid) -> None:
        """Publish ``grid`` as the wall layer in a single reference swap."""
        if grid.width != self.width or grid.height != self.height:
            raise ValueError(
                f"Wall grid {grid.width}x{grid.height} does not match zone {self.width}x{self.height}"
            )
        self._walls = grid
        logger.debug("Zone walls replaced (%d wall cells)", grid.count(WallState.WALL))

    def is_edge(self, x: int, y: int) -> bool:
        return self._walls.is_edge(x, y)

    def get_wall_neighbor_count(self, x: int, y: int) -> int:
        return self._walls.wall_neighbor_count(x, y)

    def get_neighbors(self, x: int, y: int) -> List[Coord]:
        return self._walls.neighbors(x, y)

    def blocks_vision(self, x: int, y: int) -> bool:
        return self._walls.blocks_vision(x, y)

    def collides(self, x: int, y: int) -> bool:
        return self._walls.collides(x, y)

    # ------------------------ Light ------------------------
    def get_light(self, x: int, y: int) -> float:
        if not self.in_bounds(x, y):
            return 0.0
        return self._light[y][x]

    def set_light(self, x: int, y: int, value: float) -> None:
        if not self.in_bounds(x, y):
            return
        self._light[y][x] = max(0.0, float(value))

    def clear_light(self) -> None:
        for row in self._light:
            for x in range(self._size.width):
                row[x] = 0.0

    def light_map(self) -> List[List[float]]:
        """Return a copy of the light layer as rows[y][x]."""
        return [row[:] for row in self._light]

    def update_light(self, x: int, y: int, light_range: int, dispersion: float, darkness: float) -> None:
        """Recompute light for a viewer at (x, y) through the light collaborator."""
        self.light_propagator(self, x, y, light_range, dispersion, darkness)

    def update_light_with(self, x: int, y: int, settings: LightSettings) -> None:
        self.update_light(x, y, settings.light_range, settings.dispersion, settings.darkness)

    # ------------------------ Autotiling ------------------------
    def wall_direction_vision(self, x: int, y: int, vision_gated: bool) -> WallDirection:
        return autotile.resolve(self, x, y, vision_gated)

    def wall_direction(self, x: int, y: int) -> WallDirection:
        return autotile.resolve(self, x, y, False)

    # ------------------------ Generation ------------------------
    def create_maze(
        self,
        width: Optional[int] = None,
        height: Optional[int] = None,
        settings: Optional[MazeSettings] = None,
        seed: Optional[Seed] = None,
    ) -> WallGrid:
        """Replace the wall layer with a freshly generated maze.

        ``width``/``height`` override the generation area of ``settings``;
        both are clamped to the zone.
        """
        settings = settings or MazeSettings()
        overrides = {}
        if width is not None:
            overrides["width"] = width
        if height is not None:
            overrides["height"] = height
        if overrides:
            settings = dataclasses.replace(settings, **overrides)
        return MazeGenerator(settings).generate(self, seed=seed)

    # ------------------------ ASCII helpers ------------------------
    @classmethod
    def from_lines(cls, lines: Sequence[str], seed: Seed = DEFAULT_SEED) -> "Zone":
        """Build a zone from ASCII rows (see walls.GLYPHS); light starts dark."""
        grid = WallGrid.from_lines(lines)
        zone = cls(grid.width, grid.height, seed=seed)
        zone.replace_walls(grid)
        return zone

    def to_lines(self) -> List[str]:
        return self._walls.to_lines()

    def __repr__(self) -> str:
        return f"Zone(width={self.width}, height={self.height}, seed={self.seed!r})"
