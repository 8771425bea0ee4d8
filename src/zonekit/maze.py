from __future__ import annotations

import logging
import time
from typing import List, Optional, Tuple

from .config import MazeSettings
from .grid import Coord, WallGrid
from .rng import DEFAULT_SEED, RandomFunction, Seed, random_function
from .walls import WallState

logger = logging.getLogger(__name__)

_LATTICE_STEPS: Tuple[Coord, ...] = ((2, 0), (0, 2), (-2, 0), (0, -2))


def snap_to_room(value: int, limit: int) -> Optional[int]:
    """Snap a coordinate onto the odd room lattice inside [1, limit - 2].

    Returns None when the axis is too short to hold any room.
    """
    if limit < 3:
        return None
    if value % 2 == 0:
        value -= 1
    highest = limit - 2 if (limit - 2) % 2 == 1 else limit - 3
    return max(1, min(highest, value))


class MazeGenerator:
    """Growing-tree style maze carver on an odd/even lattice.

    Algorithm:
    - Start from an all-WALL working grid. Odd (x, y) cells are rooms; the cell
      between two lattice neighbours is their connector.
    - Grow from a single origin room: repeatedly pick a random room on the
      growth front, carve one passage to a random neighbour room and push that
      room onto the front. ``connect_prob`` occasionally carves into an already
      open room to create loops; ``seed_prob`` decides whether a room stays on
      the front. ``max_iterations`` bounds the loop.
    - Clean up the even sub-lattice: drop free-standing wall stubs and isolated
      pillars.
    - Turn single-tile corridor junctions into doors and open some of them.

    The working grid is private until ``generate`` publishes it to the zone in
    a single replacement, so readers never observe a half-built maze. The
    cleanup and door phases are public and work on any WallGrid, which allows
    decorating hand-authored layouts too.

    No phase raises: out-of-range settings are clamped by MazeSettings and the
    iteration cap turns a stalled front into an early stop.
    """

    def __init__(
        self,
        settings: Optional[MazeSettings] = None,
        rand: Optional[RandomFunction] = None,
        seed: Seed = DEFAULT_SEED,
    ) -> None:
        self.settings = settings or MazeSettings()
        self._injected = rand is not None
        self.rand: RandomFunction = rand if rand is not None else random_function(seed)

    def _roll(self, probability: float) -> bool:
        return self.rand() < probability

    # ------------------------ Entry points ------------------------
    def generate(self, zone, seed: Optional[Seed] = None) -> WallGrid:
        """Build a maze for ``zone`` and publish it as the zone's wall grid.

        An injected ``rand`` is used as-is unless ``seed`` is given; otherwise
        every call starts a fresh random source for ``seed`` (default:
        ``zone.seed``), so repeated calls reproduce the same maze.
        """
        start = time.perf_counter()
        if seed is not None or not self._injected:
            self.rand = random_function(zone.seed if seed is None else seed)
        grid = self.build(zone.width, zone.height)
        zone.replace_walls(grid)
        logger.info("Maze generation took %.1f ms", (time.perf_counter() - start) * 1000.0)
        return grid

    def build(self, zone_width: int, zone_height: int) -> WallGrid:
        """Run every phase on a fresh private grid and return it unpublished."""
        width, height = self.settings.target_size(zone_width, zone_height)
        grid = WallGrid(zone_width, zone_height, fill=WallState.WALL)
        self.grow(grid, width, height)
        self.decorate(grid, width, height)
        return grid

    def decorate(self, grid: WallGrid, width: Optional[int] = None, height: Optional[int] = None) -> None:
        """Apply cleanup and door phases to ``grid`` in place."""
        width = grid.width if width is None else width
        height = grid.height if height is None else height
        self.remove_freewalls(grid, width, height)
        self.remove_pillars(grid, width, height)
        self.insert_doors(grid, width, height)
        self.open_doors(grid, width, height)

    # ------------------------ Growth ------------------------
    def origin_for(self, width: int, height: int) -> Optional[Coord]:
        """Return the first room of the growth front, or None if no room fits."""
        if self.settings.origin is not None:
            ox, oy = self.settings.origin
        else:
            ox, oy = (width - 1) // 2, (height - 1) // 2
        x = snap_to_room(ox, width)
        y = snap_to_room(oy, height)
        if x is None or y is None:
            return None
        return x, y

    @staticmethod
    def lattice_neighbors(x: int, y: int, width: int, height: int) -> List[Coord]:
        """Rooms two cells away along an axis that stay inside the generation margin."""
        return [
            (x + dx, y + dy)
            for dx, dy in _LATTICE_STEPS
            if 1 <= x + dx < width - 1 and 1 <= y + dy < height - 1
        ]

    def grow(self, grid: WallGrid, width: int, height: int) -> int:
        """Carve passages into ``grid``; returns the number of iterations used."""
        origin = self.origin_for(width, height)
        if origin is None:
            logger.warning("Maze area %dx%d too small for any room; leaving it solid", width, height)
            return 0

        front: List[Coord] = [origin]
        iterations = 0
        max_iterations = self.settings.max_iterations
        while front and iterations < max_iterations:
            iterations += 1
            current = front[int(self.rand() * len(front))]
            cx, cy = current
            grid.set(cx, cy, WallState.FLOOR)

            candidates = self.lattice_neighbors(cx, cy, width, height)
            unconnected = 0
            attempts = 0
            while attempts < len(candidates) * 2:
                attempts += 1
                index = int(self.rand() * len(candidates))
                nx, ny = candidates[index]
                connector = ((cx + nx) // 2, (cy + ny) // 2)
                if grid.get(*connector) == WallState.FLOOR:
                    candidates.pop(index)
                    continue
                unconnected += 1
                if grid.get(nx, ny) == WallState.FLOOR and not self._roll(self.settings.connect_prob):
                    candidates.pop(index)
                    continue
                grid.set(nx, ny, WallState.FLOOR)
                front.append((nx, ny))
                grid.set(connector[0], connector[1], WallState.FLOOR)
                break

            if unconnected == 0 or not self._roll(self.settings.seed_prob):
                front.remove(current)

        if front:
            logger.debug("Maze growth hit iteration cap %d with %d rooms still on the front", max_iterations, len(front))
        else:
            logger.debug("Maze growth exhausted its front after %d iterations", iterations)
        return iterations

    # ------------------------ Cleanup ------------------------
    @staticmethod
    def _extended_wall_count(grid: WallGrid, x: int, y: int) -> int:
        return sum(1 for dx, dy in _LATTICE_STEPS if grid.get(x + dx, y + dy) == WallState.WALL)

    @staticmethod
    def _stub_cells(width: int, height: int):
        for y in range(2, height - 1, 2):
            for x in range(2, width - 1, 2):
                yield x, y

    def remove_freewalls(self, grid: WallGrid, width: Optional[int] = None, height: Optional[int] = None) -> int:
        """Turn wall stubs hanging off a single wall into floor; returns how many were removed."""
        width = grid.width if width is None else width
        height = grid.height if height is None else height
        removed = 0
        for x, y in self._stub_cells(width, height):
            if grid.get(x, y) != WallState.WALL:
                continue
            if grid.wall_neighbor_count(x, y) != 1 or self._extended_wall_count(grid, x, y) != 3:
                continue
            if self._roll(self.settings.freewall_prob):
                continue
            grid.set(x, y, WallState.FLOOR)
            removed += 1
        logger.debug("Removed %d free walls", removed)
        return removed

    def remove_pillars(self, grid: WallGrid, width: Optional[int] = None, height: Optional[int] = None) -> int:
        """Turn isolated single-cell walls into floor; returns how many were removed."""
        width = grid.width if width is None else width
        height = grid.height if height is None else height
        removed = 0
        for x, y in self._stub_cells(width, height):
            if grid.get(x, y) != WallState.WALL or grid.wall_neighbor_count(x, y) != 0:
                continue
            if self._roll(self.settings.pillar_prob):
                continue
            grid.set(x, y, WallState.FLOOR)
            removed += 1
        logger.debug("Removed %d pillars", removed)
        return removed

    # ------------------------ Doors ------------------------
    @staticmethod
    def is_door_junction(grid: WallGrid, x: int, y: int) -> bool:
        """True if (x, y) is a one-tile corridor mouth worth a door.

        Horizontal case: floor to the left and right, wall above and below,
        the corridor continues on at least one side two cells out and a wall
        sits at least at one vertical distance-2 cell. The vertical case is
        the same pattern rotated.
        """
        floor, wall = WallState.FLOOR, WallState.WALL
        get = grid.get
        horizontal = (
            get(x - 1, y) == floor and get(x + 1, y) == floor
            and get(x, y - 1) == wall and get(x, y + 1) == wall
            and (get(x - 2, y) == floor or get(x + 2, y) == floor)
            and (get(x, y - 2) == wall or get(x, y + 2) == wall)
        )
        if horizontal:
            return True
        return (
            get(x - 1, y) == wall and get(x + 1, y) == wall
            and get(x, y - 1) == floor and get(x, y + 1) == floor
            and (get(x - 2, y) == wall or get(x + 2, y) == wall)
            and (get(x, y - 2) == floor or get(x, y + 2) == floor)
        )

    def insert_doors(self, grid: WallGrid, width: Optional[int] = None, height: Optional[int] = None) -> int:
        """Place closed doors on qualifying corridor junctions; returns how many were placed."""
        width = grid.width if width is None else width
        height = grid.height if height is None else height
        placed = 0
        for y in range(1, height - 1):
            for x in range(1, width - 1):
                if grid.get(x, y) != WallState.FLOOR or not self._roll(self.settings.door_prob):
                    continue
                if 2 <= grid.wall_neighbor_count(x, y) <= 4 and self.is_door_junction(grid, x, y):
                    grid.set(x, y, WallState.DOOR_CLOSED)
                    placed += 1
        logger.debug("Placed %d doors", placed)
        return placed

    def open_doors(self, grid: WallGrid, width: Optional[int] = None, height: Optional[int] = None) -> int:
        """Open closed doors with ``door_open_prob``; returns how many were opened."""
        width = grid.width if width is None else width
        height = grid.height if height is None else height
        opened = 0
        for y in range(height):
            for x in range(width):
                if grid.get(x, y) == WallState.DOOR_CLOSED and self._roll(self.settings.door_open_prob):
                    grid.set(x, y, WallState.DOOR_OPEN)
                    opened += 1
        logger.debug("Opened %d doors", opened)
        return opened


def create_maze(zone, settings: Optional[MazeSettings] = None, seed: Optional[Seed] = None) -> WallGrid:
    """Generate a maze for ``zone`` with a fresh generator; see MazeGenerator."""
    return MazeGenerator(settings).generate(zone, seed=seed)
