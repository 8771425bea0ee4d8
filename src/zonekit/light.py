from __future__ import annotations

import logging
from typing import Callable, Dict, Iterator, Tuple

logger = logging.getLogger(__name__)

Coord = Tuple[int, int]

# Dimmest intensity a cell in line of sight can get; 0 is reserved for "not visible".
MIN_VISIBLE_LIGHT = 0.05

# propagate(zone, origin_x, origin_y, light_range, dispersion, darkness)
LightPropagator = Callable[..., None]


def chebyshev_distance(ax: int, ay: int, bx: int, by: int) -> int:
    return max(abs(ax - bx), abs(ay - by))


def line_cells(x0: int, y0: int, x1: int, y1: int) -> Iterator[Coord]:
    """Yield the Bresenham cells from (x0, y0) to (x1, y1), both ends included."""
    dx, dy = abs(x1 - x0), abs(y1 - y0)
    step_x = 1 if x0 < x1 else -1
    step_y = 1 if y0 < y1 else -1
    error = dx - dy
    x, y = x0, y0
    yield x, y
    while (x, y) != (x1, y1):
        doubled = 2 * error
        if doubled >= -dy:
            error -= dy
            x += step_x
        if doubled <= dx:
            error += dx
            y += step_y
        yield x, y


def is_visible_line(zone, x0: int, y0: int, x1: int, y1: int, *, include_opaque_target: bool = True) -> bool:
    """
    Line of sight from (x0, y0) to (x1, y1) across the zone's wall layer.

    Cells strictly between the endpoints must let vision through. With
    include_opaque_target=True the target itself may block vision, so walls
    facing the viewer still count as seen. Off-zone endpoints are never visible.
    """
    if not zone.in_bounds(x0, y0) or not zone.in_bounds(x1, y1):
        return False
    cells = list(line_cells(x0, y0, x1, y1))
    checked = cells[1:-1] if include_opaque_target else cells[1:]
    for x, y in checked:
        if zone.blocks_vision(x, y):
            logger.debug("Sight blocked at (%d,%d) on (%d,%d)->(%d,%d)", x, y, x0, y0, x1, y1)
            return False
    return True


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def propagate_light(
    zone,
    origin_x: int,
    origin_y: int,
    light_range: int,
    dispersion: float = 0.0,
    darkness: float = 1.0,
) -> None:
    """
    Recompute the zone's light map from a single viewer at (origin_x, origin_y).

    - The whole light map is cleared first; only the current view stays lit.
    - Cells within Chebyshev ``light_range`` with line of sight get
      ``1 - darkness * distance / (light_range + 1)``, never below MIN_VISIBLE_LIGHT.
    - ``dispersion`` in [0, 1] lets light bend one cell around corners: an unlit
      cell next to a lit, vision-passing cell receives ``dispersion`` times
      the brightest such neighbour.
    - ``darkness`` in [0, 1] controls how quickly light falls off with distance.

    An origin outside the zone or a negative range leaves the map dark.
    """
    zone.clear_light()
    if not zone.in_bounds(origin_x, origin_y) or light_range < 0:
        logger.debug("No light propagated from (%d,%d) range %d", origin_x, origin_y, light_range)
        return

    dispersion = _clamp(float(dispersion), 0.0, 1.0)
    darkness = _clamp(float(darkness), 0.0, 1.0)

    min_x = max(0, origin_x - light_range)
    max_x = min(zone.width - 1, origin_x + light_range)
    min_y = max(0, origin_y - light_range)
    max_y = min(zone.height - 1, origin_y + light_range)

    lit: Dict[Coord, float] = {}
    for y in range(min_y, max_y + 1):
        for x in range(min_x, max_x + 1):
            if not is_visible_line(zone, origin_x, origin_y, x, y):
                continue
            dist = chebyshev_distance(origin_x, origin_y, x, y)
            lit[(x, y)] = max(MIN_VISIBLE_LIGHT, 1.0 - darkness * dist / (light_range + 1))

    if dispersion > 0.0:
        spilled: Dict[Coord, float] = {}
        for y in range(min_y, max_y + 1):
            for x in range(min_x, max_x + 1):
                if (x, y) in lit:
                    continue
                brightest = max(
                    (lit.get((nx, ny), 0.0) for nx, ny in zone.get_neighbors(x, y) if not zone.blocks_vision(nx, ny)),
                    default=0.0,
                )
                if brightest > 0.0:
                    spilled[(x, y)] = dispersion * brightest
        lit.update(spilled)

    for (x, y), value in lit.items():
        zone.set_light(x, y, value)

    logger.debug(
        "Light from (%d,%d) range %d: %d lit cells (dispersion=%.2f darkness=%.2f)",
        origin_x,
        origin_y,
        light_range,
        len(lit),
        dispersion,
        darkness,
    )
