from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from . import __version__
from .autotile import direction_map
from .config import Settings
from .errors import ConfigError
from .logging_config import configure_logging, level_for_verbosity
from .walls import WallState
from .zone import Zone

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="zonekit",
        description="Generate a maze zone and print it as ASCII or JSON.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", default=None, help="Path to a YAML settings file")
    parser.add_argument("--seed", default=None, help="Generation seed (overrides settings)")
    parser.add_argument("--width", type=int, default=None, help="Zone width (overrides settings)")
    parser.add_argument("--height", type=int, default=None, help="Zone height (overrides settings)")
    parser.add_argument(
        "--light",
        default=None,
        metavar="X,Y",
        help="Propagate light from X,Y before dumping (JSON includes light and directions)",
    )
    parser.add_argument("--format", choices=("ascii", "json"), default="ascii")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity (-v, -vv)")
    return parser.parse_args(argv)


def build_zone(settings: Settings) -> Zone:
    zone = Zone(settings.width, settings.height, seed=settings.seed)
    zone.create_maze(settings=settings.maze)
    return zone


def zone_summary(zone: Zone, vision_gated: bool = False) -> Dict[str, Any]:
    """Serializable snapshot of a zone: layout, door counts, light and wall directions."""
    walls = zone.walls
    directions = direction_map(zone, vision_gated=vision_gated)
    return {
        "seed": str(zone.seed),
        "width": zone.width,
        "height": zone.height,
        "grid": zone.to_lines(),
        "counts": {state.name.lower(): walls.count(state) for state in WallState if state != WallState.NONE},
        "light": zone.light_map(),
        "directions": {f"{x},{y}": key.value for (x, y), key in sorted(directions.items(), key=lambda i: (i[0][1], i[0][0]))},
    }


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(default_level=level_for_verbosity(args.verbose))

    try:
        settings = Settings.from_sources(file_path=args.config)
    except ConfigError as exc:
        logger.error("%s", exc)
        return 2
    if args.seed is not None:
        settings.seed = args.seed
    if args.width is not None:
        settings.width = args.width
    if args.height is not None:
        settings.height = args.height
    settings.validate()

    zone = build_zone(settings)

    vision_gated = False
    if args.light:
        try:
            lx, ly = (int(v) for v in args.light.split(","))
        except ValueError:
            logger.error("--light expects X,Y, got %r", args.light)
            return 2
        zone.update_light_with(lx, ly, settings.light)
        vision_gated = True

    if args.format == "json":
        print(json.dumps(zone_summary(zone, vision_gated=vision_gated), indent=2, sort_keys=True))
    else:
        print("\n".join(zone.to_lines()))
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
