"""zonekit: tile zones with maze generation, light and wall autotiling."""

__version__ = "0.1.0"

from .autotile import DIRECTION_TABLE, Neighbor, WallDirection, classify_reference, resolve
from .config import LightSettings, MazeSettings, Settings
from .errors import ConfigError, ZoneKitError
from .grid import WallGrid
from .light import propagate_light
from .maze import MazeGenerator, create_maze
from .rng import random_function
from .walls import WALL_PROPERTIES, WallProperty, WallState
from .zone import Zone

__all__ = [
    "__version__",
    "ConfigError",
    "DIRECTION_TABLE",
    "LightSettings",
    "MazeGenerator",
    "MazeSettings",
    "Neighbor",
    "Settings",
    "WALL_PROPERTIES",
    "WallDirection",
    "WallGrid",
    "WallProperty",
    "WallState",
    "Zone",
    "ZoneKitError",
    "classify_reference",
    "create_maze",
    "propagate_light",
    "random_function",
    "resolve",
]
