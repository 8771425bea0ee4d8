from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

import yaml
from platformdirs import PlatformDirs

from .errors import ConfigError

logger = logging.getLogger(__name__)

APP_NAME = "zonekit"
SETTINGS_FILENAME = "zonekit.yaml"
ENV_SETTINGS_FILE = "ZONEKIT_SETTINGS_FILE"


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def _as_origin(value: str) -> Tuple[int, int]:
    x, y = value.split(",")
    return int(x), int(y)


@dataclass
class MazeSettings:
    """Tuning knobs for MazeGenerator.

    - width/height: generation area; None means the zone's own size. Larger
      values are clamped to the zone when generating.
    - seed_prob: chance a growth-front room stays on the front after expanding.
    - connect_prob: chance to carve into an already-open room (creates loops).
    - pillar_prob / freewall_prob: chance an isolated pillar / free wall stub survives cleanup.
    - door_prob: chance a qualifying corridor junction becomes a closed door.
    - door_open_prob: chance a closed door starts open.
    - max_iterations: hard cap on growth steps.
    - origin: first room of the growth front; None derives it from the size.

    Out-of-range values are clamped, never rejected.
    """

    width: Optional[int] = None
    height: Optional[int] = None
    seed_prob: float = 0.4
    connect_prob: float = 0.2
    pillar_prob: float = 0.0
    freewall_prob: float = 0.0
    door_prob: float = 1.0
    door_open_prob: float = 0.3
    max_iterations: int = 10000
    origin: Optional[Tuple[int, int]] = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        for name in ("seed_prob", "connect_prob", "pillar_prob", "freewall_prob", "door_prob", "door_open_prob"):
            raw = float(getattr(self, name))
            clamped = _clamp(raw, 0.0, 1.0)
            if clamped != raw:
                logger.warning("MazeSettings.%s=%s out of [0, 1]; clamping to %s", name, raw, clamped)
            setattr(self, name, clamped)
        if self.max_iterations < 0:
            logger.warning("MazeSettings.max_iterations=%s is negative; using 0", self.max_iterations)
            self.max_iterations = 0
        self.max_iterations = int(self.max_iterations)
        for name in ("width", "height"):
            value = getattr(self, name)
            if value is not None and value < 1:
                logger.warning("MazeSettings.%s=%s is not positive; using 1", name, value)
                setattr(self, name, 1)
        if self.origin is not None:
            self.origin = (int(self.origin[0]), int(self.origin[1]))

    def target_size(self, zone_width: int, zone_height: int) -> Tuple[int, int]:
        """Return the generation area, clamped down to the zone's dimensions."""
        width = zone_width if self.width is None else min(self.width, zone_width)
        height = zone_height if self.height is None else min(self.height, zone_height)
        if (self.width or 0) > zone_width or (self.height or 0) > zone_height:
            logger.debug(
                "Maze target %sx%s clamped to zone %dx%d", self.width, self.height, zone_width, zone_height
            )
        return width, height


@dataclass
class LightSettings:
    """Parameters handed to the light collaborator on each update."""

    light_range: int = 8
    dispersion: float = 0.5
    darkness: float = 1.0

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if self.light_range < 0:
            logger.warning("LightSettings.light_range=%s is negative; using 0", self.light_range)
            self.light_range = 0
        self.light_range = int(self.light_range)
        self.dispersion = _clamp(float(self.dispersion), 0.0, 1.0)
        self.darkness = _clamp(float(self.darkness), 0.0, 1.0)


@dataclass
class Settings:
    """Top-level zonekit settings.

    Sources, lowest to highest precedence: dataclass defaults < YAML settings
    file < ZONEKIT_* environment variables.
    """

    seed: str = "zone"
    width: int = 100
    height: int = 100
    log_level: str = "INFO"
    maze: MazeSettings = field(default_factory=MazeSettings)
    light: LightSettings = field(default_factory=LightSettings)

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        for name in ("width", "height"):
            value = int(getattr(self, name))
            if value <= 0:
                logger.warning("Invalid zone %s %s; resetting to 100", name, value)
                value = 100
            setattr(self, name, value)
        self.seed = str(self.seed)
        self.log_level = str(self.log_level).upper()

    def as_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)

    # ------------------------ Loading & Overrides ------------------------
    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Settings":
        allowed = {f.name for f in dataclasses.fields(cls)}
        top = {k: v for k, v in data.items() if k in allowed and k not in ("maze", "light")}
        unknown = set(data) - allowed
        if unknown:
            logger.warning("Ignoring unknown settings keys: %s", ", ".join(sorted(unknown)))
        try:
            maze = _build_section(MazeSettings, data.get("maze") or {})
            light = _build_section(LightSettings, data.get("light") or {})
            return cls(maze=maze, light=light, **top)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid settings value: {exc}") from exc

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
        env = os.environ if env is None else env
        mapping: Dict[str, Tuple[Tuple[str, ...], Callable[[str], Any]]] = {
            "ZONEKIT_SEED": (("seed",), str),
            "ZONEKIT_WIDTH": (("width",), int),
            "ZONEKIT_HEIGHT": (("height",), int),
            "ZONEKIT_LOG_LEVEL": (("log_level",), str),
            "ZONEKIT_MAZE_SEED_PROB": (("maze", "seed_prob"), float),
            "ZONEKIT_MAZE_CONNECT_PROB": (("maze", "connect_prob"), float),
            "ZONEKIT_MAZE_PILLAR_PROB": (("maze", "pillar_prob"), float),
            "ZONEKIT_MAZE_FREEWALL_PROB": (("maze", "freewall_prob"), float),
            "ZONEKIT_MAZE_DOOR_PROB": (("maze", "door_prob"), float),
            "ZONEKIT_MAZE_DOOR_OPEN_PROB": (("maze", "door_open_prob"), float),
            "ZONEKIT_MAZE_MAX_ITERATIONS": (("maze", "max_iterations"), int),
            "ZONEKIT_MAZE_ORIGIN": (("maze", "origin"), _as_origin),
            "ZONEKIT_LIGHT_RANGE": (("light", "light_range"), int),
            "ZONEKIT_LIGHT_DISPERSION": (("light", "dispersion"), float),
            "ZONEKIT_LIGHT_DARKNESS": (("light", "darkness"), float),
        }
        out: Dict[str, Any] = {}
        for env_key, (path, caster) in mapping.items():
            if env_key not in env or env[env_key] == "":
                continue
            try:
                value = caster(env[env_key])
            except ValueError as exc:
                logger.error("Invalid env for %s=%r: %s", env_key, env[env_key], exc)
                continue
            target = out
            for part in path[:-1]:
                target = target.setdefault(part, {})
            target[path[-1]] = value
        return out

    @classmethod
    def from_yaml_file(cls, path: Path) -> Dict[str, Any]:
        """Read a YAML settings file into a plain dict.

        A missing file yields {}; unreadable or malformed files raise ConfigError.
        """
        if not path.exists():
            logger.debug("Settings file not found: %s", path)
            return {}
        try:
            with path.open("r", encoding="utf-8") as f:
                doc = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigError(f"Failed to read settings file {path}: {exc}") from exc
        if not isinstance(doc, dict):
            raise ConfigError(f"Settings file {path} must contain a mapping, got {type(doc).__name__}")
        logger.debug("Loaded settings file: %s", path)
        return doc

    @classmethod
    def discover_config_path(cls, env: Optional[Mapping[str, str]] = None) -> Optional[Path]:
        env = os.environ if env is None else env
        env_path = env.get(ENV_SETTINGS_FILE)
        if env_path:
            return Path(env_path).expanduser().resolve()
        default_path = Path(PlatformDirs(appname=APP_NAME, appauthor=False).user_config_dir) / SETTINGS_FILENAME
        if default_path.exists():
            return default_path
        return None

    @classmethod
    def from_sources(
        cls,
        *,
        env: Optional[Mapping[str, str]] = None,
        file_path: Optional[Path | str] = None,
    ) -> "Settings":
        data: Dict[str, Any] = {}
        if file_path is not None:
            chosen_path: Optional[Path] = Path(file_path).expanduser().resolve()
        else:
            chosen_path = cls.discover_config_path(env)
        if chosen_path is not None:
            data = _deep_merge(data, cls.from_yaml_file(chosen_path))
        data = _deep_merge(data, cls.from_env(env))
        return cls.from_dict(data)


def _build_section(section_cls, raw: Mapping[str, Any]):
    if not isinstance(raw, Mapping):
        raise ConfigError(f"Settings section for {section_cls.__name__} must be a mapping")
    allowed = {f.name for f in dataclasses.fields(section_cls)}
    unknown = set(raw) - allowed
    if unknown:
        logger.warning("Ignoring unknown %s keys: %s", section_cls.__name__, ", ".join(sorted(unknown)))
    values = {k: v for k, v in raw.items() if k in allowed}
    if values.get("origin") is not None:
        values["origin"] = tuple(values["origin"])
    return section_cls(**values)


def _deep_merge(base: Mapping[str, Any], overlay: Mapping[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for k, v in (overlay or {}).items():
        if isinstance(v, Mapping) and isinstance(base.get(k), Mapping):
            merged[k] = _deep_merge(base[k], v)
        else:
            merged[k] = v
    return merged
