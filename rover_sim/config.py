"""
Mission configuration: YAML file -> dataclasses.

Every section is optional. Fields left as ``None`` are asked for
interactively by the mission loop.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
import os

import yaml

from .errors import ConfigError
from .geometry_utils import Direction


@dataclass
class TerrainConfig:
    width: Optional[int] = None
    height: Optional[int] = None
    obstacles: List[Tuple[int, int]] = field(default_factory=list)
    map: Optional[str] = None
    random_obstacles: Optional[int] = None
    seed: Optional[int] = None

    @property
    def is_complete(self) -> bool:
        return self.map is not None or (self.width is not None and self.height is not None)


@dataclass
class RoverConfig:
    x: Optional[int] = None
    y: Optional[int] = None
    direction: Optional[Direction] = None

    @property
    def is_complete(self) -> bool:
        return self.x is not None and self.y is not None and self.direction is not None


@dataclass
class MissionSettings:
    max_retries: int = 3
    show_map: bool = False


@dataclass
class TelemetryConfig:
    path: Optional[str] = None
    echo: bool = False


@dataclass
class MissionConfig:
    """Parameters for one mission run."""

    terrain: TerrainConfig = field(default_factory=TerrainConfig)
    rover: RoverConfig = field(default_factory=RoverConfig)
    mission: MissionSettings = field(default_factory=MissionSettings)
    telemetry: TelemetryConfig = field(default_factory=TelemetryConfig)


def load_yaml(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _opt_int(section: Dict[str, Any], key: str, name: str) -> Optional[int]:
    value = section.get(key)
    if value is None:
        return None
    if isinstance(value, bool):
        raise ConfigError(f"{name}.{key} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name}.{key} must be an integer, got {value!r}") from None


def _opt_bool(section: Dict[str, Any], key: str, name: str, default: bool) -> bool:
    value = section.get(key)
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ConfigError(f"{name}.{key} must be true or false, got {value!r}")
    return value


def config_from_dict(data: Dict[str, Any], base_dir: str = ".") -> MissionConfig:
    """Build and validate a MissionConfig from parsed YAML.

    Relative ``terrain.map`` paths are resolved against ``base_dir``.
    """
    terrain_cfg = data.get("terrain") or {}
    rover_cfg = data.get("rover") or {}
    mission_cfg = data.get("mission") or {}
    telemetry_cfg = data.get("telemetry") or {}

    width = _opt_int(terrain_cfg, "width", "terrain")
    height = _opt_int(terrain_cfg, "height", "terrain")
    for key, value in (("width", width), ("height", height)):
        if value is not None and value <= 0:
            raise ConfigError(f"terrain.{key} must be a positive integer, got {value}")

    obstacles: List[Tuple[int, int]] = []
    for item in terrain_cfg.get("obstacles") or []:
        try:
            x, y = item
            obstacles.append((int(x), int(y)))
        except (TypeError, ValueError):
            raise ConfigError(f"terrain.obstacles entries must be [x, y], got {item!r}") from None
        if width is not None and height is not None:
            if not (0 <= obstacles[-1][0] < width and 0 <= obstacles[-1][1] < height):
                raise ConfigError(f"Obstacle {item!r} lies outside the {width}x{height} terrain")

    map_path = terrain_cfg.get("map")
    if map_path is not None:
        if not os.path.isabs(map_path):
            map_path = os.path.join(base_dir, map_path)
        if not os.path.isfile(map_path):
            raise ConfigError(f"Map file not found: {map_path}")

    rover_x = _opt_int(rover_cfg, "x", "rover")
    rover_y = _opt_int(rover_cfg, "y", "rover")

    random_obstacles = _opt_int(terrain_cfg, "random_obstacles", "terrain")
    if random_obstacles is not None and random_obstacles < 0:
        raise ConfigError("terrain.random_obstacles must be non-negative")
    if random_obstacles is not None and width is not None and height is not None:
        free = width * height
        if rover_x is not None and rover_y is not None:
            if 0 <= rover_x < width and 0 <= rover_y < height:
                free -= 1
        if random_obstacles > free:
            raise ConfigError(
                f"terrain.random_obstacles={random_obstacles} exceeds the {free} free cells "
                f"of the {width}x{height} terrain"
            )

    direction = rover_cfg.get("direction")
    if direction is not None:
        try:
            direction = Direction.parse(str(direction))
        except ValueError as exc:
            raise ConfigError(f"rover.direction: {exc}") from None

    max_retries = _opt_int(mission_cfg, "max_retries", "mission")
    if max_retries is not None and max_retries < 1:
        raise ConfigError("mission.max_retries must be at least 1")

    return MissionConfig(
        terrain=TerrainConfig(
            width=width,
            height=height,
            obstacles=obstacles,
            map=map_path,
            random_obstacles=random_obstacles,
            seed=_opt_int(terrain_cfg, "seed", "terrain"),
        ),
        rover=RoverConfig(
            x=rover_x,
            y=rover_y,
            direction=direction,
        ),
        mission=MissionSettings(
            max_retries=max_retries if max_retries is not None else 3,
            show_map=_opt_bool(mission_cfg, "show_map", "mission", False),
        ),
        telemetry=TelemetryConfig(
            path=telemetry_cfg.get("path"),
            echo=_opt_bool(telemetry_cfg, "echo", "telemetry", False),
        ),
    )


def load_config(path: str) -> MissionConfig:
    """Load a mission YAML file."""
    if not os.path.exists(path):
        raise ConfigError(f"Config file not found: {path}")
    try:
        data = load_yaml(path)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config root must be a mapping: {path}")
    return config_from_dict(data, base_dir=os.path.dirname(os.path.abspath(path)))
