"""
Top-level package for the grid rover mission simulator.

Components:
- geometry_utils: compass headings, grid positions, turn tables
- terrain: bounded grid with obstacle cells and collision queries
- rover: rover state machine (position, heading, command history)
- commands: move/turn/status commands and the command factory
- batch: short-circuit execution of command strings
- render: ASCII map of terrain and rover
- config: YAML mission configuration
- mission: interactive mission control loop
"""

from .errors import (
    ConfigError,
    ErrorKind,
    InvalidDimensionsError,
    ObstacleOrBoundaryError,
    RetryExhaustedError,
    RoverSimError,
    UnknownCommandError,
)
from .geometry_utils import Direction, Position
from .terrain import Terrain
from .rover import RoverState, Rover
from .commands import (
    Command,
    CommandFactory,
    CommandResult,
    MoveCommand,
    StatusCommand,
    TurnLeftCommand,
    TurnRightCommand,
)
from .batch import BatchResult, execute_batch, parse_batch

__all__ = [
    "ConfigError",
    "ErrorKind",
    "InvalidDimensionsError",
    "ObstacleOrBoundaryError",
    "RetryExhaustedError",
    "RoverSimError",
    "UnknownCommandError",
    "Direction",
    "Position",
    "Terrain",
    "RoverState",
    "Rover",
    "Command",
    "CommandFactory",
    "CommandResult",
    "MoveCommand",
    "StatusCommand",
    "TurnLeftCommand",
    "TurnRightCommand",
    "BatchResult",
    "execute_batch",
    "parse_batch",
]
