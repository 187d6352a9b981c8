"""Rover simulator error hierarchy.

Expected per-command outcomes (a blocked move) are reported as typed
results by :mod:`rover_sim.commands`; the exceptions here cover invalid
construction, unknown command codes, exhausted input retries and bad
configuration.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rover_sim.geometry_utils import Position


class ErrorKind(Enum):
    """Machine-readable failure category carried by command results."""

    INVALID_DIMENSIONS = "invalid_dimensions"
    OBSTACLE_OR_BOUNDARY = "obstacle_or_boundary"
    UNKNOWN_COMMAND = "unknown_command"


class RoverSimError(Exception):
    """Base error for the rover simulator."""


class InvalidDimensionsError(RoverSimError, ValueError):
    """Terrain width or height is not a positive integer."""

    kind = ErrorKind.INVALID_DIMENSIONS

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        super().__init__(
            f"Terrain dimensions must be positive, got {width}x{height}"
        )


class ObstacleOrBoundaryError(RoverSimError):
    """Move target is an obstacle cell or lies outside the terrain.

    Attributes:
        target: The cell the rover tried to enter
    """

    kind = ErrorKind.OBSTACLE_OR_BOUNDARY

    def __init__(self, target: "Position") -> None:
        self.target = target
        super().__init__(
            f"Cannot move to ({target.x}, {target.y}): Obstacle detected"
        )


class UnknownCommandError(RoverSimError, ValueError):
    """Command code is not one of M, L, R, S."""

    kind = ErrorKind.UNKNOWN_COMMAND

    def __init__(self, code: str) -> None:
        self.code = code
        super().__init__(f"Invalid command: {code}")


class RetryExhaustedError(RoverSimError):
    """Input acquisition failed on every allowed attempt."""

    def __init__(self, attempts: int, last_message: str) -> None:
        self.attempts = attempts
        self.last_message = last_message
        super().__init__(f"Failed after {attempts} attempts: {last_message}")


class ConfigError(RoverSimError):
    """Mission configuration is missing or invalid."""
