from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

from telemetry.logger import NullTelemetry, Telemetry
from .errors import ErrorKind, ObstacleOrBoundaryError, UnknownCommandError
from .geometry_utils import Direction, Position
from .rover import Rover
from .terrain import Terrain


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a single command execution.

    A blocked move is an expected outcome, so it comes back as a failed
    result rather than an exception. ``error_kind`` is set only when
    ``ok`` is False.
    """

    ok: bool
    letter: str
    message: str
    position: Position
    direction: Direction
    error_kind: Optional[ErrorKind] = None
    target: Optional[Position] = None

    def raise_for_error(self) -> "CommandResult":
        """Raise the matching exception for a failed result, else return self."""
        if self.ok:
            return self
        if self.error_kind is ErrorKind.OBSTACLE_OR_BOUNDARY and self.target is not None:
            raise ObstacleOrBoundaryError(self.target)
        if self.error_kind is ErrorKind.UNKNOWN_COMMAND:
            raise UnknownCommandError(self.letter)
        raise RuntimeError(self.message)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "letter": self.letter,
            "message": self.message,
            "x": self.position.x,
            "y": self.position.y,
            "direction": self.direction.value,
            "error_kind": self.error_kind.value if self.error_kind else None,
        }


class Command(ABC):
    """One-shot action against a rover. Built per invocation, never reused."""

    letter: str = ""

    def __init__(self, rover: Rover, telemetry: Optional[Telemetry] = None) -> None:
        self.rover = rover
        self.telemetry = telemetry if telemetry is not None else NullTelemetry()

    @abstractmethod
    def execute(self) -> CommandResult:
        """Apply the command and report what happened."""

    def _result(self, message: str) -> CommandResult:
        return CommandResult(
            ok=True,
            letter=self.letter,
            message=message,
            position=self.rover.position,
            direction=self.rover.direction,
        )


class MoveCommand(Command):
    """Advance one cell if the terrain allows it."""

    letter = "M"

    def __init__(
        self,
        rover: Rover,
        terrain: Terrain,
        telemetry: Optional[Telemetry] = None,
    ) -> None:
        super().__init__(rover, telemetry)
        self.terrain = terrain

    def execute(self) -> CommandResult:
        target = self.rover.next_position()
        if self.terrain.has_obstacle(target.x, target.y):
            message = f"Cannot move to ({target.x}, {target.y}): Obstacle detected"
            self.telemetry.log_event("error", message, x=target.x, y=target.y)
            return CommandResult(
                ok=False,
                letter=self.letter,
                message=message,
                position=self.rover.position,
                direction=self.rover.direction,
                error_kind=ErrorKind.OBSTACLE_OR_BOUNDARY,
                target=target,
            )
        self.rover.move()
        message = f"Rover moved to ({target.x}, {target.y}) facing {self.rover.direction}"
        self.telemetry.log_event("info", message, **self.rover.to_dict())
        return self._result(message)


class TurnLeftCommand(Command):
    letter = "L"

    def execute(self) -> CommandResult:
        self.rover.turn_left()
        message = f"Rover turned left, now facing {self.rover.direction}"
        self.telemetry.log_event("info", message, **self.rover.to_dict())
        return self._result(message)


class TurnRightCommand(Command):
    letter = "R"

    def execute(self) -> CommandResult:
        self.rover.turn_right()
        message = f"Rover turned right, now facing {self.rover.direction}"
        self.telemetry.log_event("info", message, **self.rover.to_dict())
        return self._result(message)


class StatusCommand(Command):
    """Report rover status; the status string is the result message verbatim."""

    letter = "S"

    def execute(self) -> CommandResult:
        status = self.rover.status()
        self.telemetry.log_event("info", f"Status requested: {status}")
        return self._result(status)


class CommandFactory:
    """Maps a single-letter code to a ready-to-run command."""

    def __init__(self, telemetry: Optional[Telemetry] = None) -> None:
        self.telemetry = telemetry if telemetry is not None else NullTelemetry()

    def create_command(self, code: str, rover: Rover, terrain: Terrain) -> Command:
        """Build the command for ``code`` (case-insensitive M, L, R or S).

        Raises UnknownCommandError for anything else, including
        multi-letter strings.
        """
        letter = str(code).upper()
        if letter == "M":
            return MoveCommand(rover, terrain, self.telemetry)
        if letter == "L":
            return TurnLeftCommand(rover, self.telemetry)
        if letter == "R":
            return TurnRightCommand(rover, self.telemetry)
        if letter == "S":
            return StatusCommand(rover, self.telemetry)
        self.telemetry.log_event("error", f"Invalid command type: {code}", code=str(code))
        raise UnknownCommandError(str(code))
