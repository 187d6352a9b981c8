from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from telemetry.logger import NullTelemetry, Telemetry
from .geometry_utils import Direction, Position, step, turn_left, turn_right

# Number of history entries shown by the status report.
STATUS_HISTORY_LENGTH = 5


@dataclass(frozen=True)
class RoverState:
    """Snapshot of the rover on the grid.

    Attributes
    ----------
    x : int
        Column of the occupied cell.
    y : int
        Row of the occupied cell.
    direction : Direction
        Current heading.
    history : tuple[str, ...]
        Every executed move/turn letter, oldest first.
    """

    x: int
    y: int
    direction: Direction
    history: Tuple[str, ...] = ()


class Rover:
    """Grid rover driven by single-letter move and turn commands.

    The rover does not validate its own moves: :meth:`move` always advances
    one cell. Checking the destination against the terrain is the job of
    the move command.
    """

    def __init__(
        self,
        x: int,
        y: int,
        direction: Direction,
        telemetry: Optional[Telemetry] = None,
    ) -> None:
        self.telemetry = telemetry if telemetry is not None else NullTelemetry()
        self._position = Position(int(x), int(y))
        self._direction = direction
        self._history: List[str] = []
        self.telemetry.log_event(
            "info",
            f"Rover initialized at ({x}, {y}) facing {direction}",
            **self.to_dict(),
        )

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------
    @property
    def position(self) -> Position:
        return self._position

    @property
    def direction(self) -> Direction:
        return self._direction

    @property
    def history(self) -> Tuple[str, ...]:
        return tuple(self._history)

    def get_state(self) -> RoverState:
        """Return a copy of current state."""
        p = self._position
        return RoverState(x=p.x, y=p.y, direction=self._direction, history=tuple(self._history))

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def turn_left(self) -> None:
        self._direction = turn_left(self._direction)
        self._history.append("L")

    def turn_right(self) -> None:
        self._direction = turn_right(self._direction)
        self._history.append("R")

    def next_position(self) -> Position:
        """Cell the rover would occupy after one move; does not change state."""
        return step(self._position, self._direction)

    def move(self) -> None:
        """Advance one cell along the heading. No collision checking."""
        self._position = self.next_position()
        self._history.append("M")

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------
    def status(self) -> str:
        """Human-readable position, heading and the most recent commands."""
        if self._history:
            recent = self._history[-STATUS_HISTORY_LENGTH:]
            history = f"Last {len(recent)} commands: {', '.join(recent)}"
        else:
            history = "No commands executed"
        return f"Rover is at {self._position} facing {self._direction}. {history}."

    def to_dict(self) -> Dict[str, Any]:
        """Serialize current rover state to a dict for logging/telemetry."""
        return {
            "x": self._position.x,
            "y": self._position.y,
            "direction": self._direction.value,
        }

    def __repr__(self) -> str:
        return f"Rover(x={self._position.x}, y={self._position.y}, direction={self._direction.value})"
