"""
Grid geometry for the rover mission simulator.

Provides the compass heading enum, integer grid positions, the turn
tables (as arithmetic over the clockwise heading order) and the unit
step taken by a move in each heading.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, NamedTuple, Tuple


class Direction(Enum):
    """Compass heading. Member order is clockwise starting at north."""

    N = "N"
    E = "E"
    S = "S"
    W = "W"

    @classmethod
    def parse(cls, symbol: str) -> "Direction":
        """Case-insensitive lookup from a one-letter symbol.

        Raises ValueError for anything other than N, E, S or W.
        """
        try:
            return cls(symbol.strip().upper())
        except ValueError:
            raise ValueError("Invalid direction. Choose N, S, E, or W") from None

    def __str__(self) -> str:
        return self.value


# Clockwise order; index arithmetic modulo 4 gives the turn tables.
_CLOCKWISE: Tuple[Direction, ...] = tuple(Direction)


class Position(NamedTuple):
    """Integer grid cell. Bounds belong to the terrain, not the position."""

    x: int
    y: int

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


# ---------------------------------------------------------------------------
# Heading helpers
# ---------------------------------------------------------------------------

STEP: Dict[Direction, Tuple[int, int]] = {
    Direction.N: (0, 1),
    Direction.E: (1, 0),
    Direction.S: (0, -1),
    Direction.W: (-1, 0),
}


def rotate(direction: Direction, quarter_turns: int) -> Direction:
    """Rotate a heading by a number of clockwise quarter turns (negative = CCW)."""
    idx = _CLOCKWISE.index(direction)
    return _CLOCKWISE[(idx + quarter_turns) % len(_CLOCKWISE)]


def turn_left(direction: Direction) -> Direction:
    """N -> W -> S -> E -> N."""
    return rotate(direction, -1)


def turn_right(direction: Direction) -> Direction:
    """N -> E -> S -> W -> N."""
    return rotate(direction, 1)


def step(position: Position, direction: Direction) -> Position:
    """Return the cell one unit ahead of ``position`` along ``direction``."""
    dx, dy = STEP[direction]
    return Position(position.x + dx, position.y + dy)
