from __future__ import annotations

from typing import Dict, Optional

import numpy as np

from .geometry_utils import Direction
from .rover import Rover
from .terrain import Terrain


# Glyph palette
THEME: Dict[str, str] = {
    "free": ".",
    "obstacle": "#",
}

ROVER_GLYPHS: Dict[Direction, str] = {
    Direction.N: "^",
    Direction.E: ">",
    Direction.S: "v",
    Direction.W: "<",
}


def render_ascii(terrain: Terrain, rover: Optional[Rover] = None) -> str:
    """Top-down text map of the terrain and (optionally) the rover.

    Coordinates:
    - Grid origin (0,0) is drawn at the bottom-left.
    - Rows are flipped so that +y is up, i.e. the first line is y = height - 1.
    """
    canvas = np.where(terrain.occupancy, THEME["obstacle"], THEME["free"]).astype("<U1")
    if rover is not None and terrain.in_bounds(rover.position.x, rover.position.y):
        canvas[rover.position.y, rover.position.x] = ROVER_GLYPHS[rover.direction]
    return "\n".join("".join(row) for row in canvas[::-1])
