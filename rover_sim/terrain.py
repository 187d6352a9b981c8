from __future__ import annotations

from typing import Any, Dict, FrozenSet, Iterable, Optional, Sequence, Tuple
import json
import random

import numpy as np

from telemetry.logger import NullTelemetry, Telemetry
from .errors import InvalidDimensionsError
from .geometry_utils import Position


class Terrain:
    """Bounded 2D grid with static obstacle cells.

    Coordinates:
    - (0, 0) is the bottom-left cell
    - x increases to the right, y increases upward

    Parameters
    ----------
    width : int
        Number of columns, must be positive.
    height : int
        Number of rows, must be positive.
    obstacles : iterable of (x, y)
        Obstacle cells. Callers pass in-bounds cells; they are not re-checked.
    telemetry : Telemetry, optional
        Event sink for construction and collision queries.
    """

    def __init__(
        self,
        width: int,
        height: int,
        obstacles: Optional[Iterable[Tuple[int, int]]] = None,
        telemetry: Optional[Telemetry] = None,
    ) -> None:
        self.telemetry = telemetry if telemetry is not None else NullTelemetry()
        if width <= 0 or height <= 0:
            self.telemetry.log_event(
                "error", "Terrain dimensions must be positive", width=width, height=height
            )
            raise InvalidDimensionsError(width, height)
        self._width = int(width)
        self._height = int(height)
        self._obstacles: FrozenSet[Position] = frozenset(
            Position(int(x), int(y)) for x, y in (obstacles or [])
        )

        # Occupancy indexed [row=y, col=x]; frozen like the rest of the terrain.
        grid = np.zeros((self._height, self._width), dtype=bool)
        for cell in self._obstacles:
            if self.in_bounds(cell.x, cell.y):
                grid[cell.y, cell.x] = True
        grid.flags.writeable = False
        self._occupancy = grid

        self.telemetry.log_event(
            "info",
            f"Terrain initialized: {self._width}x{self._height} "
            f"with {len(self._obstacles)} obstacles",
            width=self._width,
            height=self._height,
            obstacles=len(self._obstacles),
        )

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------
    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def obstacles(self) -> FrozenSet[Position]:
        return self._obstacles

    @property
    def occupancy(self) -> np.ndarray:
        """Read-only bool array of shape (height, width), True on obstacles."""
        return self._occupancy

    # ------------------------------------------------------------------
    # Map loading / generation
    # ------------------------------------------------------------------
    @classmethod
    def from_map_dict(
        cls, data: Dict[str, Any], telemetry: Optional[Telemetry] = None
    ) -> "Terrain":
        """Create terrain from a dict ``{"width", "height", "obstacles": [[x, y], ...]}``."""
        obstacles = [(int(o[0]), int(o[1])) for o in data.get("obstacles", [])]
        return cls(
            width=int(data["width"]),
            height=int(data["height"]),
            obstacles=obstacles,
            telemetry=telemetry,
        )

    @classmethod
    def from_map_file(cls, path: str, telemetry: Optional[Telemetry] = None) -> "Terrain":
        """Create terrain from a JSON map file."""
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return cls.from_map_dict(data, telemetry=telemetry)

    @classmethod
    def with_random_obstacles(
        cls,
        width: int,
        height: int,
        count: int,
        rng: random.Random,
        exclude: Sequence[Tuple[int, int]] = (),
        telemetry: Optional[Telemetry] = None,
    ) -> "Terrain":
        """Scatter ``count`` distinct obstacle cells, avoiding ``exclude``."""
        if width <= 0 or height <= 0:
            raise InvalidDimensionsError(width, height)
        blocked = {(int(x), int(y)) for x, y in exclude}
        free = [(x, y) for y in range(height) for x in range(width) if (x, y) not in blocked]
        if count < 0 or count > len(free):
            raise ValueError(
                f"Cannot place {count} obstacles on {len(free)} free cells"
            )
        return cls(width, height, rng.sample(free, count), telemetry=telemetry)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize terrain to a map dict (obstacles sorted by (x, y))."""
        return {
            "width": self._width,
            "height": self._height,
            "obstacles": [[c.x, c.y] for c in sorted(self._obstacles)],
        }

    # ------------------------------------------------------------------
    # Collision queries
    # ------------------------------------------------------------------
    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self._width and 0 <= y < self._height

    def is_out_of_bounds(self, x: int, y: int) -> bool:
        return not self.in_bounds(x, y)

    def has_obstacle(self, x: int, y: int) -> bool:
        """Return True if (x, y) is blocked.

        Cells outside the grid count as blocked, so callers cannot tell an
        out-of-bounds cell from an obstacle.
        """
        if self.is_out_of_bounds(x, y):
            self.telemetry.log_event("warn", f"Position ({x}, {y}) is out of bounds", x=x, y=y)
            return True
        hit = bool(self._occupancy[y, x])
        if hit:
            self.telemetry.log_event("info", f"Obstacle detected at ({x}, {y})", x=x, y=y)
        return hit

    def __repr__(self) -> str:
        return f"Terrain(width={self._width}, height={self._height}, obstacles={len(self._obstacles)})"
