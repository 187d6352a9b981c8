from __future__ import annotations

from pathlib import Path
import random

import pytest

from rover_sim.errors import ErrorKind, InvalidDimensionsError
from rover_sim.terrain import Terrain
from telemetry.logger import MemoryTelemetry

MAPS_DIR = Path(__file__).resolve().parent.parent / "rover_sim" / "maps"


@pytest.mark.parametrize("width,height", [(0, 5), (5, 0), (-1, 3), (3, -2)])
def test_non_positive_dimensions_rejected(width: int, height: int) -> None:
    with pytest.raises(InvalidDimensionsError) as excinfo:
        Terrain(width, height, [])
    assert excinfo.value.kind is ErrorKind.INVALID_DIMENSIONS
    assert "must be positive" in str(excinfo.value)


def test_has_obstacle_registered_free_and_out_of_bounds() -> None:
    obstacles = [(2, 2), (0, 4), (4, 0)]
    terrain = Terrain(5, 5, obstacles)

    for x, y in obstacles:
        assert terrain.has_obstacle(x, y)

    for x in range(5):
        for y in range(5):
            if (x, y) not in obstacles:
                assert not terrain.has_obstacle(x, y)

    for x, y in [(-1, 0), (0, -1), (5, 0), (0, 5), (5, 5), (-1, -1)]:
        assert terrain.has_obstacle(x, y)


def test_occupancy_is_read_only() -> None:
    terrain = Terrain(3, 2, [(1, 0)])
    assert terrain.occupancy.shape == (2, 3)
    assert terrain.occupancy[0, 1]
    assert int(terrain.occupancy.sum()) == 1
    with pytest.raises(ValueError):
        terrain.occupancy[0, 0] = True


def test_terrain_events_are_reported_to_telemetry() -> None:
    telemetry = MemoryTelemetry()
    terrain = Terrain(5, 5, [(2, 2)], telemetry=telemetry)
    assert telemetry.events("info") == ["Terrain initialized: 5x5 with 1 obstacles"]

    terrain.has_obstacle(-1, 0)
    terrain.has_obstacle(2, 2)
    assert telemetry.events("warn") == ["Position (-1, 0) is out of bounds"]
    assert "Obstacle detected at (2, 2)" in telemetry.events("info")


def test_map_dict_round_trip() -> None:
    terrain = Terrain(4, 3, [(3, 2), (0, 1)])
    data = terrain.to_dict()
    assert data == {"width": 4, "height": 3, "obstacles": [[0, 1], [3, 2]]}
    assert Terrain.from_map_dict(data).obstacles == terrain.obstacles


def test_from_map_file() -> None:
    terrain = Terrain.from_map_file(str(MAPS_DIR / "crater_field.json"))
    assert (terrain.width, terrain.height) == (8, 6)
    assert terrain.has_obstacle(2, 2)
    assert not terrain.has_obstacle(0, 0)


def test_random_obstacles_avoid_excluded_cells() -> None:
    terrain = Terrain.with_random_obstacles(4, 4, 5, random.Random(0), exclude=[(0, 0)])
    assert len(terrain.obstacles) == 5
    assert not terrain.has_obstacle(0, 0)
    assert all(terrain.in_bounds(c.x, c.y) for c in terrain.obstacles)


def test_random_obstacles_need_enough_free_cells() -> None:
    with pytest.raises(ValueError, match="Cannot place"):
        Terrain.with_random_obstacles(2, 2, 4, random.Random(0), exclude=[(1, 1)])
