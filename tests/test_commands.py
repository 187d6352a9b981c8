from __future__ import annotations

import pytest

from rover_sim.commands import (
    CommandFactory,
    MoveCommand,
    StatusCommand,
    TurnLeftCommand,
    TurnRightCommand,
)
from rover_sim.errors import ErrorKind, ObstacleOrBoundaryError, UnknownCommandError
from rover_sim.geometry_utils import Direction, Position
from rover_sim.rover import Rover
from rover_sim.terrain import Terrain
from telemetry.logger import MemoryTelemetry


def run(letter: str, rover: Rover, terrain: Terrain):
    return CommandFactory().create_command(letter, rover, terrain).execute()


@pytest.mark.parametrize(
    "code,cls",
    [
        ("M", MoveCommand),
        ("m", MoveCommand),
        ("L", TurnLeftCommand),
        ("l", TurnLeftCommand),
        ("R", TurnRightCommand),
        ("r", TurnRightCommand),
        ("S", StatusCommand),
        ("s", StatusCommand),
    ],
)
def test_factory_dispatch(code: str, cls: type) -> None:
    rover = Rover(0, 0, Direction.N)
    terrain = Terrain(3, 3, [])
    assert isinstance(CommandFactory().create_command(code, rover, terrain), cls)


@pytest.mark.parametrize("code", ["X", "", "MM", "q", "1"])
def test_factory_rejects_unknown_codes(code: str) -> None:
    rover = Rover(1, 1, Direction.N)
    terrain = Terrain(3, 3, [(0, 0)])
    with pytest.raises(UnknownCommandError) as excinfo:
        CommandFactory().create_command(code, rover, terrain)
    assert excinfo.value.code == code
    assert str(excinfo.value) == f"Invalid command: {code}"
    assert rover.position == Position(1, 1)
    assert rover.history == ()
    assert terrain.to_dict()["obstacles"] == [[0, 0]]


def test_move_into_free_cell() -> None:
    rover = Rover(0, 0, Direction.N)
    result = run("M", rover, Terrain(3, 3, []))
    assert result.ok
    assert result.message == "Rover moved to (0, 1) facing N"
    assert result.position == Position(0, 1)
    assert result.error_kind is None


def test_move_into_obstacle_is_rejected() -> None:
    terrain = Terrain(3, 3, [(1, 0)])
    rover = Rover(0, 0, Direction.E)
    result = run("M", rover, terrain)

    assert not result.ok
    assert result.error_kind is ErrorKind.OBSTACLE_OR_BOUNDARY
    assert result.target == Position(1, 0)
    assert result.message == "Cannot move to (1, 0): Obstacle detected"
    assert rover.position == Position(0, 0)
    assert rover.direction is Direction.E
    assert rover.history == ()


@pytest.mark.parametrize(
    "x,y,d", [(0, 0, Direction.S), (0, 0, Direction.W), (2, 2, Direction.N), (2, 2, Direction.E)]
)
def test_move_off_the_grid_is_rejected(x: int, y: int, d: Direction) -> None:
    rover = Rover(x, y, d)
    result = run("M", rover, Terrain(3, 3, []))
    assert result.error_kind is ErrorKind.OBSTACLE_OR_BOUNDARY
    assert rover.position == Position(x, y)
    assert rover.history == ()


def test_raise_for_error() -> None:
    rover = Rover(0, 0, Direction.E)
    result = run("M", rover, Terrain(3, 3, [(1, 0)]))
    with pytest.raises(ObstacleOrBoundaryError) as excinfo:
        result.raise_for_error()
    assert excinfo.value.target == Position(1, 0)

    ok = run("L", rover, Terrain(3, 3, []))
    assert ok.raise_for_error() is ok


def test_turn_messages() -> None:
    rover = Rover(0, 0, Direction.N)
    terrain = Terrain(3, 3, [])
    assert run("L", rover, terrain).message == "Rover turned left, now facing W"
    assert run("R", rover, terrain).message == "Rover turned right, now facing N"
    assert run("r", rover, terrain).direction is Direction.E


def test_status_reports_verbatim_and_keeps_history() -> None:
    telemetry = MemoryTelemetry()
    rover = Rover(0, 0, Direction.N)
    terrain = Terrain(3, 3, [])
    factory = CommandFactory(telemetry)
    factory.create_command("M", rover, terrain).execute()
    result = factory.create_command("S", rover, terrain).execute()

    assert result.ok
    assert result.message == "Rover is at (0, 1) facing N. Last 1 commands: M."
    assert rover.history == ("M",)
    assert f"Status requested: {result.message}" in telemetry.events("info")


def test_end_to_end_north_then_east() -> None:
    terrain = Terrain(5, 5, [(2, 2)])
    rover = Rover(0, 0, Direction.N)
    for letter in "MMMMRM":
        assert run(letter, rover, terrain).ok
    assert rover.position == Position(1, 4)
    assert rover.direction is Direction.E


def test_result_as_dict() -> None:
    rover = Rover(0, 0, Direction.E)
    result = run("M", rover, Terrain(3, 3, [(1, 0)]))
    assert result.as_dict() == {
        "ok": False,
        "letter": "M",
        "message": "Cannot move to (1, 0): Obstacle detected",
        "x": 0,
        "y": 0,
        "direction": "E",
        "error_kind": "obstacle_or_boundary",
    }
