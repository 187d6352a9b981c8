from __future__ import annotations

import pytest

from rover_sim.geometry_utils import Direction, Position, rotate, step, turn_left, turn_right


def test_turn_left_cycle() -> None:
    assert turn_left(Direction.N) is Direction.W
    assert turn_left(Direction.W) is Direction.S
    assert turn_left(Direction.S) is Direction.E
    assert turn_left(Direction.E) is Direction.N


def test_turn_right_cycle() -> None:
    assert turn_right(Direction.N) is Direction.E
    assert turn_right(Direction.E) is Direction.S
    assert turn_right(Direction.S) is Direction.W
    assert turn_right(Direction.W) is Direction.N


@pytest.mark.parametrize("d", list(Direction))
def test_turns_are_inverse_and_close_after_four(d: Direction) -> None:
    assert turn_left(turn_right(d)) is d
    assert turn_right(turn_left(d)) is d

    spun = d
    for _ in range(4):
        spun = turn_left(spun)
    assert spun is d
    assert rotate(d, 4) is d


@pytest.mark.parametrize("d", list(Direction))
def test_step_changes_exactly_one_axis_by_one(d: Direction) -> None:
    start = Position(-3, 7)
    nxt = step(start, d)
    dx = nxt.x - start.x
    dy = nxt.y - start.y
    assert abs(dx) + abs(dy) == 1
    assert dx == 0 or dy == 0


def test_step_signs() -> None:
    p = Position(2, 2)
    assert step(p, Direction.N) == Position(2, 3)
    assert step(p, Direction.S) == Position(2, 1)
    assert step(p, Direction.E) == Position(3, 2)
    assert step(p, Direction.W) == Position(1, 2)


def test_direction_parse_is_case_insensitive() -> None:
    assert Direction.parse("e") is Direction.E
    assert Direction.parse(" W ") is Direction.W
    with pytest.raises(ValueError, match="Invalid direction"):
        Direction.parse("X")


def test_position_str() -> None:
    assert str(Position(1, -4)) == "(1, -4)"
