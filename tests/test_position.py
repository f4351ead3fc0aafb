"""Tests for Position arithmetic and ordering."""

from hecto.position import Position


def test_add():
    assert Position.at(1, 2).add(Position.at(3, 4)) == Position.at(4, 6)


def test_diff_saturates_at_zero():
    assert Position.at(5, 1).diff(Position.at(2, 3)) == Position.at(3, 0)
    assert Position.at(0, 0).diff(Position.at(7, 7)) == Position.zero()


def test_row_major_ordering():
    assert Position.at(9, 0) < Position.at(0, 1)
    assert Position.at(1, 1) < Position.at(2, 1)
    assert Position.at(2, 1) >= Position.at(2, 1)
    assert Position.at(2, 1) <= Position.at(2, 1)
    assert Position.at(0, 2) > Position.at(5, 1)


def test_positions_are_hashable_values():
    assert len({Position.at(1, 1), Position(1, 1), Position.zero()}) == 2
