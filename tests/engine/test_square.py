from __future__ import annotations

import pytest

from tablut.engine.square import (
    EAST,
    NORTH,
    SOUTH,
    SQUARE_LIST,
    WEST,
    OutOfBoundsError,
    rook_squares,
    sq,
)


def test_squares_are_canonical() -> None:
    assert len(SQUARE_LIST) == 81
    assert sq(4, 4) is sq("e5")
    assert sq(4, 4) is sq(40)
    assert sq("a1").index == 0
    assert sq("i9").index == 80
    assert str(sq(2, 6)) == "c7"


@pytest.mark.parametrize("args", [(9, 0), (0, 9), (-1, 3), (81,), (-1,), ("j1",), ("a0",), ("e",)])
def test_out_of_bounds_raises(args) -> None:
    with pytest.raises(OutOfBoundsError):
        sq(*args)


def test_rook_squares_run_to_edge_nearest_first() -> None:
    a1 = sq("a1")
    assert [str(s) for s in rook_squares(a1, NORTH)] == [f"a{r}" for r in range(2, 10)]
    assert [str(s) for s in rook_squares(a1, EAST)] == [f"{c}1" for c in "bcdefghi"]
    assert rook_squares(a1, SOUTH) == ()
    assert rook_squares(a1, WEST) == ()

    e5 = sq("e5")
    assert [str(s) for s in rook_squares(e5, WEST)] == ["d5", "c5", "b5", "a5"]
    assert [str(s) for s in rook_squares(e5, SOUTH)] == ["e4", "e3", "e2", "e1"]


def test_edges() -> None:
    assert sq("a5").is_edge()
    assert sq("e9").is_edge()
    assert sq("i1").is_edge()
    assert not sq("b2").is_edge()
    assert not sq("e5").is_edge()


def test_direction_and_rook_move() -> None:
    e5 = sq("e5")
    assert e5.direction(sq("e9")) == NORTH
    assert e5.direction(sq("h5")) == EAST
    assert e5.direction(sq("e2")) == SOUTH
    assert e5.direction(sq("a5")) == WEST
    assert e5.direction(sq("f6")) == -1
    assert e5.direction(e5) == -1
    assert e5.rook_move(NORTH, 2) == sq("e7")
    assert sq("b5").rook_move(WEST, 2) is None


def test_between() -> None:
    assert sq("c3").between(sq("e3")) == sq("d3")
    assert sq("e7").between(sq("e5")) == sq("e6")
    with pytest.raises(ValueError):
        sq("c3").between(sq("f3"))
    with pytest.raises(ValueError):
        sq("c3").between(sq("e5"))


def test_diagonals_relative_to_neighbour() -> None:
    throne = sq("e5")
    # Same column: the two squares beside the neighbour
    assert sq("e6").diag1(throne) == sq("d5")
    assert sq("e6").diag2(throne) == sq("f5")
    # Same row
    assert sq("d5").diag1(throne) == sq("e4")
    assert sq("d5").diag2(throne) == sq("e6")
    with pytest.raises(ValueError):
        sq("e7").diag1(throne)
    assert sq("e6").diag1(throne).is_diagonal(sq("e6"))
    assert not sq("e6").is_diagonal(throne)
    assert not sq("e7").is_diagonal(throne)


def test_neighbours() -> None:
    assert [str(s) for s in sq("e5").neighbours()] == ["e6", "f5", "e4", "d5"]
    assert [str(s) for s in sq("a1").neighbours()] == ["a2", "b1"]
