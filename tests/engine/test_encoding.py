from __future__ import annotations

import pytest

from tablut.engine.board import Board
from tablut.engine.piece import BLACK, EMPTY, KING, WHITE
from tablut.engine.square import sq


INITIAL_ROWS = [
    "---BBB---",  # row 1
    "----B----",
    "----W----",
    "B---W---B",
    "BBWWKWWBB",
    "B---W---B",
    "----W----",
    "----B----",
    "---BBB---",  # row 9
]


def test_initial_encoding() -> None:
    assert Board.initial().encoded() == "B" + "".join(INITIAL_ROWS)


def test_round_trip_keeps_position_and_turn() -> None:
    text = "W" + "".join(INITIAL_ROWS)
    b = Board.from_encoded(text)
    assert b.turn is WHITE
    assert b.encoded() == text
    assert b.get(sq("e5")) is KING
    assert b.move_count == 0
    assert b.winner is None


def test_surrounding_whitespace_is_ignored() -> None:
    text = "B" + "".join(INITIAL_ROWS)
    assert Board.from_encoded(f"  {text}\n").encoded() == text


def test_missing_king_means_black_won() -> None:
    b = Board.from_encoded("W" + "-" * 80 + "B")
    assert b.king_position() is None
    assert b.winner is BLACK


def test_king_on_edge_means_white_won() -> None:
    b = Board.from_encoded("B" + "K" + "-" * 80)
    assert b.king_position() == sq("a1")
    assert b.winner is WHITE


@pytest.mark.parametrize(
    "text",
    [
        "",
        "B",
        "B" + "-" * 80,
        "B" + "-" * 82,
        "X" + "-" * 81,
        "-" + "-" * 81,
        "B" + "Q" + "-" * 80,
        "B" + "KK" + "-" * 79,
        "B" + "-" * 40 + "W" + "-" * 40,
        "B" + "-" * 40 + "B" + "-" * 40,
    ],
)
def test_invalid_encodings_raise(text: str) -> None:
    with pytest.raises(ValueError):
        Board.from_encoded(text)


def test_to_text_layout() -> None:
    lines = Board.initial().to_text().splitlines()
    assert len(lines) == 10
    assert lines[0] == " 9 - - - B B B - - -"
    assert lines[4] == " 5 B B W W K W W B B"
    assert lines[8] == " 1 - - - B B B - - -"
    assert lines[9] == "   a b c d e f g h i"
    assert str(Board.initial()) == Board.initial().to_text()


def test_to_text_without_coordinates() -> None:
    lines = Board.initial().to_text(coordinates=False).splitlines()
    assert len(lines) == 9
    assert lines[4] == "   B B W W K W W B B"
    assert all(ch in " -WBK" for line in lines for ch in line)
    assert Board.initial().get(sq("a1")) is EMPTY
