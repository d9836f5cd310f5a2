from __future__ import annotations

from typing import List

import pytest

from tablut.engine.board import Board
from tablut.engine.piece import WHITE
from tablut.search.service import SearchService


def board_from_rows(rows: List[str], turn: str = "W") -> Board:
    return Board.from_encoded(turn + "".join(reversed(rows)))


SPARSE = [
    "---B-----",
    "---------",
    "---------",
    "---------",
    "----K----",
    "---------",
    "------W--",
    "-------B-",
    "---------",
]


def test_pruning_matches_plain_minimax_startpos() -> None:
    service = SearchService()
    pruned = service.search(Board.initial(), depth=2)
    plain = service.search(Board.initial(), depth=2, enable_pruning=False)
    assert pruned.best_move == plain.best_move
    assert pruned.score == plain.score
    assert pruned.nodes <= plain.nodes


@pytest.mark.parametrize("turn", ["W", "B"])
def test_pruning_matches_plain_minimax_sparse(turn: str) -> None:
    service = SearchService()
    pruned = service.search(board_from_rows(SPARSE, turn), depth=3)
    plain = service.search(board_from_rows(SPARSE, turn), depth=3, enable_pruning=False)
    assert pruned.best_move == plain.best_move
    assert pruned.score == plain.score
    assert pruned.nodes <= plain.nodes


@pytest.mark.parametrize("depth", [1, 2])
def test_ties_go_to_last_move(depth: int) -> None:
    # The king is boxed in and BLACK cannot capture, so every line scores the same
    b = board_from_rows(
        [
            "B--------",
            "---------",
            "---------",
            "----W----",
            "---WKW---",
            "----W----",
            "---------",
            "---------",
            "---------",
        ]
    )
    res = SearchService().search(b, depth=depth)
    assert res.score == 4
    assert res.best_move == b.legal_moves(WHITE)[-1]
