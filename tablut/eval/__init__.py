"""Static evaluation of Tablut positions.

Pure, deterministic, and side-effect free. Scores are from WHITE's point of
view: positive favours WHITE (the king's side), negative favours BLACK.
"""

from __future__ import annotations

from typing import Final

from tablut.engine.board import Board
from tablut.engine.piece import BLACK, KING, WHITE


# A magnitude greater than any position score
INFTY: Final = 2**31 - 1
# A position-score magnitude indicating a win (WHITE if positive, BLACK if negative)
WINNING_VALUE: Final = INFTY - 20
# A forced win on the next ply; kept below WINNING_VALUE so wins are not put off
WILL_WIN_VALUE: Final = INFTY - 40


def material(board: Board) -> int:
    """Return +1 per WHITE or KING square minus 1 per BLACK square."""
    score = 0
    for p in board.squares:
        if p is WHITE or p is KING:
            score += 1
        elif p is BLACK:
            score -= 1
    return score


def static_score(board: Board) -> int:
    """Return a heuristic value for ``board``.

    Terminal positions score +/- WINNING_VALUE. A king outside the throne
    zone with exactly one BLACK neighbour is treated as about to be captured
    and scores -WILL_WIN_VALUE. Everything else scores by material.
    """
    king = board.king_position()
    if king is None:
        return -WINNING_VALUE
    if king.is_edge():
        return WINNING_VALUE
    if not board.is_throne_zone(king):
        blockers = sum(1 for s in king.neighbours() if board.get(s) is BLACK)
        if blockers == 1:
            return -WILL_WIN_VALUE
    return material(board)
