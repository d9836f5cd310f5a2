from __future__ import annotations

from .board import Board


def perft(board: Board, depth: int) -> int:
    """Count the leaf positions of the move tree below ``board``.

    Definition:
    - depth == 0, or a position with a winner, counts as 1 node.
    - depth > 0 returns the sum over all legal child positions' perft(depth-1),
      moves generated for the side to move.

    Children are copies, so ``board`` itself is never modified.
    """
    if depth < 0:
        raise ValueError("depth must be >= 0")
    if depth == 0 or board.winner is not None:
        return 1

    nodes = 0
    for m in board.legal_moves(board.turn):
        nodes += perft(board.apply(m), depth - 1)
    return nodes
