from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional, Union

from tablut.engine.board import Board
from tablut.engine.game import Game
from tablut.engine.move import Move
from tablut.engine.piece import BLACK, WHITE, Piece
from tablut.eval import INFTY, WINNING_VALUE, static_score


logger = logging.getLogger(__name__)

# Fixed search depth used when the caller does not choose one
DEFAULT_DEPTH = 4


def max_depth(board: Board) -> int:
    """Return the search depth to use for ``board``.

    Always DEFAULT_DEPTH; position-dependent depth would be decided here.
    """
    return DEFAULT_DEPTH


@dataclass
class SearchResult:
    best_move: Optional[Move]
    score: int
    nodes: int
    depth: int
    time_ms: int


class SearchService:
    """Fixed-depth minimax with alpha-beta pruning over board copies."""

    def search(
        self,
        position: Union[Board, Game],
        depth: Optional[int] = None,
        *,
        enable_pruning: bool = True,
    ) -> SearchResult:
        # Scores are from WHITE's side: WHITE maximizes (sense +1), BLACK
        # minimizes (sense -1). Every node works on its own copy of the board.
        board = position.board if isinstance(position, Game) else position
        root = board.copy()
        if depth is None:
            depth = max_depth(root)
        if depth < 0:
            raise ValueError("depth must be >= 0")
        sense = 1 if root.turn is WHITE else -1

        nodes = 0
        best_move: Optional[Move] = None
        start = time.perf_counter()

        def find_move(
            b: Board, d: int, save_move: bool, sense: int, alpha: int, beta: int
        ) -> int:
            nonlocal nodes, best_move
            nodes += 1
            if d == 0 or b.winner is not None:
                return static_score(b)

            if sense == 1:
                v = -INFTY
                for mv in b.legal_moves(WHITE):
                    child = b.apply(mv)
                    king = child.king_position()
                    if king is not None and king.is_edge():
                        # Escape now; never put off a win
                        if save_move:
                            best_move = mv
                        return WINNING_VALUE
                    score = find_move(child, d - 1, False, -sense, alpha, beta)
                    # Ties go to the later move
                    if score >= v:
                        v = score
                        if save_move:
                            best_move = mv
                    alpha = max(alpha, v)
                    if enable_pruning and v > beta:
                        break
            else:
                v = INFTY
                for mv in b.legal_moves(BLACK):
                    child = b.apply(mv)
                    if child.king_position() is None:
                        if save_move:
                            best_move = mv
                        return -WINNING_VALUE
                    score = find_move(child, d - 1, False, -sense, alpha, beta)
                    if score <= v:
                        v = score
                        if save_move:
                            best_move = mv
                    beta = min(beta, v)
                    if enable_pruning and v < alpha:
                        break
            return v

        score = find_move(root, depth, True, sense, -INFTY, INFTY)
        time_ms = int((time.perf_counter() - start) * 1000)
        logger.debug(
            "search complete",
            extra={
                "depth": depth,
                "nodes": nodes,
                "score": score,
                "best_move": best_move.to_text() if best_move else None,
                "time_ms": time_ms,
            },
        )
        return SearchResult(
            best_move=best_move,
            score=score,
            nodes=nodes,
            depth=depth,
            time_ms=time_ms,
        )


class AIPlayer:
    """Automated player choosing moves for one side with SearchService."""

    def __init__(
        self,
        side: Piece,
        depth: Optional[int] = None,
        service: Optional[SearchService] = None,
    ) -> None:
        if side not in (WHITE, BLACK):
            raise ValueError("side must be WHITE or BLACK")
        self.side = side
        self.depth = depth
        self._service = service or SearchService()

    def find_move(self, board: Board) -> Optional[Move]:
        """Return the chosen move for the side to move, or None if there is none."""
        return self._service.search(board, depth=self.depth).best_move

    def my_move(self, game: Game) -> str:
        """Choose a move for this player and return it in text notation.

        Raises:
            ValueError: If the game is over, it is not this player's turn, or
                no legal move exists.
        """
        if game.is_over():
            raise ValueError("game is over")
        if game.turn() is not self.side:
            raise ValueError("not this player's turn")
        move = self.find_move(game.board)
        if move is None:
            raise ValueError("no legal move")
        return move.to_text()
