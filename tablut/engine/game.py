from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .board import Board
from .move import Move
from .piece import Piece


@dataclass
class Game:
    """Game wrapper around the authoritative board.

    Responsibility: validate and apply moves, keep the move list for undo
    and history display.
    """

    board: Board
    move_stack: List[Move] = field(default_factory=list)

    @classmethod
    def new(cls) -> "Game":
        return cls(board=Board.initial())

    @classmethod
    def from_encoded(cls, text: str) -> "Game":
        return cls(board=Board.from_encoded(text))

    def encoded(self) -> str:
        return self.board.encoded()

    def turn(self) -> Piece:
        return self.board.turn

    def winner(self) -> Optional[Piece]:
        return self.board.winner

    def is_over(self) -> bool:
        return self.board.winner is not None

    def legal_moves(self) -> List[Move]:
        if self.is_over():
            return []
        return self.board.legal_moves(self.board.turn)

    def apply_move(self, move: Move) -> None:
        if self.is_over():
            raise ValueError("game is over")
        if not self.board.is_legal(move):
            raise ValueError("illegal move")
        self.board.make_move(move)
        self.move_stack.append(move)

    def undo_move(self) -> None:
        if not self.move_stack:
            raise ValueError("no moves to undo")
        self.move_stack.pop()
        self.board.undo()

    def set_move_limit(self, n: int) -> None:
        self.board.set_move_limit(n)

    def move_history_text(self) -> List[str]:
        return [m.to_text() for m in self.move_stack]
