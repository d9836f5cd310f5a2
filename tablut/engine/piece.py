from __future__ import annotations

from enum import Enum


class Piece(Enum):
    """Square contents. KING plays for the WHITE side."""

    EMPTY = "-"
    WHITE = "W"
    BLACK = "B"
    KING = "K"

    def __str__(self) -> str:
        return self.value

    def side(self) -> "Piece":
        """Return the side owning this piece (KING belongs to WHITE)."""
        if self is Piece.KING:
            return Piece.WHITE
        return self

    def opponent(self) -> "Piece":
        if self is Piece.WHITE or self is Piece.KING:
            return Piece.BLACK
        if self is Piece.BLACK:
            return Piece.WHITE
        return Piece.EMPTY

    @classmethod
    def from_char(cls, ch: str) -> "Piece":
        try:
            return cls(ch)
        except ValueError as e:
            raise ValueError(f"invalid piece character: {ch!r}") from e


EMPTY = Piece.EMPTY
WHITE = Piece.WHITE
BLACK = Piece.BLACK
KING = Piece.KING
