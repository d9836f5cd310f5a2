from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Union

from .square import COL_NAMES, ROW_NAMES, Square, sq


_MOVE_RE = re.compile(r"^\s*([a-i][1-9])-([a-i])?([1-9])?\s*$")


@dataclass(frozen=True)
class Move:
    """A rook move between two squares.

    Attributes:
        from_sq (Square): Origin square.
        to_sq (Square): Destination square on the same row or column.
    """

    from_sq: Square
    to_sq: Square

    def to_text(self) -> str:
        """Serialize the move, abbreviating the unchanged axis.

        Returns:
            str: Move encoded like ``"e6-f"`` (same row) or ``"f5-8"`` (same
                column).
        """
        if self.from_sq.row == self.to_sq.row:
            return f"{self.from_sq}-{COL_NAMES[self.to_sq.col]}"
        return f"{self.from_sq}-{ROW_NAMES[self.to_sq.row]}"

    def __str__(self) -> str:
        return self.to_text()


def parse_move(text: str) -> Move:
    """Parse move text in either abbreviated or full form.

    Args:
        text (str): ``"e6-f"``, ``"f5-8"`` or ``"e6-f6"``.

    Returns:
        Move: Parsed move.

    Raises:
        ValueError: If the text is malformed or does not describe a move
            along a single row or column.
    """
    m = _MOVE_RE.match(text or "")
    if m is None:
        raise ValueError(f"invalid move text: {text!r}")
    origin, col, row = m.groups()
    from_sq = sq(origin)
    if col is None and row is None:
        raise ValueError(f"invalid move text: {text!r}")
    to_col = COL_NAMES.index(col) if col is not None else from_sq.col
    to_row = ROW_NAMES.index(row) if row is not None else from_sq.row
    to_sq = sq(to_col, to_row)
    if not from_sq.is_rook_move(to_sq):
        raise ValueError(f"not a rook move: {text!r}")
    return Move(from_sq, to_sq)


def mv(a: Union[str, Square], b: Optional[Square] = None) -> Move:
    """Build a move from text or from two squares."""
    if isinstance(a, str):
        return parse_move(a)
    if b is None or not a.is_rook_move(b):
        raise ValueError(f"not a rook move: {a}-{b}")
    return Move(a, b)
