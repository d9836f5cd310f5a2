from __future__ import annotations

from typing import List, Optional, Tuple, Union


SIZE = 9
NUM_SQUARES = SIZE * SIZE

# Direction indices for rook moves
NORTH, EAST, SOUTH, WEST = range(4)
DIRECTION_DELTAS: Tuple[Tuple[int, int], ...] = ((0, 1), (1, 0), (0, -1), (-1, 0))

COL_NAMES = "abcdefghi"
ROW_NAMES = "123456789"


class OutOfBoundsError(ValueError):
    """Raised for coordinates or square names outside the 9x9 board."""


class Square:
    """A board coordinate. Exactly one instance exists per (col, row).

    Attributes:
        col (int): Column 0..8 (``a``..``i``).
        row (int): Row 0..8 (``1``..``9``).
        index (int): Row-major index ``row * 9 + col``.
    """

    __slots__ = ("col", "row", "index")

    def __init__(self, col: int, row: int) -> None:
        self.col = col
        self.row = row
        self.index = row * SIZE + col

    def __repr__(self) -> str:
        return f"Square({self})"

    def __str__(self) -> str:
        return COL_NAMES[self.col] + ROW_NAMES[self.row]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Square):
            return NotImplemented
        return self.index == other.index

    def __hash__(self) -> int:
        return self.index

    def __reduce__(self):
        return (sq, (self.index,))

    def is_edge(self) -> bool:
        return self.col == 0 or self.row == 0 or self.col == SIZE - 1 or self.row == SIZE - 1

    def is_rook_move(self, other: Square) -> bool:
        return self != other and (self.col == other.col or self.row == other.row)

    def direction(self, other: Square) -> int:
        """Return the direction index of the rook move to ``other``, or -1."""
        if not self.is_rook_move(other):
            return -1
        if self.col == other.col:
            return NORTH if other.row > self.row else SOUTH
        return EAST if other.col > self.col else WEST

    def distance(self, other: Square) -> int:
        return max(abs(self.col - other.col), abs(self.row - other.row))

    def rook_move(self, direction: int, steps: int) -> Optional[Square]:
        """Return the square ``steps`` away along ``direction``, or None if off-board."""
        dc, dr = DIRECTION_DELTAS[direction]
        col = self.col + dc * steps
        row = self.row + dr * steps
        if not exists(col, row):
            return None
        return SQUARES[row * SIZE + col]

    def adjacent(self, other: Square) -> bool:
        return self.is_rook_move(other) and self.distance(other) == 1

    def is_diagonal(self, other: Square) -> bool:
        return abs(self.col - other.col) == 1 and abs(self.row - other.row) == 1

    def neighbours(self) -> List[Square]:
        out: List[Square] = []
        for d in range(4):
            s = self.rook_move(d, 1)
            if s is not None:
                out.append(s)
        return out

    def between(self, other: Square) -> Square:
        """Return the square strictly between ``self`` and ``other``.

        Args:
            other (Square): A square two steps away on the same row or column.

        Returns:
            Square: The square halfway between the two.

        Raises:
            ValueError: If the squares are not exactly two apart along a rank
                or file.
        """
        if not self.is_rook_move(other) or self.distance(other) != 2:
            raise ValueError(f"no single square between {self} and {other}")
        return sq((self.col + other.col) // 2, (self.row + other.row) // 2)

    def diag1(self, other: Square) -> Square:
        """First square diagonal to me that is adjacent to ``other``.

        ``other`` must be an orthogonal neighbour of this square.
        """
        if not self.adjacent(other):
            raise ValueError(f"{other} is not adjacent to {self}")
        if self.col == other.col:
            return sq(self.col - 1, other.row)
        return sq(other.col, self.row - 1)

    def diag2(self, other: Square) -> Square:
        """Second square diagonal to me that is adjacent to ``other``."""
        if not self.adjacent(other):
            raise ValueError(f"{other} is not adjacent to {self}")
        if self.col == other.col:
            return sq(self.col + 1, other.row)
        return sq(other.col, self.row + 1)


def exists(col: int, row: int) -> bool:
    return 0 <= col < SIZE and 0 <= row < SIZE


def sq(*args: Union[int, str]) -> Square:
    """Return the canonical square for ``(col, row)``, an index, or a name.

    Args:
        *args: Either ``(col, row)``, a single index in ``0..80``, or an
            algebraic name such as ``"e5"``.

    Returns:
        Square: The shared instance for that coordinate.

    Raises:
        OutOfBoundsError: If the coordinate or name is not on the board.
    """
    if len(args) == 2:
        col, row = args
        if not isinstance(col, int) or not isinstance(row, int) or not exists(col, row):
            raise OutOfBoundsError(f"square out of bounds: ({col}, {row})")
        return SQUARES[row * SIZE + col]
    if len(args) != 1:
        raise TypeError("sq() takes (col, row), an index, or a name")
    arg = args[0]
    if isinstance(arg, str):
        if len(arg) != 2 or arg[0] not in COL_NAMES or arg[1] not in ROW_NAMES:
            raise OutOfBoundsError(f"invalid square: {arg!r}")
        return SQUARES[ROW_NAMES.index(arg[1]) * SIZE + COL_NAMES.index(arg[0])]
    if not isinstance(arg, int) or not 0 <= arg < NUM_SQUARES:
        raise OutOfBoundsError(f"invalid square index: {arg}")
    return SQUARES[arg]


def rook_squares(square: Square, direction: int) -> Tuple[Square, ...]:
    return ROOK_SQUARES[square.index][direction]


def _build_rook_squares() -> Tuple[Tuple[Tuple[Square, ...], ...], ...]:
    table = []
    for s in SQUARES:
        per_dir = []
        for dc, dr in DIRECTION_DELTAS:
            ray = []
            col, row = s.col + dc, s.row + dr
            while exists(col, row):
                ray.append(SQUARES[row * SIZE + col])
                col += dc
                row += dr
            per_dir.append(tuple(ray))
        table.append(tuple(per_dir))
    return tuple(table)


SQUARES: Tuple[Square, ...] = tuple(Square(i % SIZE, i // SIZE) for i in range(NUM_SQUARES))
SQUARE_LIST = SQUARES
# Rays from each square to the edge, nearest first: ROOK_SQUARES[index][direction]
ROOK_SQUARES = _build_rook_squares()
