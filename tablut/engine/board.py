from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from .move import Move
from .piece import BLACK, EMPTY, KING, WHITE, Piece
from .square import NUM_SQUARES, ROOK_SQUARES, SIZE, SQUARE_LIST, Square, sq


# The throne (castle) and its four neighbours
THRONE = sq(4, 4)
NTHRONE = sq(4, 5)
STHRONE = sq(4, 3)
WTHRONE = sq(3, 4)
ETHRONE = sq(5, 4)
THRONE_ZONE = frozenset((THRONE, NTHRONE, STHRONE, WTHRONE, ETHRONE))

INITIAL_ATTACKERS: Tuple[Square, ...] = (
    sq(0, 3), sq(0, 4), sq(0, 5), sq(1, 4),
    sq(8, 3), sq(8, 4), sq(8, 5), sq(7, 4),
    sq(3, 0), sq(4, 0), sq(5, 0), sq(4, 1),
    sq(3, 8), sq(4, 8), sq(5, 8), sq(4, 7),
)  # fmt: skip
INITIAL_DEFENDERS: Tuple[Square, ...] = (
    NTHRONE, ETHRONE, STHRONE, WTHRONE,
    sq(4, 6), sq(4, 2), sq(2, 4), sq(6, 4),
)  # fmt: skip

UNLIMITED_MOVES = sys.maxsize

# (move, moved piece, captured (square, piece) pairs, record slot, prev turn,
#  prev winner, prev repeated)
UndoEntry = Tuple[
    Move, Piece, Tuple[Tuple[Square, Piece], ...], int, Piece, Optional[Piece], bool
]


def _as_move(move: Union[Move, Square], to_sq: Optional[Square]) -> Move:
    if isinstance(move, Move):
        return move
    if to_sq is None:
        raise TypeError("destination square required")
    return Move(move, to_sq)


@dataclass
class Board:
    """Tablut position with rules, repetition tracking and undo.

    Notes:
    - ``squares`` always holds 81 entries indexed by ``Square.index``;
      EMPTY is stored explicitly.
    - BLACK (the attackers) moves first.
    - ``winner`` stays None until the king escapes, the king is captured,
      or a mover recreates a position already seen.
    """

    squares: List[Piece] = field(default_factory=lambda: [EMPTY] * NUM_SQUARES)
    turn: Piece = BLACK
    winner: Optional[Piece] = None
    move_count: int = 0
    move_limit: int = UNLIMITED_MOVES
    repeated: bool = False
    # encoded positions seen after each move, for repetition detection
    _record: List[str] = field(default_factory=list, repr=False)
    _undo: List[UndoEntry] = field(default_factory=list, repr=False)

    @classmethod
    def initial(cls) -> "Board":
        """Create a board in the standard starting position."""
        board = cls()
        board.init()
        return board

    @classmethod
    def from_encoded(cls, text: str) -> "Board":
        """Create a board from its encoded form.

        Args:
            text (str): Turn character (``W`` or ``B``) followed by 81 piece
                characters in square index order, as produced by
                :meth:`encoded`.

        Returns:
            Board: Board holding that position with empty history. The winner
                is derived from the king: missing means BLACK won, on an edge
                means WHITE won.

        Raises:
            ValueError: If the text has the wrong length, an unknown turn or
                piece character, more than one king, or a non-king piece on
                the throne.
        """
        if not text or not isinstance(text, str):
            raise ValueError("encoded board must be a non-empty string")
        text = text.strip()
        if len(text) != NUM_SQUARES + 1:
            raise ValueError(f"encoded board must have {NUM_SQUARES + 1} characters")
        turn = Piece.from_char(text[0])
        if turn not in (WHITE, BLACK):
            raise ValueError("turn must be 'W' or 'B'")
        squares = [Piece.from_char(ch) for ch in text[1:]]
        if squares.count(KING) > 1:
            raise ValueError("more than one king")
        if squares[THRONE.index] in (WHITE, BLACK):
            raise ValueError("only the king may occupy the throne")
        board = cls(squares=squares, turn=turn)
        king = board.king_position()
        if king is None:
            board.winner = BLACK
        elif king.is_edge():
            board.winner = WHITE
        return board

    def init(self) -> None:
        """Reset this board to the initial position."""
        self.squares = [EMPTY] * NUM_SQUARES
        for s in INITIAL_ATTACKERS:
            self.squares[s.index] = BLACK
        for s in INITIAL_DEFENDERS:
            self.squares[s.index] = WHITE
        self.squares[THRONE.index] = KING
        self.turn = BLACK
        self.winner = None
        self.move_count = 0
        self.move_limit = UNLIMITED_MOVES
        self.repeated = False
        self._record = []
        self._undo = []

    def copy(self) -> "Board":
        """Return an independent copy, history and undo stacks included."""
        return Board(
            squares=list(self.squares),
            turn=self.turn,
            winner=self.winner,
            move_count=self.move_count,
            move_limit=self.move_limit,
            repeated=self.repeated,
            _record=list(self._record),
            _undo=list(self._undo),
        )

    def set_move_limit(self, n: int) -> None:
        """Allow ``n`` more moves from the current position.

        Raises:
            ValueError: If ``2 * n`` does not exceed the current move count.
        """
        if 2 * n <= self.move_count:
            raise ValueError("move count already exceeds the move limit")
        self.move_limit = n + self.move_count

    def repeated_position(self) -> bool:
        return self.repeated

    def king_position(self) -> Optional[Square]:
        for i, p in enumerate(self.squares):
            if p is KING:
                return SQUARE_LIST[i]
        return None

    def get(self, s: Union[Square, int], row: Optional[int] = None) -> Piece:
        """Return the piece at square ``s`` or at ``(col, row)``."""
        if row is not None:
            return self.squares[sq(s, row).index]
        if not isinstance(s, Square):
            raise TypeError("get() expects a Square or (col, row)")
        return self.squares[s.index]

    def put(self, piece: Piece, s: Square) -> None:
        """Set square ``s`` to ``piece`` without touching history."""
        self.squares[s.index] = piece

    def encoded(self) -> str:
        """Return the turn character followed by every square's piece character."""
        return str(self.turn) + "".join(p.value for p in self.squares)

    # --- legality ---
    def is_unblocked_move(self, from_sq: Square, to_sq: Square) -> bool:
        """Return True iff FROM-TO is a rook move over empty squares only.

        The destination counts as one of the squares that must be empty.
        """
        direction = from_sq.direction(to_sq)
        if direction < 0:
            return False
        ray = ROOK_SQUARES[from_sq.index][direction]
        for s in ray[: from_sq.distance(to_sq)]:
            if self.squares[s.index] is not EMPTY:
                return False
        return True

    def is_legal(self, move: Union[Move, Square], to_sq: Optional[Square] = None) -> bool:
        """Return True iff the move is legal for the side to move."""
        move = _as_move(move, to_sq)
        if self.get(move.from_sq).side() is not self.turn:
            return False
        return self._is_legal_any_side(move.from_sq, move.to_sq)

    def _is_legal_any_side(self, from_sq: Square, to_sq: Square) -> bool:
        if to_sq == THRONE and self.squares[from_sq.index] is not KING:
            return False
        if self.move_count > self.move_limit:
            return False
        return self.is_unblocked_move(from_sq, to_sq)

    def legal_moves(self, side: Piece) -> List[Move]:
        """Return every legal move for ``side``, ignoring whose turn it is.

        Args:
            side (Piece): WHITE (the king included) or BLACK.

        Returns:
            List[Move]: Fresh list of moves, ordered by origin square index
                and then by direction and distance.

        Raises:
            ValueError: If ``side`` is EMPTY.
        """
        if side is EMPTY:
            raise ValueError("EMPTY has no moves")
        side = side.side()
        moves: List[Move] = []
        if self.move_count > self.move_limit:
            return moves
        squares = self.squares
        for idx, piece in enumerate(squares):
            if piece is EMPTY or piece.side() is not side:
                continue
            origin = SQUARE_LIST[idx]
            for ray in ROOK_SQUARES[idx]:
                for to_sq in ray:
                    if squares[to_sq.index] is not EMPTY:
                        break
                    # Only the king may stop on the throne; others pass over it
                    if to_sq == THRONE and piece is not KING:
                        continue
                    moves.append(Move(origin, to_sq))
        return moves

    def has_move(self, side: Piece) -> bool:
        return bool(self.legal_moves(side))

    # --- move application ---
    def make_move(self, move: Union[Move, Square], to_sq: Optional[Square] = None) -> None:
        """Apply a legal move in place.

        Order of effects: relocate the piece, vacate the origin and check the
        resulting position for repetition, then either declare WHITE the
        winner on a king escape or resolve captures in all four directions
        and declare BLACK the winner if the king is gone. Finally the turn
        flips and the move counter advances.

        Raises:
            ValueError: If the move is not legal in this position.
        """
        move = _as_move(move, to_sq)
        if not self.is_legal(move):
            raise ValueError(f"illegal move: {move}")
        from_sq, to_sq = move.from_sq, move.to_sq
        prev_turn, prev_winner, prev_repeated = self.turn, self.winner, self.repeated

        piece = self.squares[from_sq.index]
        self.put(piece, to_sq)
        self.put(EMPTY, from_sq)
        record_slot = len(self._record)
        self._check_repeated()

        captured: List[Tuple[Square, Piece]] = []
        king = self.king_position()
        if king is not None and king.is_edge():
            self.winner = WHITE
        else:
            for direction in range(4):
                far = to_sq.rook_move(direction, 2)
                if far is not None:
                    self._capture(far, to_sq, captured)
            if self.king_position() is None:
                self.winner = BLACK

        self._undo.append(
            (move, piece, tuple(captured), record_slot, prev_turn, prev_winner, prev_repeated)
        )
        self.turn = self.turn.opponent()
        self.move_count += 1

    def apply(self, move: Move) -> "Board":
        """Return a new Board with ``move`` applied; this board is unchanged."""
        new_board = self.copy()
        new_board.make_move(move)
        return new_board

    def _check_repeated(self) -> None:
        # Encoded with the mover still on turn; a repeat hands the win to the opponent
        enc = self.encoded()
        self.repeated = enc in self._record
        self._record.append(enc)
        if self.repeated:
            self.winner = self.turn.opponent()

    def _capture(self, sq0: Square, sq2: Square, captured: List[Tuple[Square, Piece]]) -> None:
        """Capture the piece between SQ0 and SQ2 if the rules allow it.

        SQ2 is the square just moved to and SQ0 the square two steps away.
        """
        cap = sq0.between(sq2)
        piece = self.squares[cap.index]
        if piece is EMPTY:
            return
        if piece is KING:
            if self.is_throne_zone(cap):
                taken = all(self.is_hostile(n, cap) for n in cap.neighbours())
            else:
                taken = self.is_hostile(sq0, cap) and self.is_hostile(sq2, cap)
            if taken:
                captured.append((cap, piece))
                self.put(EMPTY, cap)
                self.winner = BLACK
        elif self.is_hostile(sq0, cap) and self.is_hostile(sq2, cap):
            captured.append((cap, piece))
            self.put(EMPTY, cap)

    def is_hostile(self, other: Square, me: Square) -> bool:
        """Return True iff square ``other`` is hostile to the piece on ``me``.

        ``other`` must be an orthogonal neighbour of ``me``. The empty throne
        is hostile to everyone. The occupied throne is hostile to BLACK, and
        to a WHITE piece only when BLACK holds the throne's two neighbours
        diagonal to that piece and the neighbour opposite it.
        """
        mine = self.squares[me.index]
        theirs = self.squares[other.index]
        if other == THRONE:
            if theirs is EMPTY:
                return True
            if mine is WHITE:
                dia1 = me.diag1(other)
                dia2 = me.diag2(other)
                if self.get(dia1) is BLACK and self.get(dia2) is BLACK:
                    return (
                        self.get(dia1.diag1(other)) is BLACK
                        or self.get(dia1.diag2(other)) is BLACK
                    )
                return False
            return mine is BLACK
        if theirs is BLACK:
            return mine is WHITE or mine is KING
        if theirs is WHITE or theirs is KING:
            return mine is BLACK
        return False

    @staticmethod
    def is_throne_zone(s: Square) -> bool:
        """Return True for the throne and its four orthogonal neighbours."""
        return s in THRONE_ZONE

    def undo(self) -> None:
        """Undo the last move. No effect when there is nothing to undo.

        The repetition record of the undone position is dropped unless that
        position produced a repetition win.
        """
        if not self._undo:
            return
        (
            move,
            piece,
            captured,
            record_slot,
            prev_turn,
            prev_winner,
            prev_repeated,
        ) = self._undo.pop()
        if not self.repeated:
            del self._record[record_slot]
        self.put(piece, move.from_sq)
        self.put(EMPTY, move.to_sq)
        for s, p in captured:
            self.put(p, s)
        self.turn = prev_turn
        self.winner = prev_winner
        self.repeated = prev_repeated
        self.move_count -= 1

    def clear_undo(self) -> None:
        """Drop undo history and position records; placement and winner stay."""
        self._undo.clear()
        self._record.clear()
        self.move_count = 0

    # --- text ---
    def to_text(self, coordinates: bool = True) -> str:
        """Render the board, row 9 at the top.

        Args:
            coordinates (bool): Include row numbers on the left and column
                letters underneath.

        Returns:
            str: One line per row, pieces separated by spaces.
        """
        lines: List[str] = []
        for r in range(SIZE - 1, -1, -1):
            prefix = f"{r + 1:2d}" if coordinates else "  "
            row = "".join(f" {self.squares[r * SIZE + c]}" for c in range(SIZE))
            lines.append(prefix + row)
        if coordinates:
            lines.append("  " + "".join(f" {ch}" for ch in "abcdefghi"))
        return "\n".join(lines) + "\n"

    def __str__(self) -> str:
        return self.to_text(True)
