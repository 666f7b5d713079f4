"""The Board owns the squares and implements the mechanical bookkeeping of which piece stands where. It knows nothing about the rules."""

import logging
from typing import Optional, Self

from src.checkers.layout import STARTING_LAYOUT, parse_layout, row_to_layout
from src.checkers.pieces import Piece
from src.checkers.square import BOARD_DIMENSIONS, NUM_SQUARES, Square, position_of, square_id
from src.core.exceptions import InconsistentBoardStateError, OutOfBoardError
from src.core.shared_types import Color

logger = logging.getLogger(__name__)


class Board:
    """
    Fixed 8x8 grid of squares + the pieces standing on them.

    `place()` and `remove()` are the only ways occupancy changes. With `strict=True` the full
    bidirectional consistency check runs after each of them.
    """

    def __init__(self, strict: bool = True) -> None:
        self.squares: list[Square] = [Square(idx) for idx in range(NUM_SQUARES)]
        self.strict = strict

    @classmethod
    def empty(cls, strict: bool = True) -> Self:
        return cls(strict=strict)

    @classmethod
    def starting_position(cls, strict: bool = True) -> Self:
        return cls.from_layout(STARTING_LAYOUT, strict=strict)

    @classmethod
    def from_layout(cls, layout: str, strict: bool = True) -> Self:
        """Construct a board from a layout string (see src/checkers/layout.py)"""
        board = cls(strict=strict)
        for idx, (color, is_queen) in parse_layout(layout).items():
            board.place(Piece(color, idx, is_queen=is_queen), idx)
        return board

    def to_layout(self) -> str:
        """Rows are separated by slashes, row 0 first."""
        num_rows, num_cols = BOARD_DIMENSIONS
        rows: list[str] = []
        for row in range(num_rows):
            row_pieces = [self.piece_at(square_id(row, col)) for col in range(num_cols)]
            rows.append(
                row_to_layout(
                    [piece.to_layout() if piece else None for piece in row_pieces]
                )
            )
        return "/".join(rows)

    def __repr__(self) -> str:
        return f"Board({self.to_layout()!r})"

    # --- LOOKUPS ---
    def square(self, square_id: int) -> Square:
        if not 0 <= square_id < NUM_SQUARES:
            raise OutOfBoardError(f"Square id {square_id} is not on the board.")
        return self.squares[square_id]

    def square_at(self, row: int, col: int) -> Square:
        return self.squares[square_id(row, col)]

    def position_of(self, square_id: int) -> tuple[int, int]:
        return position_of(square_id)

    def piece_at(self, square_id: int) -> Optional[Piece]:
        return self.square(square_id).occupying_piece

    def pieces(self, color: Optional[Color] = None) -> list[Piece]:
        """All pieces on the board (of a given color), ordered by square id"""
        return [
            square.occupying_piece
            for square in self.squares
            if square.occupying_piece is not None
            and (color is None or square.occupying_piece.color == color)
        ]

    def empty_squares(self) -> list[Square]:
        return [square for square in self.squares if not square.is_occupied]

    # --- MUTATION PRIMITIVES ---
    def place(self, piece: Piece, square_id: int) -> None:
        """
        Put the piece on the square, clearing the square it stood on before (if it was on this board).

        No rule checking here, that is the rule engine's job. But a piece never silently displaces another one.
        """
        target = self.square(square_id)
        if target.is_occupied and target.occupying_piece is not piece:
            raise InconsistentBoardStateError(
                f"Cannot place {piece} on square {square_id}: already occupied by {target.occupying_piece}"
            )

        previous = self.squares[piece.square_id] if 0 <= piece.square_id < NUM_SQUARES else None
        if previous is not None and previous.occupying_piece is piece:
            previous.occupying_piece = None

        target.occupying_piece = piece
        piece.square_id = square_id
        logger.debug("Placed %s piece on square %d", piece.color, square_id)
        self._verify()

    def remove(self, square_id: int) -> Piece:
        """Take the piece off the board (a capture). Returns the removed piece."""
        square = self.square(square_id)
        piece = square.occupying_piece
        if piece is None:
            raise InconsistentBoardStateError(
                f"Cannot remove a piece from square {square_id}: it is empty"
            )
        square.occupying_piece = None
        logger.debug("Removed %s piece from square %d", piece.color, square_id)
        self._verify()
        return piece

    # --- INVARIANTS ---
    def check_consistency(self) -> None:
        """Every occupant must record the square it stands on, and no piece may stand on two squares."""
        seen: set[int] = set()
        for square in self.squares:
            piece = square.occupying_piece
            if piece is None:
                continue
            if piece.square_id != square.id:
                raise InconsistentBoardStateError(
                    f"Square {square.id} holds a piece that records square {piece.square_id}"
                )
            if id(piece) in seen:
                raise InconsistentBoardStateError(
                    f"Piece on square {square.id} occupies more than one square"
                )
            seen.add(id(piece))

    def _verify(self) -> None:
        if self.strict:
            self.check_consistency()
