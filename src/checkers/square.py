"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from src.core.exceptions import OutOfBoardError

if TYPE_CHECKING:
    from src.checkers.pieces import Piece

# (rows, cols). Checkers board is always 8x8
BOARD_DIMENSIONS = (8, 8)
NUM_SQUARES = BOARD_DIMENSIONS[0] * BOARD_DIMENSIONS[1]


def is_within_bounds(row: int, col: int) -> bool:
    return (0 <= row < BOARD_DIMENSIONS[0]) and (0 <= col < BOARD_DIMENSIONS[1])


def square_id(row: int, col: int) -> int:
    """Row-major numbering: (0, 0) is square 0, (0, 7) is 7, (1, 0) is 8, ..."""
    if not is_within_bounds(row, col):
        raise OutOfBoardError(f"({row}, {col}) is not on the board.")
    return row * BOARD_DIMENSIONS[1] + col


def position_of(square_id: int) -> tuple[int, int]:
    """Inverse of `square_id()`: returns (row, col)"""
    if not 0 <= square_id < NUM_SQUARES:
        raise OutOfBoardError(f"Square id {square_id} is not on the board.")
    return divmod(square_id, BOARD_DIMENSIONS[1])


@dataclass(eq=False)
class Square:
    """
    One of the 64 fixed cells. Only its occupancy ever changes (and only through the Board).
    Compared by identity: there is exactly one Square object per id.
    """

    id: int
    occupying_piece: Optional[Piece] = field(default=None, repr=False)

    @property
    def row(self) -> int:
        return position_of(self.id)[0]

    @property
    def col(self) -> int:
        return position_of(self.id)[1]

    @property
    def is_occupied(self) -> bool:
        return self.occupying_piece is not None

    @property
    def is_dark(self) -> bool:
        """Pieces only ever stand on the dark squares"""
        return (self.row + self.col) % 2 == 1
