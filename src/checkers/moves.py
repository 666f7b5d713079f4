"""
Move rules
----

Pure functions over a board and a candidate piece. Nothing in here mutates the board:
the GameSession asks for a classification and applies it itself.

Only two kinds of moves exist:
* a simple step: one square diagonally forward onto an empty square.
* a jump capture: two squares diagonally (forward or backward) over an adjacent opposing piece, onto an empty square.

NOTE: `Piece.is_queen` is deliberately not looked at. Queens follow the same rules as every other piece.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Protocol

from src.checkers.pieces import Piece
from src.checkers.square import NUM_SQUARES, Square, position_of, square_id


class Board(Protocol):
    """Just the parts the rules need"""

    def square(self, square_id: int) -> Square: ...


class MoveKind(StrEnum):
    MOVE = "move"
    CAPTURE = "capture"


@dataclass(frozen=True)
class Delta:
    col_distance: int  # always >= 0
    row_delta: int  # signed: negative is up the board


@dataclass(frozen=True)
class AvailableMoves:
    """Destinations to show the player. `kind` tells whether these are captures or simple moves (never a mix)."""

    kind: MoveKind
    squares: list[Square] = field(default_factory=list)

    @property
    def square_ids(self) -> list[int]:
        return [square.id for square in self.squares]


# --- CLASSIFICATION OF A SINGLE CANDIDATE MOVE ---
@dataclass(frozen=True)
class IllegalMove:
    target_square_id: int


@dataclass(frozen=True)
class SimpleMove:
    target_square_id: int


@dataclass(frozen=True)
class CaptureMove:
    target_square_id: int
    captured_square_id: int


MoveClassification = IllegalMove | SimpleMove | CaptureMove


def delta(from_square_id: int, to_square_id: int) -> Delta:
    from_row, from_col = position_of(from_square_id)
    to_row, to_col = position_of(to_square_id)
    return Delta(col_distance=abs(to_col - from_col), row_delta=to_row - from_row)


def midpoint(from_square_id: int, to_square_id: int) -> int:
    """Square in between source and target of a jump. Only meaningful for jumps (parity is guaranteed then)."""
    from_row, from_col = position_of(from_square_id)
    to_row, to_col = position_of(to_square_id)
    return square_id((from_row + to_row) // 2, (from_col + to_col) // 2)


def is_legal_step(piece: Piece, target: Square, board: Board) -> bool:
    """One column sideways, one row in the piece's forward direction, onto an empty square"""
    d = delta(piece.square_id, target.id)
    return d.col_distance == 1 and d.row_delta == piece.forward and not target.is_occupied


def is_legal_jump_capture(piece: Piece, target: Square, board: Board) -> bool:
    """
    Two columns sideways and two rows up OR down (captures may go backwards),
    jumping over an opponent's piece onto an empty square.
    """
    d = delta(piece.square_id, target.id)
    if not (d.col_distance == 2 and abs(d.row_delta) == 2):
        return False
    if target.is_occupied:
        return False

    jumped = board.square(midpoint(piece.square_id, target.id)).occupying_piece
    return jumped is not None and piece.is_opponent_of(jumped)


def available_moves(piece: Piece, board: Board) -> AvailableMoves:
    """
    Scan the whole board for destinations of the given piece.

    Priority rule: if any capture is possible, only the captures are returned and the simple moves are dropped entirely.
    """
    moves: list[Square] = []
    captures: list[Square] = []
    for idx in range(NUM_SQUARES):
        target = board.square(idx)
        if is_legal_jump_capture(piece, target, board):
            captures.append(target)
        elif is_legal_step(piece, target, board):
            moves.append(target)

    if captures:
        return AvailableMoves(MoveKind.CAPTURE, captures)
    return AvailableMoves(MoveKind.MOVE, moves)


def validate_and_classify(piece: Piece, target: Square, board: Board) -> MoveClassification:
    """
    Same two predicates as `available_moves()`, applied to a single target (used when committing a move).

    NOTE: this does not apply the capture priority. A simple move is classified as such even if a capture was on offer,
    matching what the player is allowed to click on.
    """
    if is_legal_jump_capture(piece, target, board):
        return CaptureMove(target.id, midpoint(piece.square_id, target.id))
    if is_legal_step(piece, target, board):
        return SimpleMove(target.id)
    return IllegalMove(target.id)
