"""
The GameSession is the entrypoint into the domain layer.
It owns the Board and the turn/selection state, and sequences a turn: select -> validate -> execute -> switch turn.

States:
* Idle: nothing selected
* Selected: a piece of the active player is selected, its destinations are exposed in `destinations`

While a committed move resolves (see src/checkers/lock.py) every input is dropped, not queued.
User-level illegality (wrong piece, bad target) never raises: the outcome tells the caller nothing happened.
"""

import logging
import time
from enum import StrEnum
from typing import Optional, Self

from src.checkers.board import Board
from src.checkers.lock import Clock, MoveLock
from src.checkers.moves import (
    AvailableMoves,
    CaptureMove,
    IllegalMove,
    MoveClassification,
    MoveKind,
    SimpleMove,
    available_moves,
    validate_and_classify,
)
from src.checkers.pieces import Piece
from src.checkers.ports import Animator, PlayerChangeFn
from src.core.config import DEFAULT_MOVE_LOCK_TIMEOUT, Settings
from src.core.exceptions import (
    GameStateError,
    IllegalDestinationError,
    InconsistentBoardStateError,
    InvalidSelectionError,
    MoveLockError,
)
from src.core.models import SessionModel
from src.core.shared_types import Color

logger = logging.getLogger(__name__)


class SelectionOutcome(StrEnum):
    SELECTED = "selected"
    RESELECTED = "reselected"
    DESELECTED = "deselected"
    IGNORED = "ignored"


class GameSession:
    def __init__(
        self,
        board: Board,
        active_player: Color = Color.WHITE,
        animator: Optional[Animator] = None,
        move_lock_timeout: float = DEFAULT_MOVE_LOCK_TIMEOUT,
        clock: Optional[Clock] = None,
    ) -> None:
        self.board = board
        self.active_player = active_player
        self.selected_piece: Optional[Piece] = None
        self.destinations: Optional[AvailableMoves] = None
        self.animator = animator
        self._lock = MoveLock(move_lock_timeout, clock=clock or time.monotonic)
        self._player_change_listeners: list[PlayerChangeFn] = []

    @classmethod
    def new(cls, settings: Optional[Settings] = None, animator: Optional[Animator] = None) -> Self:
        """Fresh session, using the configured starting layout (or the standard one)."""
        settings = settings or Settings()
        board = (
            Board.from_layout(settings.starting_layout, strict=settings.strict_invariants)
            if settings.starting_layout
            else Board.starting_position(strict=settings.strict_invariants)
        )
        return cls(
            board,
            active_player=settings.first_player,
            animator=animator,
            move_lock_timeout=settings.move_lock_timeout,
        )

    @classmethod
    def from_model(
        cls, model: SessionModel, settings: Optional[Settings] = None, animator: Optional[Animator] = None
    ) -> Self:
        settings = settings or Settings()
        if model.active_player not in [color.value for color in Color]:
            raise GameStateError(
                f"Invalid player {model.active_player!r}. Pick one from {','.join(Color)}"
            )
        board = Board.from_layout(model.layout, strict=settings.strict_invariants)
        return cls(
            board,
            active_player=Color(model.active_player),
            animator=animator,
            move_lock_timeout=settings.move_lock_timeout,
        )

    def to_model(self) -> SessionModel:
        """Snapshot the board + turn. A selection is not part of the snapshot."""
        if self.move_locked:
            raise GameStateError("Cannot snapshot the session while a move is resolving")
        return SessionModel(layout=self.board.to_layout(), active_player=str(self.active_player))

    # --- STATE ---
    @property
    def move_locked(self) -> bool:
        return self._lock.locked

    @property
    def is_idle(self) -> bool:
        return self.selected_piece is None

    def add_player_change_listener(self, listener: PlayerChangeFn) -> None:
        """Called with the new active player, once per committed move, after the lock is released."""
        self._player_change_listeners.append(listener)

    def hoverable(self, piece: Piece) -> bool:
        """May this piece be highlighted on hover? (no rules, only whose turn it is)"""
        return not self.move_locked and piece.color == self.active_player

    # --- INPUT ---
    def select(self, piece: Piece) -> SelectionOutcome:
        """Select / reselect / deselect a piece of the active player."""
        try:
            self._validate_selection(piece)
        except InvalidSelectionError as err:
            logger.debug("Selection ignored: %s", err)
            return SelectionOutcome.IGNORED

        if self.selected_piece is piece:
            self._clear_selection()
            logger.debug("Deselected piece on square %d", piece.square_id)
            return SelectionOutcome.DESELECTED

        outcome = SelectionOutcome.SELECTED if self.is_idle else SelectionOutcome.RESELECTED
        self.selected_piece = piece
        self.destinations = available_moves(piece, self.board)
        logger.debug(
            "Selected piece on square %d, %s destinations: %s",
            piece.square_id,
            self.destinations.kind,
            self.destinations.square_ids,
        )
        return outcome

    def attempt_move(self, target_square_id: int) -> MoveClassification:
        """
        Try to move the selected piece onto the target square.
        ----

        1. reject: locked, nothing selected, occupied target
        2. classify the move with the rules
        3. lock, update the board (capture: remove the jumped piece first), request the animation(s)
        4. once the animation(s) complete: clear selection, release lock, switch turn, notify listeners

        If the animator raises on a request, step 4 happens right away and MoveLockError is raised.
        """
        try:
            classification = self._classify(target_square_id)
        except IllegalDestinationError as err:
            logger.debug("Move ignored: %s", err)
            return IllegalMove(target_square_id)

        assert self.selected_piece is not None
        self._commit(self.selected_piece, classification)
        return classification

    # -- PRIVATE HELPERS ---
    def _accepting_input(self) -> bool:
        if self.move_locked:
            # dropping input is fine, dropping it forever is not
            self._lock.check_stalled()
            return False
        return True

    def _validate_selection(self, piece: Piece) -> None:
        if not self._accepting_input():
            raise InvalidSelectionError("a move is still resolving")
        if piece.color != self.active_player:
            raise InvalidSelectionError(
                f"{piece.color} piece selected while it is {self.active_player}'s turn"
            )
        if self.board.piece_at(piece.square_id) is not piece:
            raise InconsistentBoardStateError(
                f"Selected piece records square {piece.square_id}, which does not hold it"
            )

    def _classify(self, target_square_id: int) -> SimpleMove | CaptureMove:
        if not self._accepting_input():
            raise IllegalDestinationError("a move is still resolving")
        if self.selected_piece is None:
            raise IllegalDestinationError("no piece selected")

        target = self.board.square(target_square_id)
        if target.is_occupied:
            raise IllegalDestinationError(f"square {target_square_id} is occupied")

        classification = validate_and_classify(self.selected_piece, target, self.board)
        if isinstance(classification, IllegalMove):
            raise IllegalDestinationError(
                f"square {target_square_id} is not reachable from square {self.selected_piece.square_id}"
            )
        return classification

    def _commit(self, piece: Piece, move: SimpleMove | CaptureMove) -> None:
        from_square_id = piece.square_id
        is_capture = isinstance(move, CaptureMove)
        # lock first: nothing may get in between validation and the board update
        completion = self._lock.acquire(
            parts=2 if is_capture else 1, on_release=self._finish_turn
        )

        removed: Optional[Piece] = None
        if is_capture:
            removed = self.board.remove(move.captured_square_id)
        self.board.place(piece, move.target_square_id)
        self.destinations = None
        logger.info(
            "%s %s: square %d -> %d",
            self.active_player,
            MoveKind.CAPTURE if is_capture else MoveKind.MOVE,
            from_square_id,
            move.target_square_id,
        )

        on_move_done = completion.part()
        on_capture_done = completion.part() if removed is not None else None
        if self.animator is None:
            on_move_done()
            if on_capture_done is not None:
                on_capture_done()
            return

        try:
            self.animator.animate_move(piece, from_square_id, move.target_square_id, on_move_done)
            if removed is not None and on_capture_done is not None:
                self.animator.animate_capture(removed, on_capture_done)
        except Exception as err:
            # the move is committed and cannot be undone: resolve it so the lock never outlives the request
            completion.settle()
            raise MoveLockError(f"Animation request failed, move resolved without it: {err}") from err

    def _finish_turn(self) -> None:
        self._clear_selection()
        self.active_player = self.active_player.opponent
        logger.info("Turn passes to %s", self.active_player)
        for listener in self._player_change_listeners:
            listener(self.active_player)

    def _clear_selection(self) -> None:
        self.selected_piece = None
        self.destinations = None
