"""
Orchestration of communication from the pointer (via picking service) to the GameSession, and of visual feedback back to the renderer.

No rules in here: the adapter resolves what was clicked / hovered, routes it to the session,
and translates the outcome into highlight requests.
"""

import logging
from typing import Optional, Self

from src.api.models import PointerEvent, SessionStateResponse
from src.checkers.moves import AvailableMoves, IllegalMove, MoveKind
from src.checkers.pieces import Piece
from src.checkers.ports import EntityKind, EntityRef, EventDispatcher, PickingService, Renderer
from src.checkers.session import GameSession, SelectionOutcome
from src.core.config import Settings
from src.core.exceptions import MoveLockError
from src.core.shared_types import Color, HighlightStyle, PointerEventKind

logger = logging.getLogger(__name__)

DESTINATION_STYLES: dict[MoveKind, HighlightStyle] = {
    MoveKind.MOVE: HighlightStyle.DESTINATION_MOVE,
    MoveKind.CAPTURE: HighlightStyle.DESTINATION_CAPTURE,
}


class InteractionAdapter:
    """Turns clicks and hovers into session input, and session outcomes into highlight requests."""

    def __init__(self, session: GameSession, picking: PickingService, renderer: Renderer) -> None:
        self.session = session
        self.picking = picking
        self.renderer = renderer
        self.hovered_piece: Optional[Piece] = None
        # piece whose move is being animated, to put it back to its default look once the turn passes
        self._moving_piece: Optional[Piece] = None
        session.add_player_change_listener(self._on_player_change)

    @classmethod
    def create(
        cls,
        picking: PickingService,
        renderer: Renderer,
        dispatcher: Optional[EventDispatcher] = None,
        settings: Optional[Settings] = None,
    ) -> Self:
        """Convenience: new session animated by the renderer, optionally wired to an event source"""
        session = GameSession.new(settings, animator=renderer)
        adapter = cls(session, picking, renderer)
        if dispatcher is not None:
            adapter.connect(dispatcher)
        return adapter

    def connect(self, dispatcher: EventDispatcher) -> None:
        dispatcher.subscribe(PointerEventKind.CLICK, self.on_click)
        dispatcher.subscribe(PointerEventKind.MOVE, self.on_pointer_move)

    # -- EVENT HANDLERS ---
    def on_click(self, event: PointerEvent) -> None:
        entity = self._pick(event)
        if entity.kind == EntityKind.PIECE:
            assert entity.piece is not None
            self._click_piece(entity.piece)
        elif entity.kind == EntityKind.SQUARE:
            assert entity.square_id is not None
            self._click_square(entity.square_id)

    def on_pointer_move(self, event: PointerEvent) -> None:
        """Hover feedback: only for the active player's pieces, and only while nothing is selected."""
        entity = self._pick(event)
        piece = entity.piece if entity.kind == EntityKind.PIECE else None
        if piece is None or not self.session.is_idle or not self.session.hoverable(piece):
            self.reset_hover()
            return

        if piece is not self.hovered_piece:
            self.reset_hover()
            self.hovered_piece = piece
            self.renderer.highlight([piece], HighlightStyle.HOVERABLE)

    def reset_hover(self) -> None:
        if self.hovered_piece is not None:
            self.renderer.clear_highlight([self.hovered_piece])
            self.hovered_piece = None

    def state(self) -> SessionStateResponse:
        session = self.session
        destinations = session.destinations
        return SessionStateResponse(
            active_player=session.active_player,
            selected_square=session.selected_piece.square_id if session.selected_piece else None,
            destinations=destinations.square_ids if destinations else [],
            destination_kind=str(destinations.kind) if destinations else None,
            move_locked=session.move_locked,
            layout=session.board.to_layout(),
        )

    # -- Internal helpers --
    def _pick(self, event: PointerEvent) -> EntityRef:
        return self.picking.pick_entity_at(event.x, event.y) or EntityRef.nothing()

    def _click_piece(self, piece: Piece) -> None:
        previous_piece = self.session.selected_piece
        previous_destinations = self.session.destinations

        outcome = self.session.select(piece)
        if outcome == SelectionOutcome.IGNORED:
            return

        # deselect and reselect both undo the previous selection's feedback
        if previous_piece is not None:
            self._clear_destinations(previous_destinations)
            self.renderer.highlight([previous_piece], HighlightStyle.DEFAULT)

        if outcome in (SelectionOutcome.SELECTED, SelectionOutcome.RESELECTED):
            self.reset_hover()
            self.renderer.highlight([piece], HighlightStyle.SELECTED)
            self._show_destinations(self.session.destinations)

    def _click_square(self, square_id: int) -> None:
        destinations = self.session.destinations
        # set before the attempt: the turn may pass inside it when the animation completes synchronously
        if not self.session.move_locked:
            self._moving_piece = self.session.selected_piece

        try:
            result = self.session.attempt_move(square_id)
        except MoveLockError:
            # the move went through without its animation: drop its feedback too
            self._clear_destinations(destinations)
            raise
        if isinstance(result, IllegalMove):
            if not self.session.move_locked:
                self._moving_piece = None
            return

        self._clear_destinations(destinations)

    def _on_player_change(self, new_player: Color) -> None:
        if self._moving_piece is not None:
            self.renderer.highlight([self._moving_piece], HighlightStyle.DEFAULT)
            self._moving_piece = None
        logger.debug("Adapter reset feedback, %s to move", new_player)

    def _show_destinations(self, destinations: Optional[AvailableMoves]) -> None:
        if destinations and destinations.squares:
            self.renderer.highlight(destinations.square_ids, DESTINATION_STYLES[destinations.kind])

    def _clear_destinations(self, destinations: Optional[AvailableMoves]) -> None:
        if destinations and destinations.squares:
            self.renderer.clear_highlight(destinations.square_ids)
