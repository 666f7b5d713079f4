"""Unit tests for src/services/interaction.py"""

from typing import Callable, Optional
from unittest.mock import Mock

import pytest

from src.api.models import PointerEvent
from src.checkers.board import Board
from src.checkers.pieces import Piece
from src.checkers.ports import EntityRef, PointerHandler
from src.checkers.session import GameSession
from src.core.config import Settings
from src.core.exceptions import MoveLockError
from src.core.shared_types import Color, HighlightStyle, PointerEventKind
from src.services.interaction import InteractionAdapter

# White on 8 and 17, black on 10 and 46
LAYOUT = "8/w1b5/1w6/8/8/6b1/8/8"


# --- MOCK DEPENDENCIES ----
class MockPicking:
    """Pretend the pointer coordinates are (square id, 0): whatever stands there (or the square itself) gets picked"""

    def __init__(self, board: Board) -> None:
        self.board = board

    def pick_entity_at(self, pointer_x: float, pointer_y: float) -> Optional[EntityRef]:
        square_id = int(pointer_x)
        if not 0 <= square_id < 64:
            return None
        piece = self.board.piece_at(square_id)
        return EntityRef.to_piece(piece) if piece else EntityRef.to_square(square_id)


class MockDispatcher:
    def __init__(self) -> None:
        self.handlers: dict[PointerEventKind, list[PointerHandler]] = {}

    def subscribe(self, kind: PointerEventKind, handler: PointerHandler) -> None:
        self.handlers.setdefault(kind, []).append(handler)

    def emit(self, event: PointerEvent) -> None:
        for handler in self.handlers.get(event.kind, []):
            handler(event)


def sync_renderer() -> Mock:
    """Renderer whose animations complete immediately"""
    renderer = Mock()
    renderer.animate_move.side_effect = lambda piece, from_id, to_id, on_complete: on_complete()
    renderer.animate_capture.side_effect = lambda piece, on_complete: on_complete()
    return renderer


def click(square_id: float) -> PointerEvent:
    return PointerEvent(kind=PointerEventKind.CLICK, x=square_id, y=0)


def hover(square_id: float) -> PointerEvent:
    return PointerEvent(kind=PointerEventKind.MOVE, x=square_id, y=0)


AdapterFactory = Callable[..., tuple[InteractionAdapter, Mock, MockDispatcher]]


@pytest.fixture
def make_adapter() -> AdapterFactory:
    def _create(renderer: Optional[Mock] = None) -> tuple[InteractionAdapter, Mock, MockDispatcher]:
        renderer = renderer or sync_renderer()
        session = GameSession(Board.from_layout(LAYOUT), animator=renderer)
        adapter = InteractionAdapter(session, MockPicking(session.board), renderer)
        dispatcher = MockDispatcher()
        adapter.connect(dispatcher)
        return adapter, renderer, dispatcher

    return _create


def piece_on(adapter: InteractionAdapter, square_id: int) -> Piece:
    piece = adapter.session.board.piece_at(square_id)
    assert piece is not None
    return piece


# --- WIRING ---
def test_connect_subscribes_to_clicks_and_moves(make_adapter: AdapterFactory) -> None:
    _, _, dispatcher = make_adapter()
    assert len(dispatcher.handlers[PointerEventKind.CLICK]) == 1
    assert len(dispatcher.handlers[PointerEventKind.MOVE]) == 1


def test_create_wires_everything() -> None:
    renderer = sync_renderer()
    dispatcher = MockDispatcher()
    picking = Mock()
    picking.pick_entity_at.return_value = None
    settings = Settings(starting_layout=LAYOUT)

    adapter = InteractionAdapter.create(picking, renderer, dispatcher, settings)

    assert adapter.session.animator is renderer
    assert adapter.session.board.to_layout() == LAYOUT
    dispatcher.emit(click(3))
    picking.pick_entity_at.assert_called_once_with(3, 0)


# --- CLICKS ---
def test_click_nothing(make_adapter: AdapterFactory) -> None:
    adapter, renderer, dispatcher = make_adapter()
    dispatcher.emit(click(-5))
    assert renderer.method_calls == []
    assert adapter.session.is_idle


def test_click_own_piece_highlights_it_and_destinations(make_adapter: AdapterFactory) -> None:
    adapter, renderer, dispatcher = make_adapter()
    piece = piece_on(adapter, 8)

    dispatcher.emit(click(8))

    assert adapter.session.selected_piece is piece
    renderer.highlight.assert_any_call([piece], HighlightStyle.SELECTED)
    renderer.highlight.assert_any_call([1], HighlightStyle.DESTINATION_MOVE)


def test_capture_destinations_get_capture_style(make_adapter: AdapterFactory) -> None:
    adapter, renderer, dispatcher = make_adapter()
    dispatcher.emit(click(17))
    renderer.highlight.assert_any_call([3], HighlightStyle.DESTINATION_CAPTURE)


def test_click_opponent_piece_does_nothing(make_adapter: AdapterFactory) -> None:
    adapter, renderer, dispatcher = make_adapter()
    dispatcher.emit(click(10))
    assert adapter.session.is_idle
    renderer.highlight.assert_not_called()


def test_click_selected_piece_again_deselects(make_adapter: AdapterFactory) -> None:
    adapter, renderer, dispatcher = make_adapter()
    piece = piece_on(adapter, 8)
    dispatcher.emit(click(8))
    renderer.reset_mock()

    dispatcher.emit(click(8))

    assert adapter.session.is_idle
    renderer.clear_highlight.assert_called_once_with([1])
    renderer.highlight.assert_called_once_with([piece], HighlightStyle.DEFAULT)


def test_switching_selection_clears_previous_feedback(make_adapter: AdapterFactory) -> None:
    """Reselection, seen from the renderer"""
    adapter, renderer, dispatcher = make_adapter()
    first = piece_on(adapter, 8)
    second = piece_on(adapter, 17)
    dispatcher.emit(click(8))
    renderer.reset_mock()

    dispatcher.emit(click(17))

    assert adapter.session.selected_piece is second
    renderer.clear_highlight.assert_any_call([1])
    renderer.highlight.assert_any_call([first], HighlightStyle.DEFAULT)
    renderer.highlight.assert_any_call([second], HighlightStyle.SELECTED)
    renderer.highlight.assert_any_call([3], HighlightStyle.DESTINATION_CAPTURE)
    renderer.animate_move.assert_not_called()


def test_click_destination_moves_the_piece(make_adapter: AdapterFactory) -> None:
    adapter, renderer, dispatcher = make_adapter()
    piece = piece_on(adapter, 8)
    dispatcher.emit(click(8))
    renderer.reset_mock()

    dispatcher.emit(click(1))

    renderer.clear_highlight.assert_called_once_with([1])
    renderer.animate_move.assert_called_once()
    assert renderer.animate_move.call_args.args[:3] == (piece, 8, 1)
    # turn passed: moved piece back to its default look
    renderer.highlight.assert_called_once_with([piece], HighlightStyle.DEFAULT)
    assert adapter.session.active_player == Color.BLACK
    assert adapter.session.board.piece_at(1) is piece


def test_click_capture_destination(make_adapter: AdapterFactory) -> None:
    adapter, renderer, dispatcher = make_adapter()
    black = piece_on(adapter, 10)
    dispatcher.emit(click(17))

    dispatcher.emit(click(3))

    renderer.animate_capture.assert_called_once()
    assert renderer.animate_capture.call_args.args[0] is black
    assert not adapter.session.board.square(10).is_occupied
    assert adapter.session.active_player == Color.BLACK


def test_click_unreachable_square(make_adapter: AdapterFactory) -> None:
    adapter, renderer, dispatcher = make_adapter()
    piece = piece_on(adapter, 8)
    dispatcher.emit(click(8))
    renderer.reset_mock()

    dispatcher.emit(click(40))

    assert adapter.session.selected_piece is piece
    assert renderer.method_calls == []


def test_pending_animation_resets_piece_when_done(make_adapter: AdapterFactory) -> None:
    renderer = Mock()
    adapter, renderer, dispatcher = make_adapter(renderer)
    piece = piece_on(adapter, 8)
    dispatcher.emit(click(8))
    dispatcher.emit(click(1))
    assert adapter.session.move_locked
    on_complete = renderer.animate_move.call_args.args[3]

    # clicks while locked are dropped
    renderer.reset_mock()
    dispatcher.emit(click(17))
    dispatcher.emit(click(46))
    assert renderer.method_calls == []

    on_complete()

    renderer.highlight.assert_called_once_with([piece], HighlightStyle.DEFAULT)
    assert adapter.session.active_player == Color.BLACK


# --- HOVER ---
def test_hover_own_piece(make_adapter: AdapterFactory) -> None:
    adapter, renderer, dispatcher = make_adapter()
    piece = piece_on(adapter, 8)

    dispatcher.emit(hover(8))
    dispatcher.emit(hover(8))

    assert adapter.hovered_piece is piece
    renderer.highlight.assert_called_once_with([piece], HighlightStyle.HOVERABLE)


def test_hover_moves_to_other_piece(make_adapter: AdapterFactory) -> None:
    adapter, renderer, dispatcher = make_adapter()
    first = piece_on(adapter, 8)
    second = piece_on(adapter, 17)
    dispatcher.emit(hover(8))
    dispatcher.emit(hover(17))

    renderer.clear_highlight.assert_called_once_with([first])
    renderer.highlight.assert_called_with([second], HighlightStyle.HOVERABLE)


def test_hover_away_resets(make_adapter: AdapterFactory) -> None:
    adapter, renderer, dispatcher = make_adapter()
    piece = piece_on(adapter, 8)
    dispatcher.emit(hover(8))
    dispatcher.emit(hover(30))
    assert adapter.hovered_piece is None
    renderer.clear_highlight.assert_called_once_with([piece])


def test_hover_opponent_piece(make_adapter: AdapterFactory) -> None:
    adapter, renderer, dispatcher = make_adapter()
    dispatcher.emit(hover(10))
    assert adapter.hovered_piece is None
    renderer.highlight.assert_not_called()


def test_no_hover_while_a_piece_is_selected(make_adapter: AdapterFactory) -> None:
    adapter, renderer, dispatcher = make_adapter()
    dispatcher.emit(click(8))
    renderer.reset_mock()
    dispatcher.emit(hover(17))
    assert adapter.hovered_piece is None
    renderer.highlight.assert_not_called()


def test_selecting_clears_hover(make_adapter: AdapterFactory) -> None:
    adapter, renderer, dispatcher = make_adapter()
    piece = piece_on(adapter, 8)
    dispatcher.emit(hover(8))
    dispatcher.emit(click(8))
    assert adapter.hovered_piece is None
    renderer.clear_highlight.assert_called_once_with([piece])


# --- STATE SNAPSHOT ---
def test_state(make_adapter: AdapterFactory) -> None:
    adapter, _, dispatcher = make_adapter()
    dispatcher.emit(click(17))
    state = adapter.state()
    assert state.active_player == Color.WHITE
    assert state.selected_square == 17
    assert state.destinations == [3]
    assert state.destination_kind == "capture"
    assert state.move_locked is False
    assert state.layout == LAYOUT


def test_failing_renderer_animation(make_adapter: AdapterFactory) -> None:
    """The move still resolves and its feedback is cleared before the failure surfaces"""
    renderer = sync_renderer()
    renderer.animate_move.side_effect = RuntimeError("no scene")
    adapter, renderer, dispatcher = make_adapter(renderer)
    piece = piece_on(adapter, 8)
    dispatcher.emit(click(8))
    renderer.reset_mock(side_effect=False)

    with pytest.raises(MoveLockError):
        dispatcher.emit(click(1))

    renderer.clear_highlight.assert_called_once_with([1])
    renderer.highlight.assert_called_once_with([piece], HighlightStyle.DEFAULT)
    assert not adapter.session.move_locked
    assert adapter.session.active_player == Color.BLACK
