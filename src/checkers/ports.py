"""
Contracts with the collaborators outside the core: picking (which object is under the pointer?),
the renderer (highlights + animations), and whatever delivers pointer events.

The core never does geometry or drawing itself, it only talks to these Protocols.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Callable, Iterable, Optional, Protocol, Self

from src.api.models import PointerEvent
from src.checkers.pieces import Piece
from src.core.shared_types import Color, HighlightStyle, PointerEventKind


class EntityKind(StrEnum):
    PIECE = "piece"
    SQUARE = "square"
    NONE = "none"


@dataclass(frozen=True)
class EntityRef:
    """
    What the picking service found under the pointer. Always discriminate on `kind`:
    `piece` is only set for PIECE, `square_id` only for SQUARE.
    """

    kind: EntityKind
    piece: Optional[Piece] = None
    square_id: Optional[int] = None

    @classmethod
    def to_piece(cls, piece: Piece) -> Self:
        return cls(EntityKind.PIECE, piece=piece)

    @classmethod
    def to_square(cls, square_id: int) -> Self:
        return cls(EntityKind.SQUARE, square_id=square_id)

    @classmethod
    def nothing(cls) -> Self:
        return cls(EntityKind.NONE)


class PickingService(Protocol):
    def pick_entity_at(self, pointer_x: float, pointer_y: float) -> Optional[EntityRef]:
        """Topmost entity under the pointer, if any."""
        ...


# A highlight target is either a piece or a square id
HighlightTarget = Piece | int
OnComplete = Callable[[], None]


class Animator(Protocol):
    """Motion requests. Each `on_complete` must be called exactly once, when the animation is done."""

    def animate_move(
        self, piece: Piece, from_square_id: int, to_square_id: int, on_complete: OnComplete
    ) -> None: ...

    def animate_capture(self, removed_piece: Piece, on_complete: OnComplete) -> None: ...


class Renderer(Animator, Protocol):
    """Fire-and-forget visual feedback on top of the motion requests."""

    def highlight(self, targets: Iterable[HighlightTarget], style: HighlightStyle) -> None: ...

    def clear_highlight(self, targets: Iterable[HighlightTarget]) -> None: ...


PlayerChangeFn = Callable[[Color], None]
PointerHandler = Callable[[PointerEvent], None]


class EventDispatcher(Protocol):
    """Delivers raw pointer events (click / move) in the order they happened."""

    def subscribe(self, kind: PointerEventKind, handler: PointerHandler) -> None: ...
