"""
Type definitions used across layers
"""

from enum import StrEnum


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self == Color.WHITE else Color.WHITE


class HighlightStyle(StrEnum):
    """Styles the renderer is asked to apply. DEFAULT means 'back to how it looked before'."""

    HOVERABLE = "hoverable"
    SELECTED = "selected"
    DESTINATION_MOVE = "destination move"
    DESTINATION_CAPTURE = "destination capture"
    DEFAULT = "default"


class PointerEventKind(StrEnum):
    CLICK = "click"
    MOVE = "move"
