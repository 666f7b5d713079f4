"""Defines the checkers pieces"""

from dataclasses import dataclass

from src.core.shared_types import Color

# White starts at the bottom rows and moves UP the board (towards row 0), Black moves DOWN.
FORWARD_DIRECTION: dict[Color, int] = {
    Color.WHITE: -1,
    Color.BLACK: 1,
}

LAYOUT_TO_COLOR: dict[str, Color] = {
    "w": Color.WHITE,
    "b": Color.BLACK,
}

COLOR_TO_LAYOUT: dict[Color, str] = {value: key for key, value in LAYOUT_TO_COLOR.items()}


@dataclass(eq=False)
class Piece:
    """
    A movable token. Identity matters (two white pieces are never 'equal'), hence eq=False.

    NOTE: `is_queen` is reserved. Nothing in the rules promotes a piece or treats a queen differently.
    """

    color: Color
    square_id: int
    is_queen: bool = False

    @property
    def forward(self) -> int:
        """Signed row direction of a simple step"""
        return FORWARD_DIRECTION[self.color]

    def is_opponent_of(self, other: "Piece") -> bool:
        return self.color != other.color

    def to_layout(self) -> str:
        # lower case: regular piece, upper case: (reserved) queen
        character = COLOR_TO_LAYOUT[self.color]
        return character.upper() if self.is_queen else character
