"""Pointer events coming in, and state snapshots going out"""

import math
from typing import Optional

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, PointerEventKind


# --- INCOMING EVENTS ---
class PointerEvent(BaseModel):
    """Raw pointer position, in whatever coordinates the picking service understands."""

    kind: PointerEventKind
    x: float
    y: float

    @field_validator(*["x", "y"])
    @classmethod
    def validate_coordinate(cls, value: float) -> float:
        if not math.isfinite(value):
            raise InvalidRequestError(
                f"Cannot interpret pointer coordinate {value!r}: it must be a finite number."
            )
        return value


# --- OUTGOING SNAPSHOTS ---
class SessionStateResponse(BaseModel):
    active_player: Color
    selected_square: Optional[int]
    destinations: list[int]
    destination_kind: Optional[str]
    move_locked: bool
    layout: str
