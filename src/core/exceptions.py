"""
Custom exceptions shared across layers.

Everything derives from GameError, so callers higher up can catch one type when they only care that "the game refused".
"""


class GameError(Exception):
    """Base class for every error raised by this package."""


# --- USER INPUT (the session ignores these, strict callers may raise them) ---
class InvalidSelectionError(GameError):
    """Piece of the wrong player, or a selection attempted while a move is resolving."""


class IllegalDestinationError(GameError):
    """Target square fails both the step and the capture rule, or is occupied."""


# --- INTERNAL INVARIANTS (bugs, never user problems) ---
class InconsistentBoardStateError(GameError):
    """A piece's recorded square does not match the square's recorded occupant."""


class MoveLockError(GameError):
    """The move lock contract was broken: a completion fired twice or never fired."""


class OutOfBoardError(GameError):
    """Row/column or square id outside the board."""


# --- PARSING / STATE / PERSISTENCE ---
class InvalidLayoutError(GameError):
    """Layout string cannot be parsed into a board."""


class GameStateError(GameError):
    """Operation not allowed in the current state of the session."""


class InvalidRequestError(GameError):
    """Boundary model received data it cannot interpret."""


class RepositoryError(GameError):
    """Record could not be found / stored."""
