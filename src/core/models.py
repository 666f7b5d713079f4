"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Both the persistence layer (lower) and the GameSession (domain) use the model defined here to send/receive a snapshot of a game.
(Decouples the data model specific to the DB layer from the domain objects)
"""

from dataclasses import dataclass


@dataclass
class SessionModel:
    """Transport-safe snapshot of a checkers session: the board in layout notation + whose turn it is."""

    layout: str
    active_player: str
