"""Protocol repository (SQLAlchemy implementation in sql_repository.py, tests use a dictionary)"""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from src.checkers.layout import parse_layout
from src.core.exceptions import InvalidLayoutError, RepositoryError
from src.core.models import SessionModel
from src.core.shared_types import Color


class SessionRepository(Protocol):
    """Keeps sessions between runs. Only snapshots of playable positions get written."""

    def get_session(self, session_id: UUID) -> SessionModel | None:
        """Snapshot stored under this ID, if any."""
        ...

    def store_session(self, session: SessionModel, session_id: UUID | None = None) -> UUID:
        """
        Without an ID: store a new session and return its new ID.
        With an ID: overwrite that session (RepositoryError if it does not exist).
        """
        ...

    def most_recent_session(self) -> tuple[UUID, SessionModel] | None:
        """The session stored (or overwritten) last."""
        ...

    def delete_session(self, session_id: UUID) -> bool:
        """False if there was nothing to delete."""
        ...

    def delete_sessions_before(self, cutoff: datetime) -> int:
        """Remove every session last stored before the cutoff. Returns how many were removed."""
        ...


def check_snapshot(session: SessionModel) -> None:
    """A snapshot is only worth storing if it can be resumed: readable layout and a known player to move."""
    try:
        parse_layout(session.layout)
    except InvalidLayoutError as err:
        raise RepositoryError(f"Refusing to store unreadable layout: {err}") from err

    if session.active_player not in [color.value for color in Color]:
        raise RepositoryError(f"Refusing to store unknown player {session.active_player!r}")