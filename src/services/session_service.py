"""Orchestration between the GameSession (domain) and the persistence layer."""

import logging
from datetime import timedelta
from typing import Optional
from uuid import UUID

from src.checkers.ports import Animator
from src.checkers.session import GameSession
from src.core.config import Settings
from src.core.exceptions import RepositoryError
from src.core.models import SessionModel
from src.db.repository import SessionRepository
from src.db.schema import utc_now

logger = logging.getLogger(__name__)


class SessionService:
    """Start, save, resume and delete checkers sessions."""

    def __init__(self, repository: SessionRepository, settings: Optional[Settings] = None) -> None:
        self.repo = repository
        self.settings = settings or Settings()

    def start(self, animator: Optional[Animator] = None) -> tuple[UUID, GameSession]:
        """New session in the configured starting layout, persisted right away."""
        session = GameSession.new(self.settings, animator=animator)
        session_id = self.repo.store_session(session.to_model())
        logger.info("Started session %s", session_id)
        return session_id, session

    def save(self, session_id: UUID, session: GameSession) -> SessionModel:
        """Store the current board + turn. Refused (GameStateError) while a move is resolving."""
        snapshot = session.to_model()
        self.repo.store_session(snapshot, session_id)
        logger.debug("Saved session %s", session_id)
        return snapshot

    def load(self, session_id: UUID, animator: Optional[Animator] = None) -> GameSession:
        model = self.repo.get_session(session_id)
        if model is None:
            raise RepositoryError(f"Session with {session_id=} not found.")
        return GameSession.from_model(model, self.settings, animator=animator)

    def resume_latest(self, animator: Optional[Animator] = None) -> tuple[UUID, GameSession]:
        """Pick up the session that was saved last (e.g. after restarting the application)."""
        found = self.repo.most_recent_session()
        if found is None:
            raise RepositoryError("There is no session to resume.")
        session_id, model = found
        logger.info("Resuming session %s, %s to move", session_id, model.active_player)
        return session_id, GameSession.from_model(model, self.settings, animator=animator)

    def delete(self, session_id: UUID) -> None:
        if not self.repo.delete_session(session_id):
            raise RepositoryError(f"Session with {session_id=} not found.")
        logger.info("Deleted session %s", session_id)

    def purge(self, older_than: timedelta) -> int:
        """Forget sessions nobody saved for `older_than`. Returns how many were removed."""
        removed = self.repo.delete_sessions_before(utc_now() - older_than)
        logger.info("Purged %d session(s) idle for more than %s", removed, older_than)
        return removed
