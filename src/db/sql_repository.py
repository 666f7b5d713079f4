"""Implementation of (Session)Repository using SQLAlchemy"""

import logging
from datetime import datetime
from typing import Callable
from uuid import UUID, uuid4

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from src.core.exceptions import RepositoryError
from src.core.models import SessionModel
from src.db.repository import check_snapshot
from src.db.schema import DBSession, utc_now

logger = logging.getLogger(__name__)


class SQLSessionRepository:
    """
    Sessions stored in one SQL table, one row per session.

    The repository sets the timestamps itself (from `clock`), so "last stored" means last stored through here.
    """

    def __init__(self, db_session: Session, clock: Callable[[], datetime] = utc_now) -> None:
        self.db = db_session
        self._clock = clock

    def get_session(self, session_id: UUID) -> SessionModel | None:
        record = self.db.get(DBSession, session_id)
        return self._to_model(record) if record else None

    def store_session(self, session: SessionModel, session_id: UUID | None = None) -> UUID:
        check_snapshot(session)
        now = self._clock()

        if session_id is None:
            record = DBSession(id=uuid4(), created_at=now)
            self.db.add(record)
        else:
            found = self.db.get(DBSession, session_id)
            if found is None:
                raise RepositoryError(f"Session with {session_id=} not found.")
            record = found

        record.layout = session.layout
        record.active_player = session.active_player
        record.updated_at = now
        stored_id = record.id
        self.db.commit()
        return stored_id

    def most_recent_session(self) -> tuple[UUID, SessionModel] | None:
        query = select(DBSession).order_by(DBSession.updated_at.desc()).limit(1)
        record = self.db.scalar(query)
        if record is None:
            return None
        return record.id, self._to_model(record)

    def delete_session(self, session_id: UUID) -> bool:
        result = self.db.execute(delete(DBSession).where(DBSession.id == session_id))
        self.db.commit()
        return result.rowcount > 0

    def delete_sessions_before(self, cutoff: datetime) -> int:
        result = self.db.execute(delete(DBSession).where(DBSession.updated_at < cutoff))
        self.db.commit()
        logger.debug("Removed %d session(s) last stored before %s", result.rowcount, cutoff)
        return result.rowcount

    def _to_model(self, record: DBSession) -> SessionModel:
        return SessionModel(layout=record.layout, active_player=record.active_player)
