"""Database tables / schema"""

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBSession(Base):
    __tablename__ = "sessions"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    layout: Mapped[str]
    active_player: Mapped[str]
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    # set by the repository on every write; drives "most recent" and the clean up of stale sessions
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, index=True)
