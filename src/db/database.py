"""Generate database sessions"""

from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.core.config import Settings
from src.db.schema import Base


def make_session_factory(settings: Optional[Settings] = None) -> sessionmaker[Session]:
    """Engine for the configured database URL. Ensures all tables are created."""
    settings = settings or Settings()
    engine = create_engine(settings.database_url)
    Base.metadata.create_all(bind=engine)
    return sessionmaker(bind=engine)


def get_db(session_factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
