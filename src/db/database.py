"""Generate database sessions"""

from typing import Generator, Optional

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.core.config import Settings, get_settings
from src.db.schema import Base


def build_engine(settings: Optional[Settings] = None) -> Engine:
    """Engine for the configured database, with all tables created."""
    settings = settings or get_settings()
    engine = create_engine(settings.database_url, echo=settings.database_echo)
    Base.metadata.create_all(bind=engine)
    return engine


def get_db(engine: Engine) -> Generator[Session, None, None]:
    db = sessionmaker(bind=engine)()
    try:
        yield db
    finally:
        db.close()
