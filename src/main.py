"""Wire the layers together: settings --> logging --> database session --> PuzzleService."""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from src.core.config import Settings, get_settings
from src.core.logging_setup import configure_logging
from src.db.database import build_engine, get_db
from src.db.sql_repository import SQLPuzzleRepository
from src.services.puzzle_service import PuzzleService

logger = logging.getLogger(__name__)


@contextmanager
def open_puzzle_service(settings: Optional[Settings] = None) -> Iterator[PuzzleService]:
    """
    A PuzzleService backed by the configured database.

    The session is closed when the block exits, e.g.

        with open_puzzle_service() as service:
            service.create_puzzle(CreatePuzzleRequest(moves=["e4", "e5"]))
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    engine = build_engine(settings)
    sessions = get_db(engine)
    db = next(sessions)
    logger.debug("opened session on %s", engine.url)
    try:
        yield PuzzleService(SQLPuzzleRepository(db), settings)
    finally:
        sessions.close()
        engine.dispose()
