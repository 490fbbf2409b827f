"""Implementation of (Puzzle)Repository using SQLAlchemy"""

import logging
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.core.models import AttemptModel, PuzzleModel
from src.db.schema import DBAttempt, DBPuzzle

logger = logging.getLogger(__name__)


class SQLPuzzleRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def create_puzzle(self, puzzle: PuzzleModel) -> tuple[PuzzleModel, UUID]:
        """Store new puzzle and return the stored data + newly created puzzle ID."""
        new_id = uuid4()
        puzzle_db = DBPuzzle(
            id=new_id,
            fen=puzzle.fen,
            start_fen=puzzle.start_fen,
            solution=puzzle.solution,
            difficulty=puzzle.difficulty,
            title=puzzle.title,
            hint=puzzle.hint,
            tags=puzzle.tags,
            level=puzzle.level,
            is_public=puzzle.is_public,
            ai_generated=puzzle.ai_generated,
        )
        self.db.add(puzzle_db)
        self.db.commit()
        self.db.refresh(puzzle_db)
        logger.info("stored puzzle %s", new_id)
        return self._to_model(puzzle_db), new_id

    def get_puzzle(self, puzzle_id: UUID) -> PuzzleModel | None:
        """Get puzzle by ID, if record exists."""
        puzzle_db = self.db.scalar(select(DBPuzzle).where(DBPuzzle.id == puzzle_id))
        if puzzle_db:
            return self._to_model(puzzle_db)
        return None

    def record_attempt(self, attempt: AttemptModel) -> tuple[AttemptModel, UUID]:
        """Store a scored solve attempt."""
        new_id = uuid4()
        attempt_db = DBAttempt(
            id=new_id,
            puzzle_id=attempt.puzzle_id,
            moves=attempt.moves,
            time_ms=attempt.time_ms,
            correct=attempt.correct,
            score=attempt.score,
            reason=attempt.reason,
        )
        self.db.add(attempt_db)
        self.db.commit()
        self.db.refresh(attempt_db)
        return self._to_attempt_model(attempt_db), new_id

    def list_attempts(self, puzzle_id: UUID) -> list[AttemptModel]:
        """All attempts made on a puzzle, oldest first."""
        query = (
            select(DBAttempt)
            .where(DBAttempt.puzzle_id == puzzle_id)
            .order_by(DBAttempt.created_at)
        )
        return [self._to_attempt_model(row) for row in self.db.scalars(query)]

    def _to_model(self, puzzle_db: DBPuzzle) -> PuzzleModel:
        """Convert SQLAlchemy model to data transfer model."""
        return PuzzleModel(
            fen=puzzle_db.fen,
            solution=list(puzzle_db.solution),
            difficulty=puzzle_db.difficulty,
            start_fen=puzzle_db.start_fen,
            title=puzzle_db.title,
            hint=puzzle_db.hint,
            tags=list(puzzle_db.tags),
            level=puzzle_db.level,
            is_public=puzzle_db.is_public,
            ai_generated=puzzle_db.ai_generated,
        )

    def _to_attempt_model(self, attempt_db: DBAttempt) -> AttemptModel:
        return AttemptModel(
            puzzle_id=attempt_db.puzzle_id,
            moves=list(attempt_db.moves),
            time_ms=attempt_db.time_ms,
            correct=attempt_db.correct,
            score=attempt_db.score,
            reason=attempt_db.reason,
        )
