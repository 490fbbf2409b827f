"""Protocol repository (the SQLAlchemy version lives in sql_repository.py, tests use a dictionary)"""

from typing import Protocol
from uuid import UUID

from src.core.models import AttemptModel, PuzzleModel


class PuzzleRepository(Protocol):
    """Persistence layer orchestration"""

    def create_puzzle(self, puzzle: PuzzleModel) -> tuple[PuzzleModel, UUID]:
        """Store new puzzle and return the stored data + newly created puzzle ID."""
        ...

    def get_puzzle(self, puzzle_id: UUID) -> PuzzleModel | None:
        """Get puzzle by ID, if record exists."""
        ...

    def record_attempt(self, attempt: AttemptModel) -> tuple[AttemptModel, UUID]:
        """Store a scored solve attempt."""
        ...

    def list_attempts(self, puzzle_id: UUID) -> list[AttemptModel]:
        """All attempts made on a puzzle, oldest first."""
        ...
