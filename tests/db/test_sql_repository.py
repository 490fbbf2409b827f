"""Unit tests for src/db/sql_repository.py"""

from uuid import uuid4

from sqlalchemy import inspect
from sqlalchemy.orm import Session

from src.core.config import Settings
from src.core.models import AttemptModel, PuzzleModel
from src.db.database import build_engine, get_db
from src.db.sql_repository import SQLPuzzleRepository

AFTER_E4_E5 = "rnbqkbnr/pppp1ppp/8/4p3/4P3/8/PPPP1PPP/RNBQKBNR w KQkq e6 0 2"


def make_puzzle() -> PuzzleModel:
    return PuzzleModel(
        fen=AFTER_E4_E5,
        solution=["e2e4", "e7e5"],
        difficulty=2,
        title="Mirror",
        hint="Copy your opponent",
        tags=["opening", "symmetry"],
        level="Beginner",
        is_public=False,
        ai_generated=True,
    )


def test_create_puzzle(db_session_repo: Session) -> None:
    """Conversion from a PuzzleModel to DBPuzzle for a new entry to the database."""
    model = make_puzzle()

    repo = SQLPuzzleRepository(db_session_repo)
    record_in_db, puzzle_id = repo.create_puzzle(model)
    assert isinstance(record_in_db, PuzzleModel)
    assert record_in_db == model
    assert puzzle_id is not None


def test_get_puzzle_by_id(db_session_repo: Session) -> None:
    """Create a puzzle, then fetch it from db."""
    repo = SQLPuzzleRepository(db_session_repo)
    expected_puzzle, puzzle_id = repo.create_puzzle(make_puzzle())
    puzzle_found = repo.get_puzzle(puzzle_id)
    assert isinstance(puzzle_found, PuzzleModel)
    assert puzzle_found == expected_puzzle


def test_defaults_survive_storage(db_session_repo: Session) -> None:
    model = PuzzleModel(fen=AFTER_E4_E5, solution=["e2e4", "e7e5"])
    repo = SQLPuzzleRepository(db_session_repo)
    _, puzzle_id = repo.create_puzzle(model)
    stored = repo.get_puzzle(puzzle_id)
    assert stored is not None
    assert stored.title == "AI Puzzle"
    assert stored.tags == ["tactic"]
    assert stored.hint is None
    assert stored.is_public is True


def test_get_unknown_puzzle(db_session_repo: Session) -> None:
    """
    Should return None if ID does not match anything in database.

    NOTE with an empty database, any id is a valid test case.
    """
    repo = SQLPuzzleRepository(db_session_repo)
    assert repo.get_puzzle(uuid4()) is None

    repo.create_puzzle(make_puzzle())
    assert repo.get_puzzle(uuid4()) is None


def test_record_and_list_attempts(db_session_repo: Session) -> None:
    """Attempts come back oldest first, and only for the puzzle asked for."""
    repo = SQLPuzzleRepository(db_session_repo)
    _, puzzle_id = repo.create_puzzle(make_puzzle())
    _, other_id = repo.create_puzzle(make_puzzle())

    first = AttemptModel(
        puzzle_id=puzzle_id,
        moves=["e2e4", "d7d5"],
        time_ms=4000,
        correct=False,
        score=0,
        reason="Final position differs.",
    )
    second = AttemptModel(
        puzzle_id=puzzle_id,
        moves=["e4", "e5"],
        time_ms=12000,
        correct=True,
        score=83,
        reason="Excellent! Final position matches.",
    )
    stored, attempt_id = repo.record_attempt(first)
    assert stored == first
    assert attempt_id is not None
    repo.record_attempt(second)

    assert repo.list_attempts(puzzle_id) == [first, second]
    assert repo.list_attempts(other_id) == []


def test_build_engine_creates_tables() -> None:
    settings = Settings(database_url="sqlite://", _env_file=None)
    engine = build_engine(settings)
    assert {"puzzles", "attempts"} <= set(inspect(engine).get_table_names())

    sessions = get_db(engine)
    db = next(sessions)
    repo = SQLPuzzleRepository(db)
    _, puzzle_id = repo.create_puzzle(make_puzzle())
    assert repo.get_puzzle(puzzle_id) is not None
    sessions.close()
    engine.dispose()
