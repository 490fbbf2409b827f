"""Orchestration of communication from API router to the puzzle core and persistence layers (and the reverse direction)."""

import logging
from typing import Optional
from uuid import UUID

from src.api.models import (
    CreatePuzzleRequest,
    GeneratePuzzleRequest,
    GetPuzzleRequest,
    PuzzleResponse,
    SolveDebug,
    SolvePuzzleRequest,
    SolveResponse,
)
from src.chess.fen import STARTING_FEN
from src.core.config import Settings, get_settings
from src.core.exceptions import RepositoryError
from src.core.models import AttemptModel, PuzzleModel
from src.db.repository import PuzzleRepository
from src.puzzles.generator_output import extract_candidate
from src.puzzles.scorer import score
from src.puzzles.verifier import verify_and_canonicalize

logger = logging.getLogger(__name__)


class PuzzleService:
    """Orchestration of layers for chess puzzles."""

    def __init__(
        self, repository: PuzzleRepository, settings: Optional[Settings] = None
    ) -> None:
        self.repo = repository
        self.settings = settings or get_settings()

    # -- API routes logic ---
    def create_puzzle(
        self, request: CreatePuzzleRequest, ai_generated: bool = False
    ) -> PuzzleResponse:
        """
        Verify a candidate and persist it.

        Raises PuzzleRejectedError (wrong move count / unparsable move / illegal move); nothing is stored then.
        """
        # Verify and canonicalize the moves. Only the canonical form gets stored
        verified = verify_and_canonicalize(request.moves, self.settings)

        puzzle = PuzzleModel(
            fen=verified.final_position,
            solution=verified.canonical_moves,
            difficulty=request.difficulty or self.settings.default_difficulty,
            start_fen=STARTING_FEN,
            title=request.title,
            hint=request.hint,
            tags=request.tags,
            level=request.level,
            is_public=request.is_public,
            ai_generated=ai_generated,
        )

        # Store the PuzzleModel in the repository
        stored_puzzle, puzzle_id = self.repo.create_puzzle(puzzle)
        logger.info(
            "created puzzle %s with %d moves", puzzle_id, len(stored_puzzle.solution)
        )
        return self._create_puzzle_response(puzzle_id, stored_puzzle)

    def create_from_generator_text(
        self, request: GeneratePuzzleRequest
    ) -> PuzzleResponse:
        """
        Raw generator output --> stored puzzle.

        Raises GeneratorOutputError when the text holds no usable candidate, PuzzleRejectedError when the moves fail verification.
        """
        candidate = extract_candidate(request.generator_text)
        create_request = CreatePuzzleRequest(
            moves=candidate.moves,
            title=candidate.title,
            hint=candidate.hint,
            tags=candidate.tags,
            difficulty=candidate.difficulty or request.difficulty,
            level=request.level,
            is_public=request.make_public,
        )
        return self.create_puzzle(create_request, ai_generated=True)

    def get_puzzle(self, request: GetPuzzleRequest) -> PuzzleResponse:
        puzzle = self._fetch_puzzle(request.puzzle_id)
        return self._create_puzzle_response(request.puzzle_id, puzzle)

    def solve_puzzle(self, request: SolvePuzzleRequest) -> SolveResponse:
        """
        Score a solve attempt and record it.

        Player mistakes come back as `correct=False`. Raises RepositoryError for an unknown puzzle and
        DataIntegrityError when the stored solution itself no longer replays (nothing is recorded then).
        """
        puzzle = self._fetch_puzzle(request.puzzle_id)

        outcome = score(puzzle, request.moves, request.time_ms, self.settings)

        self.repo.record_attempt(
            AttemptModel(
                puzzle_id=request.puzzle_id,
                moves=request.moves,
                time_ms=request.time_ms,
                correct=outcome.correct,
                score=outcome.score,
                reason=outcome.reason,
            )
        )
        logger.info(
            "solve attempt on %s: correct=%s score=%d",
            request.puzzle_id,
            outcome.correct,
            outcome.score,
        )

        return SolveResponse(
            correct=outcome.correct,
            score=outcome.score,
            reason=outcome.reason,
            expected_solution=outcome.expected_solution,
            expected_solution_san=outcome.expected_solution_san,
            debug=SolveDebug(
                initial_fen=puzzle.start_fen,
                expected_final_fen=outcome.expected_final_fen,
                player_final_fen=outcome.player_final_fen,
                user_moves=request.moves,
                illegal_move_index=outcome.illegal_move_index,
            ),
        )

    # -- Internal helpers --
    def _create_puzzle_response(
        self, puzzle_id: UUID, model: PuzzleModel
    ) -> PuzzleResponse:
        """Convert info in PuzzleModel to a PuzzleResponse (for puzzle with given ID.)"""
        return PuzzleResponse(
            puzzle_id=puzzle_id,
            title=model.title,
            hint=model.hint,
            tags=model.tags,
            difficulty=model.difficulty,
            level=model.level,
            start_fen=model.start_fen,
            fen=model.fen,
            solution=model.solution,
        )

    def _fetch_puzzle(self, puzzle_id: UUID) -> PuzzleModel:
        """Attempt to find the puzzle in the repository and raise error if it fails."""
        puzzle = self.repo.get_puzzle(puzzle_id)
        if puzzle is None:
            raise RepositoryError(f"Puzzle with {puzzle_id=} not found.")
        return puzzle
