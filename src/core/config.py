"""
Settings for the puzzle core.

Loaded from environment variables (prefixed with PUZZLES_) with Pydantic validation.
"""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ─── Puzzle creation ───
    min_moves: int = Field(default=2, ge=1)
    max_moves: int = Field(default=6, ge=1)
    default_difficulty: int = Field(default=2, ge=1)

    # ─── Scoring ───
    base_score: int = Field(default=100, ge=0)
    difficulty_step_penalty: int = Field(default=15, ge=0)
    free_seconds: int = Field(default=10, ge=0)
    extra_move_penalty: int = Field(default=5, ge=0)

    # ─── Database ───
    database_url: str = "sqlite:///./puzzles.db"
    database_echo: bool = False

    # ─── App ───
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="PUZZLES_", env_file=".env", env_file_encoding="utf-8"
    )

    @model_validator(mode="after")
    def check_move_range(self) -> "Settings":
        if self.min_moves > self.max_moves:
            raise ValueError(
                f"min_moves ({self.min_moves}) cannot exceed max_moves ({self.max_moves})"
            )
        return self


@lru_cache()
def get_settings() -> Settings:
    return Settings()
