"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import JSON, ForeignKey
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBPuzzle(Base):
    __tablename__ = "puzzles"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    fen: Mapped[str]  # final position after the solution
    start_fen: Mapped[str]
    solution: Mapped[list[str]] = mapped_column(JSON)
    difficulty: Mapped[int]
    title: Mapped[str]
    hint: Mapped[Optional[str]]
    tags: Mapped[list[str]] = mapped_column(JSON, default=list)
    level: Mapped[str]
    is_public: Mapped[bool] = mapped_column(default=True)
    ai_generated: Mapped[bool] = mapped_column(default=False)
    created_at: Mapped[datetime] = mapped_column(default=utc_now)


class DBAttempt(Base):
    __tablename__ = "attempts"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    puzzle_id: Mapped[UUID] = mapped_column(ForeignKey("puzzles.id"))
    moves: Mapped[list[str]] = mapped_column(JSON)
    time_ms: Mapped[int]
    correct: Mapped[bool]
    score: Mapped[int]
    reason: Mapped[str]
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
