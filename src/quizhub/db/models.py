"""SQLAlchemy ORM models — single source of truth for the database schema.

Learn: Declarative ORM mapping with SQLAlchemy 2.0 style (Mapped[] + mapped_column).
Each class = one table.

Key concepts:
- Integer primary keys; they are what clients send back (quizId, question ids)
- Quiz.owner_id is the ownership anchor for the quiz, its questions and results
- Attempt rows are write-once; nothing in the service ever updates them
- Typed JSON codecs (db/types.py) for options and answer maps
- Relationships used by response schemas load eagerly (lazy="selectin"),
  since async sessions cannot lazy-load on attribute access
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from quizhub.auth.identity import Role
from quizhub.db.types import AnswerMap, OptionList


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Account(Base):
    """A registered user. role decides which half of the API they can use."""

    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[Role] = mapped_column(
        Enum(Role, native_enum=False, length=20), nullable=False
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


class Quiz(Base):
    """A quiz authored by one OWNER account."""

    __tablename__ = "quizzes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    time_limit: Mapped[Optional[int]] = mapped_column(
        Integer, nullable=True
    )  # minutes
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    owner_id: Mapped[int] = mapped_column(
        ForeignKey("accounts.id"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    questions: Mapped[list["Question"]] = relationship(
        back_populates="quiz",
        cascade="all, delete-orphan",
        order_by=lambda: [Question.order, Question.id],
        lazy="selectin",
    )

    @property
    def question_count(self) -> int:
        return len(self.questions)


class Question(Base):
    """One multiple-choice question. correct_index points into options."""

    __tablename__ = "questions"
    __table_args__ = (
        Index("ix_questions_quiz_order", "quiz_id", "question_order"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    quiz_id: Mapped[int] = mapped_column(
        ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False
    )
    text: Mapped[str] = mapped_column(Text, nullable=False)
    options: Mapped[list[str]] = mapped_column(OptionList, nullable=False)
    correct_index: Mapped[int] = mapped_column(Integer, nullable=False)
    order: Mapped[int] = mapped_column("question_order", Integer, nullable=False, default=0)

    quiz: Mapped["Quiz"] = relationship(back_populates="questions")


class Attempt(Base):
    """A scored submission. Write-once: created by the scoring engine only.

    total_questions is the quiz's question count when the attempt was
    scored, so later question edits never change a historical result.
    """

    __tablename__ = "attempts"
    __table_args__ = (
        Index("ix_attempts_taker_submitted", "taker_id", "submitted_at"),
        Index("ix_attempts_quiz_submitted", "quiz_id", "submitted_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    taker_id: Mapped[int] = mapped_column(ForeignKey("accounts.id"), nullable=False)
    quiz_id: Mapped[int] = mapped_column(ForeignKey("quizzes.id"), nullable=False)
    score: Mapped[int] = mapped_column(Integer, nullable=False)
    total_questions: Mapped[int] = mapped_column(Integer, nullable=False)
    selected_answers: Mapped[dict[int, int]] = mapped_column(
        AnswerMap, nullable=False, default=dict
    )
    time_spent: Mapped[Optional[int]] = mapped_column(
        Integer, nullable=True
    )  # seconds
    submitted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    quiz: Mapped["Quiz"] = relationship(lazy="selectin")

    @property
    def quiz_title(self) -> str:
        return self.quiz.title

    @property
    def percentage(self) -> float:
        if not self.total_questions:
            return 0.0
        return 100.0 * self.score / self.total_questions
