"""Scoring engine — turns a taker's answer map into a stored Attempt.

Learn: This is the trust boundary of the platform. The client sends only
which option it picked per question; the score is always recomputed here
from the answer keys in the database:

    snapshot = questions of the quiz, read once, in order
    score    = #questions in snapshot whose picked index == correct_index
    total    = len(snapshot)

Questions the taker skipped count as not-correct but are still in the
total; map entries for question ids outside the snapshot are dropped.
Because total is copied into the Attempt row, editing the quiz later
never changes a past result.

There is no idempotency key. Submitting the same answers twice creates
two attempts, and concurrent duplicate submissions both succeed too.
"""

from dataclasses import dataclass
from typing import Mapping, Sequence

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from quizhub.auth.ownership import assert_owner
from quizhub.db.models import Account, Attempt, Question, Quiz
from quizhub.errors import ResourceNotFound

logger = structlog.get_logger()


@dataclass(frozen=True)
class ScoreResult:
    score: int
    total_questions: int
    answers: dict[int, int]


def score_answers(
    snapshot: Sequence[Question], selected_answers: Mapping[int, int]
) -> ScoreResult:
    """Pure scoring over a question snapshot."""
    score = 0
    answers: dict[int, int] = {}
    for question in snapshot:
        if question.id not in selected_answers:
            continue
        picked = selected_answers[question.id]
        answers[question.id] = picked
        if picked == question.correct_index:
            score += 1
    return ScoreResult(score=score, total_questions=len(snapshot), answers=answers)


class ScoringEngine:
    """Submission pipeline plus read access to stored attempts."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _load_snapshot(self, quiz_id: int) -> list[Question]:
        result = await self.db.execute(
            select(Question)
            .where(Question.quiz_id == quiz_id)
            .order_by(Question.order, Question.id)
        )
        return list(result.scalars().all())

    async def submit(
        self,
        quiz_id: int,
        selected_answers: Mapping[int, int],
        time_spent_seconds: int,
        taker_id: int,
    ) -> Attempt:
        taker = await self.db.get(Account, taker_id)
        if not taker:
            raise ResourceNotFound("User not found")
        quiz = await self.db.get(Quiz, quiz_id)
        if not quiz:
            raise ResourceNotFound("Quiz not found")

        snapshot = await self._load_snapshot(quiz_id)
        result = score_answers(snapshot, selected_answers)

        attempt = Attempt(
            taker_id=taker.id,
            quiz=quiz,
            score=result.score,
            total_questions=result.total_questions,
            selected_answers=result.answers,
            time_spent=time_spent_seconds,
        )
        self.db.add(attempt)
        await self.db.commit()

        logger.info(
            "quiz.submitted",
            attempt_id=attempt.id,
            taker_id=taker.id,
            quiz_id=quiz_id,
            score=result.score,
            total=result.total_questions,
        )
        return attempt

    # ─── Reads ──────────────────────────────────────────

    async def get_attempt(self, attempt_id: int, taker_id: int) -> Attempt:
        """One attempt, visible only to the account that submitted it."""
        attempt = await self.db.get(Attempt, attempt_id)
        if not attempt:
            raise ResourceNotFound("Attempt not found")
        assert_owner(attempt.taker_id, taker_id, "You can only view your own attempts")
        return attempt

    async def history(self, taker_id: int) -> list[Attempt]:
        result = await self.db.execute(
            select(Attempt)
            .where(Attempt.taker_id == taker_id)
            .order_by(Attempt.submitted_at.desc(), Attempt.id.desc())
        )
        return list(result.scalars().all())

    async def quiz_results(self, quiz_id: int, owner_id: int) -> list[Attempt]:
        """All attempts on a quiz, for the quiz's owner."""
        quiz = await self.db.get(Quiz, quiz_id)
        if not quiz:
            raise ResourceNotFound("Quiz not found")
        assert_owner(
            quiz.owner_id, owner_id, "You can only view results for your own quizzes"
        )

        result = await self.db.execute(
            select(Attempt)
            .where(Attempt.quiz_id == quiz_id)
            .order_by(Attempt.submitted_at.desc(), Attempt.id.desc())
        )
        return list(result.scalars().all())
