"""Quiz service — quiz and question authoring.

Learn: Every mutation follows the same order:
1. Load the resource (ResourceNotFound if it doesn't exist)
2. Check ownership against quiz.owner_id (Unauthorized if it isn't yours)
3. Validate and apply the change

Questions have no owner of their own; they are owned through their quiz.
"""

from typing import Optional

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from quizhub.auth.ownership import assert_owner
from quizhub.db.models import Attempt, Question, Quiz
from quizhub.errors import BadRequest, Conflict, ResourceNotFound

logger = structlog.get_logger()


def validate_answer_key(options: list[str], correct_index: int) -> None:
    if not 0 <= correct_index < len(options):
        raise BadRequest("Correct answer index must point to one of the options")


class QuizService:
    """Business logic for quiz and question CRUD."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Quizzes ────────────────────────────────────────

    async def get_quiz(self, quiz_id: int) -> Quiz:
        result = await self.db.execute(select(Quiz).where(Quiz.id == quiz_id))
        quiz = result.scalars().first()
        if not quiz:
            raise ResourceNotFound("Quiz not found")
        return quiz

    async def get_owned_quiz(self, quiz_id: int, owner_id: int, action: str) -> Quiz:
        quiz = await self.get_quiz(quiz_id)
        assert_owner(quiz.owner_id, owner_id, f"You can only {action} your own quizzes")
        return quiz

    async def create_quiz(
        self,
        owner_id: int,
        title: str,
        description: Optional[str] = None,
        time_limit: Optional[int] = None,
        is_published: bool = False,
    ) -> Quiz:
        quiz = Quiz(
            owner_id=owner_id,
            title=title,
            description=description,
            time_limit=time_limit,
            is_published=is_published,
            questions=[],
        )
        self.db.add(quiz)
        await self.db.commit()
        logger.info("quiz.created", quiz_id=quiz.id, owner_id=owner_id)
        return quiz

    async def update_quiz(
        self,
        quiz_id: int,
        owner_id: int,
        title: str,
        description: Optional[str] = None,
        time_limit: Optional[int] = None,
        is_published: Optional[bool] = None,
    ) -> Quiz:
        quiz = await self.get_owned_quiz(quiz_id, owner_id, "update")
        quiz.title = title
        quiz.description = description
        quiz.time_limit = time_limit
        if is_published is not None:
            quiz.is_published = is_published
        await self.db.commit()
        logger.info("quiz.updated", quiz_id=quiz_id)
        return quiz

    async def delete_quiz(self, quiz_id: int, owner_id: int) -> None:
        """Delete a quiz and its questions.

        Refused once anyone has submitted an attempt: attempts are
        permanent records and must keep pointing at their quiz.
        """
        quiz = await self.get_owned_quiz(quiz_id, owner_id, "delete")

        attempts = await self.db.scalar(
            select(func.count(Attempt.id)).where(Attempt.quiz_id == quiz_id)
        )
        if attempts:
            raise Conflict("Quiz has submitted attempts and cannot be deleted")

        await self.db.delete(quiz)
        await self.db.commit()
        logger.info("quiz.deleted", quiz_id=quiz_id)

    async def list_published(self) -> list[Quiz]:
        result = await self.db.execute(
            select(Quiz).where(Quiz.is_published.is_(True)).order_by(Quiz.id)
        )
        return list(result.scalars().all())

    async def list_owned(self, owner_id: int) -> list[Quiz]:
        result = await self.db.execute(
            select(Quiz).where(Quiz.owner_id == owner_id).order_by(Quiz.id)
        )
        return list(result.scalars().all())

    # ─── Questions ──────────────────────────────────────

    async def get_question(self, question_id: int) -> Question:
        result = await self.db.execute(select(Question).where(Question.id == question_id))
        question = result.scalars().first()
        if not question:
            raise ResourceNotFound("Question not found")
        return question

    async def list_questions(self, quiz_id: int, owner_id: int) -> list[Question]:
        """Questions with their answer keys, for the quiz owner only."""
        quiz = await self.get_owned_quiz(quiz_id, owner_id, "view questions of")
        return list(quiz.questions)

    async def create_question(
        self,
        quiz_id: int,
        owner_id: int,
        text: str,
        options: list[str],
        correct_index: int,
        order: Optional[int] = None,
    ) -> Question:
        quiz = await self.get_owned_quiz(quiz_id, owner_id, "add questions to")
        validate_answer_key(options, correct_index)

        if order is None:
            order = max((q.order for q in quiz.questions), default=0) + 1

        question = Question(
            text=text,
            options=list(options),
            correct_index=correct_index,
            order=order,
        )
        quiz.questions.append(question)
        await self.db.commit()
        logger.info("question.created", question_id=question.id, quiz_id=quiz_id)
        return question

    async def update_question(
        self,
        question_id: int,
        owner_id: int,
        text: str,
        options: list[str],
        correct_index: int,
        order: Optional[int] = None,
    ) -> Question:
        question = await self.get_question(question_id)
        await self.get_owned_quiz(question.quiz_id, owner_id, "update questions in")
        validate_answer_key(options, correct_index)

        question.text = text
        question.options = list(options)
        question.correct_index = correct_index
        if order is not None:
            question.order = order
        await self.db.commit()
        logger.info("question.updated", question_id=question_id)
        return question

    async def delete_question(self, question_id: int, owner_id: int) -> None:
        question = await self.get_question(question_id)
        quiz = await self.get_owned_quiz(
            question.quiz_id, owner_id, "delete questions from"
        )
        quiz.questions.remove(question)
        await self.db.commit()
        logger.info("question.deleted", question_id=question_id, quiz_id=quiz.id)
