"""Admin API — quiz authoring and results for OWNER accounts.

Learn: The route table already guarantees the caller is an OWNER for
everything under /admin. Handlers pass the caller's account id down so
the services can check ownership of the specific quiz or question.
"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from quizhub.auth.dependencies import get_current_account
from quizhub.db.engine import get_db
from quizhub.db.models import Account
from quizhub.schemas.attempt import AttemptRead
from quizhub.schemas.base import PathId
from quizhub.schemas.quiz import (
    QuestionCreate,
    QuestionRead,
    QuestionUpdate,
    QuizCreate,
    QuizRead,
    QuizUpdate,
)
from quizhub.services.quiz_service import QuizService
from quizhub.services.scoring import ScoringEngine

router = APIRouter(prefix="/admin")


def _svc(db: AsyncSession = Depends(get_db)) -> QuizService:
    return QuizService(db)


# ─── Quizzes ────────────────────────────────────────────

@router.post("/quiz", response_model=QuizRead, status_code=201)
async def create_quiz(
    body: QuizCreate,
    account: Account = Depends(get_current_account),
    svc: QuizService = Depends(_svc),
):
    return await svc.create_quiz(
        owner_id=account.id,
        title=body.title,
        description=body.description,
        time_limit=body.time_limit,
        is_published=body.is_published,
    )


@router.get("/quiz", response_model=list[QuizRead])
async def list_my_quizzes(
    account: Account = Depends(get_current_account),
    svc: QuizService = Depends(_svc),
):
    """Quizzes created by the calling owner."""
    return await svc.list_owned(account.id)


@router.put("/quiz/{quiz_id}", response_model=QuizRead)
async def update_quiz(
    quiz_id: PathId,
    body: QuizUpdate,
    account: Account = Depends(get_current_account),
    svc: QuizService = Depends(_svc),
):
    return await svc.update_quiz(
        quiz_id=quiz_id,
        owner_id=account.id,
        title=body.title,
        description=body.description,
        time_limit=body.time_limit,
        is_published=body.is_published,
    )


@router.delete("/quiz/{quiz_id}", status_code=204, response_class=Response)
async def delete_quiz(
    quiz_id: PathId,
    account: Account = Depends(get_current_account),
    svc: QuizService = Depends(_svc),
):
    """Delete a quiz and its questions (refused once it has attempts)."""
    await svc.delete_quiz(quiz_id, account.id)
    return Response(status_code=204)


@router.get("/quiz/{quiz_id}/questions", response_model=list[QuestionRead])
async def list_questions(
    quiz_id: PathId,
    account: Account = Depends(get_current_account),
    svc: QuizService = Depends(_svc),
):
    return await svc.list_questions(quiz_id, account.id)


@router.get("/quiz/{quiz_id}/results", response_model=list[AttemptRead])
async def quiz_results(
    quiz_id: PathId,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
):
    """All attempts submitted for one of the caller's quizzes, newest first."""
    return await ScoringEngine(db).quiz_results(quiz_id, account.id)


# ─── Questions ──────────────────────────────────────────

@router.post("/question", response_model=QuestionRead, status_code=201)
async def create_question(
    body: QuestionCreate,
    account: Account = Depends(get_current_account),
    svc: QuizService = Depends(_svc),
):
    return await svc.create_question(
        quiz_id=body.quiz_id,
        owner_id=account.id,
        text=body.text,
        options=body.options,
        correct_index=body.correct_index,
        order=body.order,
    )


@router.put("/question/{question_id}", response_model=QuestionRead)
async def update_question(
    question_id: PathId,
    body: QuestionUpdate,
    account: Account = Depends(get_current_account),
    svc: QuizService = Depends(_svc),
):
    return await svc.update_question(
        question_id=question_id,
        owner_id=account.id,
        text=body.text,
        options=body.options,
        correct_index=body.correct_index,
        order=body.order,
    )


@router.delete("/question/{question_id}", status_code=204, response_class=Response)
async def delete_question(
    question_id: PathId,
    account: Account = Depends(get_current_account),
    svc: QuizService = Depends(_svc),
):
    await svc.delete_question(question_id, account.id)
    return Response(status_code=204)
