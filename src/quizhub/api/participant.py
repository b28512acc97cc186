"""Participant API — browsing, submitting and reviewing attempts.

Learn: All of these are TAKER routes in the route table. Question views
here use TakerQuestionRead, which has no correctIndex field. Scores only
come from the ScoringEngine; the submit body cannot carry one.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from quizhub.auth.dependencies import get_current_account
from quizhub.db.engine import get_db
from quizhub.db.models import Account
from quizhub.schemas.attempt import AttemptRead, SubmitRequest
from quizhub.schemas.base import PathId
from quizhub.schemas.quiz import QuizRead, TakerQuizDetail
from quizhub.services.quiz_service import QuizService
from quizhub.services.scoring import ScoringEngine

router = APIRouter()


def _engine(db: AsyncSession = Depends(get_db)) -> ScoringEngine:
    return ScoringEngine(db)


@router.get("/quizzes", response_model=list[QuizRead])
async def list_published_quizzes(db: AsyncSession = Depends(get_db)):
    return await QuizService(db).list_published()


@router.get("/quiz/{quiz_id}", response_model=TakerQuizDetail)
async def get_quiz_for_taker(quiz_id: PathId, db: AsyncSession = Depends(get_db)):
    """Quiz with its questions in order, without answer keys."""
    return await QuizService(db).get_quiz(quiz_id)


@router.post("/quiz/submit", response_model=AttemptRead, status_code=201)
async def submit_quiz(
    body: SubmitRequest,
    account: Account = Depends(get_current_account),
    engine: ScoringEngine = Depends(_engine),
):
    return await engine.submit(
        quiz_id=body.quiz_id,
        selected_answers=body.selected_answers,
        time_spent_seconds=body.time_spent,
        taker_id=account.id,
    )


@router.get("/user/history", response_model=list[AttemptRead])
async def my_history(
    account: Account = Depends(get_current_account),
    engine: ScoringEngine = Depends(_engine),
):
    """The caller's attempts, newest first."""
    return await engine.history(account.id)


@router.get("/attempt/{attempt_id}", response_model=AttemptRead)
async def get_attempt(
    attempt_id: PathId,
    account: Account = Depends(get_current_account),
    engine: ScoringEngine = Depends(_engine),
):
    return await engine.get_attempt(attempt_id, account.id)
