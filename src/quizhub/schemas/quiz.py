"""Pydantic schemas for quizzes and questions.

Learn: Two question views exist on purpose. QuestionRead (owners) includes
correctIndex; TakerQuestionRead (participants) does not, so the answer key
never leaves the server on a taker route.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from quizhub.schemas.base import MAX_DB_INT, ApiModel, EntityId


# ─── Quizzes ────────────────────────────────────────────

class QuizCreate(ApiModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    time_limit: Optional[int] = Field(None, ge=1, le=MAX_DB_INT, description="Minutes")
    is_published: bool = False


class QuizUpdate(ApiModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    time_limit: Optional[int] = Field(None, ge=1, le=MAX_DB_INT)
    is_published: Optional[bool] = None


class QuizRead(ApiModel):
    id: int
    title: str
    description: Optional[str] = None
    time_limit: Optional[int] = None
    is_published: bool
    owner_id: int
    question_count: int
    created_at: datetime
    updated_at: datetime


# ─── Questions ──────────────────────────────────────────

class QuestionCreate(ApiModel):
    quiz_id: EntityId
    text: str = Field(..., min_length=1)
    options: list[str] = Field(..., min_length=2)
    correct_index: int = Field(..., ge=0, le=MAX_DB_INT)
    order: Optional[int] = Field(None, ge=0, le=MAX_DB_INT)


class QuestionUpdate(ApiModel):
    text: str = Field(..., min_length=1)
    options: list[str] = Field(..., min_length=2)
    correct_index: int = Field(..., ge=0, le=MAX_DB_INT)
    order: Optional[int] = Field(None, ge=0, le=MAX_DB_INT)


class QuestionRead(ApiModel):
    id: int
    quiz_id: int
    text: str
    options: list[str]
    correct_index: int
    order: int


class TakerQuestionRead(ApiModel):
    id: int
    text: str
    options: list[str]
    order: int


class TakerQuizDetail(ApiModel):
    id: int
    title: str
    description: Optional[str] = None
    time_limit: Optional[int] = None
    questions: list[TakerQuestionRead] = []
