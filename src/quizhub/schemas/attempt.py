"""Pydantic schemas for quiz submissions and attempts.

Learn: SubmitRequest has no score field. Anything extra the client sends
(a "score": 100, say) is dropped by pydantic before the scoring engine
ever sees the request.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from quizhub.schemas.base import MAX_DB_INT, ApiModel, EntityId


class SubmitRequest(ApiModel):
    quiz_id: EntityId
    # JSON keys arrive as strings ("12"); pydantic parses them to ints
    selected_answers: dict[int, int] = Field(default_factory=dict)
    time_spent: int = Field(0, ge=0, le=MAX_DB_INT, description="Seconds")


class AttemptRead(ApiModel):
    id: int
    taker_id: int
    quiz_id: int
    quiz_title: str
    score: int
    total_questions: int
    percentage: float
    selected_answers: dict[int, int]
    time_spent: Optional[int] = None
    submitted_at: datetime
