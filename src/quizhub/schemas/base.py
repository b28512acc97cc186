"""Shared pydantic configuration for request/response schemas.

Learn: The wire format is camelCase (quizId, selectedAnswers) while the
Python side stays snake_case. alias_generator maps between them;
populate_by_name lets clients send either spelling.

Every client-supplied integer that ends up in an INTEGER column is
bounded here, so an out-of-range id is a 400 VALIDATION_ERROR instead
of a driver overflow.
"""

from typing import Annotated

from fastapi import Path
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

# Largest value an INTEGER column holds (Postgres int4)
MAX_DB_INT = 2**31 - 1

EntityId = Annotated[int, Field(ge=1, le=MAX_DB_INT)]
PathId = Annotated[int, Path(ge=1, le=MAX_DB_INT)]


class ApiModel(BaseModel):
    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }
