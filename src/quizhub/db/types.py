"""Typed JSON column codecs.

Learn: Question options and attempt answers are stored as JSON, but the
rest of the code never sees raw JSON. These TypeDecorators validate on
the way in and rebuild proper Python types on the way out:

- OptionList: ordered list[str]          ["Paris", "Rome", "Oslo"]
- AnswerMap:  dict[int, int]             {12: 0, 13: 2}

JSON object keys are always strings, so AnswerMap stores {"12": 0} and
turns the keys back into ints when loading.
"""

from typing import Any, Optional

from sqlalchemy import JSON
from sqlalchemy.types import TypeDecorator


class OptionList(TypeDecorator):
    impl = JSON
    cache_ok = True

    def process_bind_param(self, value: Optional[list], dialect) -> Optional[list[str]]:
        if value is None:
            return None
        if not isinstance(value, (list, tuple)) or not all(
            isinstance(item, str) for item in value
        ):
            raise ValueError("options must be a list of strings")
        return list(value)

    def process_result_value(self, value: Any, dialect) -> Optional[list[str]]:
        if value is None:
            return None
        return [str(item) for item in value]


class AnswerMap(TypeDecorator):
    impl = JSON
    cache_ok = True

    def process_bind_param(self, value: Optional[dict], dialect) -> Optional[dict[str, int]]:
        if value is None:
            return None
        encoded: dict[str, int] = {}
        for question_id, answer_index in value.items():
            if isinstance(answer_index, bool) or not isinstance(answer_index, int):
                raise ValueError("answer indexes must be integers")
            encoded[str(int(question_id))] = answer_index
        return encoded

    def process_result_value(self, value: Any, dialect) -> dict[int, int]:
        if not value:
            return {}
        return {int(k): int(v) for k, v in value.items()}
