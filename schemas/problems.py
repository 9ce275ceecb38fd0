from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    # camelCase on the wire, snake_case in Python
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MessageOut(BaseModel):
    message: str


# ---------- Generate ----------


class ProblemOut(CamelModel):
    problem_text: str


class GenerateResponse(CamelModel):
    session_id: str
    problem: ProblemOut


# ---------- Submit ----------


class SubmitRequest(CamelModel):
    # checked by grader.validate_submission
    session_id: Any = None
    user_answer: Any = None


class SubmitResponse(CamelModel):
    is_correct: bool
    feedback: str
    correct_answer: Union[int, float]


# ---------- Read views ----------


class SessionOut(CamelModel):
    session_id: str
    created_at: Optional[datetime] = None
    problem: ProblemOut


class SubmissionOut(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)
    id: str
    created_at: Optional[datetime] = None
    user_answer: float
    is_correct: bool
    feedback: str


class SubmissionList(CamelModel):
    session_id: str
    items: List[SubmissionOut]
    count: int
