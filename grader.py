from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Tuple

from errors import FeedbackGenerationFailed, InputValidation
from extraction import coerce_number
from llm import TextGenerator
from prompts import build_feedback_prompt
from store import ProblemStore

logger = logging.getLogger("math-tutor.grader")


@dataclass(frozen=True)
class GradeResult:
    is_correct: bool
    feedback: str
    correct_answer: float


def validate_submission(session_id: Any, user_answer: Any) -> Tuple[str, float]:
    """Check the caller's fields before anything touches the store or the model."""
    sid = "" if session_id is None else str(session_id).strip()
    if not sid:
        raise InputValidation("Missing sessionId")
    answer = coerce_number(user_answer)
    if answer is None:
        raise InputValidation("User answer must be a number")
    return sid, answer


def is_answer_correct(final_answer: float, user_answer: float) -> bool:
    # exact comparison, no tolerance
    return float(final_answer) == float(user_answer)


def grade_answer(
    session_id: str, user_answer: float, llm: TextGenerator, store: ProblemStore
) -> GradeResult:
    session = store.get_session(session_id)
    correct_answer = float(session.final_answer)
    is_correct = is_answer_correct(correct_answer, user_answer)

    prompt = build_feedback_prompt(session.problem_text, correct_answer, user_answer, is_correct)
    feedback = (llm.generate(prompt) or "").strip()
    if not feedback:
        raise FeedbackGenerationFailed("AI feedback generation failed")

    sub = store.create_submission(session.id, user_answer, is_correct, feedback)
    logger.info("graded session %s as %s (submission %s)", session.id, is_correct, sub.id)
    return GradeResult(is_correct=is_correct, feedback=feedback, correct_answer=correct_answer)
