from __future__ import annotations

from typing import Optional

from config import get_settings

# Literal reply the model is told to give when it cannot comply.
ERROR_SENTINEL = "ERROR"


def _fmt_number(x: float) -> str:
    if float(x).is_integer():
        return str(int(x))
    return str(x)


def build_problem_prompt(grade_level: Optional[str] = None, age_range: Optional[str] = None) -> str:
    settings = get_settings()
    grade = grade_level or settings.grade_level
    ages = age_range or settings.age_range
    return f"""You are an expert {grade} math tutor.
Create one engaging multi-sentence math word problem appropriate for a {ages} year old.
Return *only* strict JSON with the following schema:
{{
  "problem_text": "<problem statement>",
  "final_answer": <numeric final answer only>
}}
Requirements:
- Keep numbers realistic for {grade} level.
- Ensure the problem requires at least two steps of reasoning.
- Make "final_answer" a number (not a string) and the unique correct answer.
- Do not include units in the final answer (they should be part of the explanation in the problem text if needed).
If you cannot comply, respond with the literal text "{ERROR_SENTINEL}"."""


def build_feedback_prompt(
    problem_text: str,
    final_answer: float,
    user_answer: float,
    is_correct: bool,
    grade_level: Optional[str] = None,
) -> str:
    grade = grade_level or get_settings().grade_level
    correctness = "correct" if is_correct else "incorrect"
    return f"""You are a warm, encouraging {grade} math tutor.
Problem: {problem_text}
Correct answer: {_fmt_number(final_answer)}
Student answer: {_fmt_number(user_answer)} (this is {correctness}).
Provide feedback in 2 short sentences max.
If the student is incorrect, explain the key mistake and hint at the right approach without giving a full solution.
If the student is correct, celebrate briefly and reinforce the math concept.
Respond with plain text only."""
