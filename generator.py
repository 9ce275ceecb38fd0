from __future__ import annotations

import logging
from dataclasses import dataclass

from errors import GenerationFailed
from extraction import extract_json_payload, validate_generated_problem
from llm import TextGenerator
from prompts import ERROR_SENTINEL, build_problem_prompt
from store import ProblemStore

logger = logging.getLogger("math-tutor.generator")


@dataclass(frozen=True)
class GeneratedSession:
    session_id: str
    problem_text: str


def generate_problem(llm: TextGenerator, store: ProblemStore) -> GeneratedSession:
    """Ask the model for a word problem, store it, and return what the learner may see.

    The numeric answer stays in the store; it is never part of the result.
    """
    raw_text = llm.generate(build_problem_prompt())
    if not raw_text or raw_text.strip() == ERROR_SENTINEL:
        raise GenerationFailed("AI model failed to generate a problem")

    payload = extract_json_payload(raw_text).unwrap()
    problem = validate_generated_problem(payload)

    row = store.create_session(problem.problem_text, problem.final_answer)
    logger.info("created problem session %s", row.id)
    return GeneratedSession(session_id=row.id, problem_text=row.problem_text)
