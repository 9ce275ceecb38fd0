from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from db import get_db
from errors import InputValidation, SessionNotFound, StoreFailure
from generator import generate_problem
from grader import grade_answer, validate_submission
from llm import TextGenerator, get_text_generator
from schemas.problems import (
    GenerateResponse,
    MessageOut,
    ProblemOut,
    SessionOut,
    SubmissionList,
    SubmissionOut,
    SubmitRequest,
    SubmitResponse,
)
from store import ProblemStore

logger = logging.getLogger("math-tutor.api")

router = APIRouter(prefix="/api/math-problem", tags=["math-problem"])

GENERATE_FAILED_MSG = "Unable to generate a math problem right now."
SUBMIT_FAILED_MSG = "We could not process that submission. Please try again."
NOT_FOUND_MSG = "Session not found"
LIST_FAILED_MSG = "Unable to load submissions right now."

_ERRORS = {400: {"model": MessageOut}, 500: {"model": MessageOut}}


def get_store(db: Session = Depends(get_db)) -> ProblemStore:
    return ProblemStore(db)


def _message(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


def _num_out(x: float):
    if float(x).is_integer():
        return int(x)
    return x


@router.post("", response_model=GenerateResponse, responses=_ERRORS)
def create_problem(
    llm: TextGenerator = Depends(get_text_generator),
    store: ProblemStore = Depends(get_store),
):
    try:
        generated = generate_problem(llm, store)
    except Exception:
        logger.exception("[math-problem] generation error")
        return _message(500, GENERATE_FAILED_MSG)

    return GenerateResponse(
        session_id=generated.session_id,
        problem=ProblemOut(problem_text=generated.problem_text),
    )


@router.post("/submit", response_model=SubmitResponse, responses=_ERRORS)
def submit_answer(
    req: SubmitRequest,
    llm: TextGenerator = Depends(get_text_generator),
    store: ProblemStore = Depends(get_store),
):
    try:
        session_id, user_answer = validate_submission(req.session_id, req.user_answer)
    except InputValidation as e:
        return _message(400, e.message)

    try:
        result = grade_answer(session_id, user_answer, llm, store)
    except Exception:
        logger.exception("[math-problem/submit] error for session %s", session_id)
        return _message(500, SUBMIT_FAILED_MSG)

    return SubmitResponse(
        is_correct=result.is_correct,
        feedback=result.feedback,
        correct_answer=_num_out(result.correct_answer),
    )


@router.get("/{session_id}", response_model=SessionOut, responses={404: {"model": MessageOut}})
def get_problem(session_id: str, store: ProblemStore = Depends(get_store)):
    # no answer key in this view
    try:
        s = store.get_session(session_id)
    except SessionNotFound:
        return _message(404, NOT_FOUND_MSG)
    return SessionOut(
        session_id=s.id, created_at=s.created_at, problem=ProblemOut(problem_text=s.problem_text)
    )


@router.get(
    "/{session_id}/submissions",
    response_model=SubmissionList,
    responses={404: {"model": MessageOut}, 500: {"model": MessageOut}},
)
def list_problem_submissions(session_id: str, store: ProblemStore = Depends(get_store)):
    try:
        store.get_session(session_id)
    except SessionNotFound:
        return _message(404, NOT_FOUND_MSG)

    try:
        rows = store.list_submissions(session_id)
    except StoreFailure:
        logger.exception("[math-problem] listing submissions failed for session %s", session_id)
        return _message(500, LIST_FAILED_MSG)

    items = [SubmissionOut.model_validate(s) for s in rows]
    return SubmissionList(session_id=session_id, items=items, count=len(items))
