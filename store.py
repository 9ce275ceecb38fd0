from __future__ import annotations

from typing import List

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from errors import SessionNotFound, StoreFailure
from models import ProblemSession, Submission


class ProblemStore:
    """Keyed access to the sessions and submissions tables.

    Rows are only ever inserted and read here; nothing updates or deletes them.
    Database errors come out as ``StoreFailure`` so callers see one failure kind.
    """

    def __init__(self, db: Session):
        self.db = db

    def _insert(self, row):
        try:
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreFailure(f"insert into {row.__tablename__} failed: {e}") from e
        return row

    def create_session(self, problem_text: str, final_answer: float) -> ProblemSession:
        return self._insert(ProblemSession(problem_text=problem_text, final_answer=final_answer))

    def get_session(self, session_id: str) -> ProblemSession:
        try:
            row = self.db.get(ProblemSession, session_id)
        except SQLAlchemyError as e:
            raise SessionNotFound(session_id) from e
        if row is None:
            raise SessionNotFound(session_id)
        return row

    def create_submission(
        self, session_id: str, user_answer: float, is_correct: bool, feedback: str
    ) -> Submission:
        return self._insert(
            Submission(
                session_id=session_id,
                user_answer=user_answer,
                is_correct=is_correct,
                feedback=feedback,
            )
        )

    def list_submissions(self, session_id: str) -> List[Submission]:
        stmt = (
            select(Submission)
            .where(Submission.session_id == session_id)
            .order_by(Submission.created_at)
        )
        try:
            return list(self.db.scalars(stmt))
        except SQLAlchemyError as e:
            raise StoreFailure(f"listing submissions failed: {e}") from e

    def count_sessions(self) -> int:
        try:
            return self.db.scalar(select(func.count()).select_from(ProblemSession)) or 0
        except SQLAlchemyError as e:
            raise StoreFailure(f"counting sessions failed: {e}") from e
