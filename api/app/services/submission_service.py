"""
Submission logger: append-only record of every code execution attempt.
"""
# pyright: reportAttributeAccessIssue=false
from sqlmodel import Session, select
from sqlalchemy.engine import Engine
from typing import List, Optional
import logging

from app.models.code_submission import CodeSubmission

logger = logging.getLogger(__name__)


def record_submission(
    engine: Engine,
    user_id: int,
    lesson_id: int,
    code: str,
    output: str,
    error: Optional[str],
    passed: bool,
) -> Optional[int]:
    """
    Append one CodeSubmission row in its own session.

    A failed write is logged and swallowed: the execution result has already
    been computed and is returned to the learner regardless.

    Returns:
        The new submission id, or None if the write failed
    """
    with Session(engine) as session:
        submission = CodeSubmission(
            user_id=user_id,
            lesson_id=lesson_id,
            code=code,
            output=output,
            error=error,
            passed=passed,
        )
        try:
            session.add(submission)
            session.commit()
            session.refresh(submission)
        except Exception:
            session.rollback()
            logger.exception(
                f"Failed to record code submission for user {user_id}, lesson {lesson_id}"
            )
            return None

        logger.info(
            f"Recorded submission {submission.id} for user {user_id}, lesson {lesson_id} (passed={passed})"
        )
        return submission.id


def list_submissions(
    session: Session,
    user_id: int,
    lesson_id: int,
    limit: int = 20,
) -> List[CodeSubmission]:
    """Return a user's attempts for one lesson, newest first."""
    statement = (
        select(CodeSubmission)
        .where(
            CodeSubmission.user_id == user_id,
            CodeSubmission.lesson_id == lesson_id,
        )
        .order_by(CodeSubmission.created_at.desc(), CodeSubmission.id.desc())
        .limit(limit)
    )
    return list(session.exec(statement).all())
