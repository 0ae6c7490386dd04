"""
Progress store: per-user, per-lesson save and completion state.

On PostgreSQL and SQLite both writes are a single
INSERT ... ON CONFLICT (user_id, lesson_id) DO UPDATE, so concurrent requests
can never create a second row for the same pair. Other databases use a
conditional UPDATE followed by an INSERT when no row exists; the unique
constraint still rejects a racing duplicate, which surfaces as an error.
"""
# pyright: reportAttributeAccessIssue=false
# pyright: reportCallIssue=false
# pyright: reportArgumentType=false
from sqlmodel import Session, select
from sqlalchemy import case, func, update
from sqlalchemy.dialects import postgresql, sqlite
import logging

from app.core.exceptions import NotFoundError
from app.models.enums import ProgressStatus
from app.models.lesson import Lesson
from app.models.user import User
from app.models.user_progress import UserProgress
from app.utils.timestamps import utcnow

logger = logging.getLogger(__name__)

progress_table = UserProgress.__table__

CONFLICT_COLUMNS = ["user_id", "lesson_id"]

UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _insert_for(session: Session):
    """The dialect insert supporting ON CONFLICT, or None if the database has none."""
    return UPSERT_INSERTS.get(session.get_bind().dialect.name)


def _ensure_user_and_lesson(session: Session, user_id: int, lesson_id: int) -> None:
    if session.get(User, user_id) is None:
        raise NotFoundError(f"User with id {user_id} not found")
    if session.get(Lesson, lesson_id) is None:
        raise NotFoundError(f"Lesson with id {lesson_id} not found")


def _row_for(user_id: int, lesson_id: int):
    return (progress_table.c.user_id == user_id) & (progress_table.c.lesson_id == lesson_id)


def _new_row(user_id: int, lesson_id: int, now, **values) -> dict:
    row = dict(
        user_id=user_id,
        lesson_id=lesson_id,
        time_spent_minutes=0,
        hints_used=0,
        created_at=now,
        updated_at=now,
    )
    row.update(values)
    return row


def get_progress(session: Session, user_id: int, lesson_id: int) -> UserProgress:
    progress = session.exec(
        select(UserProgress).where(
            UserProgress.user_id == user_id,
            UserProgress.lesson_id == lesson_id,
        )
    ).one()
    return progress


def _upsert_saved_code(session: Session, insert, user_id: int, lesson_id: int, code: str, now) -> None:
    statement = insert(progress_table).values(
        **_new_row(user_id, lesson_id, now, status=ProgressStatus.IN_PROGRESS.value, saved_code=code)
    )
    statement = statement.on_conflict_do_update(
        index_elements=CONFLICT_COLUMNS,
        set_={
            "saved_code": statement.excluded.saved_code,
            "updated_at": statement.excluded.updated_at,
            "status": case(
                (progress_table.c.status == ProgressStatus.COMPLETED.value, ProgressStatus.COMPLETED.value),
                else_=ProgressStatus.IN_PROGRESS.value,
            ),
        },
    )
    session.exec(statement)


def _write_saved_code(session: Session, user_id: int, lesson_id: int, code: str, now) -> None:
    # Status is left alone, so a completed lesson stays completed
    updated = session.exec(
        update(progress_table)
        .where(_row_for(user_id, lesson_id))
        .values(saved_code=code, updated_at=now)
    ).rowcount
    if not updated:
        session.exec(
            progress_table.insert().values(
                **_new_row(user_id, lesson_id, now, status=ProgressStatus.IN_PROGRESS.value, saved_code=code)
            )
        )


def save_code(session: Session, user_id: int, lesson_id: int, code: str) -> UserProgress:
    """
    Save the learner's editor contents for a lesson.

    Creates the progress row as 'in_progress' on first save. On later saves
    only saved_code and updated_at change, and a completed lesson stays
    completed.

    Raises:
        NotFoundError: If the user or lesson does not exist
    """
    _ensure_user_and_lesson(session, user_id, lesson_id)
    now = utcnow()
    insert = _insert_for(session)

    try:
        if insert is not None:
            _upsert_saved_code(session, insert, user_id, lesson_id, code, now)
        else:
            _write_saved_code(session, user_id, lesson_id, code, now)
        session.commit()
    except Exception:
        session.rollback()
        logger.error(f"Error saving code for user {user_id}, lesson {lesson_id}")
        raise

    logger.info(f"Saved code for user {user_id}, lesson {lesson_id}")
    return get_progress(session, user_id, lesson_id)


def _upsert_completion(session: Session, insert, user_id: int, lesson_id: int, now) -> bool:
    statement = insert(progress_table).values(
        **_new_row(user_id, lesson_id, now, status=ProgressStatus.COMPLETED.value, completed_at=now)
    )
    statement = statement.on_conflict_do_update(
        index_elements=CONFLICT_COLUMNS,
        set_={
            "status": ProgressStatus.COMPLETED.value,
            "completed_at": func.coalesce(progress_table.c.completed_at, statement.excluded.completed_at),
            "updated_at": statement.excluded.updated_at,
        },
        where=progress_table.c.status != ProgressStatus.COMPLETED.value,
    ).returning(progress_table.c.id)
    return session.exec(statement).first() is not None


def _write_completion(session: Session, user_id: int, lesson_id: int, now) -> bool:
    transitioned = session.exec(
        update(progress_table)
        .where(
            _row_for(user_id, lesson_id),
            progress_table.c.status != ProgressStatus.COMPLETED.value,
        )
        .values(
            status=ProgressStatus.COMPLETED.value,
            completed_at=func.coalesce(progress_table.c.completed_at, now),
            updated_at=now,
        )
    ).rowcount
    if transitioned:
        return True

    existing = session.exec(select(progress_table.c.id).where(_row_for(user_id, lesson_id))).first()
    if existing is not None:
        return False

    session.exec(
        progress_table.insert().values(
            **_new_row(user_id, lesson_id, now, status=ProgressStatus.COMPLETED.value, completed_at=now)
        )
    )
    return True


def mark_complete(session: Session, user_id: int, lesson_id: int) -> tuple[UserProgress, bool]:
    """
    Mark a lesson completed for a user.

    The write only changes a row that is not yet completed, and reports
    whether it did (RETURNING on the upsert, the affected row count on the
    fallback). That signal bumps the user's completion counter in the same
    transaction, so repeat calls leave both the counter and completed_at
    untouched.

    Returns:
        (progress row, True if this call was the first completion)

    Raises:
        NotFoundError: If the user or lesson does not exist
    """
    _ensure_user_and_lesson(session, user_id, lesson_id)
    now = utcnow()
    insert = _insert_for(session)

    try:
        if insert is not None:
            transitioned = _upsert_completion(session, insert, user_id, lesson_id, now)
        else:
            transitioned = _write_completion(session, user_id, lesson_id, now)
        if transitioned:
            session.exec(
                update(User)
                .where(User.id == user_id)
                .values(
                    total_lessons_completed=User.total_lessons_completed + 1,
                    last_active_at=now,
                )
            )
        session.commit()
    except Exception:
        session.rollback()
        logger.error(f"Error marking lesson {lesson_id} complete for user {user_id}")
        raise

    if transitioned:
        logger.info(f"Lesson {lesson_id} completed for user {user_id}")
    else:
        logger.info(f"Lesson {lesson_id} was already completed for user {user_id}")
    return get_progress(session, user_id, lesson_id), transitioned
