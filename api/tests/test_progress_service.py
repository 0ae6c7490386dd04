"""Tests for save/complete upserts on user progress."""
from unittest.mock import patch

import pytest
from sqlalchemy import event
from sqlalchemy.exc import OperationalError
from sqlalchemy.sql.dml import Insert
from sqlmodel import select

from app.core.exceptions import NotFoundError
from app.models import CodeSubmission, User, UserProgress
from app.services import progress_service
from app.services.progress_service import mark_complete, save_code


def progress_rows(session, user_id, lesson_id):
    session.expire_all()
    return session.exec(
        select(UserProgress).where(
            UserProgress.user_id == user_id,
            UserProgress.lesson_id == lesson_id,
        )
    ).all()


def test_save_code_creates_in_progress_row(session, curriculum):
    user_id = curriculum.users["free"]
    lesson_id = curriculum.lessons["variables-types"]

    progress = save_code(session, user_id, lesson_id, "x = 1")

    assert progress.status == "in_progress"
    assert progress.saved_code == "x = 1"
    assert progress.completed_at is None


def test_save_code_twice_keeps_one_row_with_latest_code(session, curriculum):
    user_id = curriculum.users["free"]
    lesson_id = curriculum.lessons["variables-types"]

    save_code(session, user_id, lesson_id, "x = 1")
    save_code(session, user_id, lesson_id, "x = 2")

    rows = progress_rows(session, user_id, lesson_id)
    assert len(rows) == 1
    assert rows[0].saved_code == "x = 2"


def test_mark_complete_twice_counts_once(session, curriculum):
    user_id = curriculum.users["pro"]
    lesson_id = curriculum.lessons["functions"]

    first, first_transition = mark_complete(session, user_id, lesson_id)
    completed_at = first.completed_at
    second, second_transition = mark_complete(session, user_id, lesson_id)

    assert first_transition is True
    assert second_transition is False
    assert second.status == "completed"
    assert second.completed_at == completed_at

    session.expire_all()
    user = session.get(User, user_id)
    assert user.total_lessons_completed == 1
    assert user.last_active_at is not None
    assert len(progress_rows(session, user_id, lesson_id)) == 1


def test_mark_complete_after_save_transitions_and_counts(session, curriculum):
    user_id = curriculum.users["free"]
    lesson_id = curriculum.lessons["variables-types"]

    save_code(session, user_id, lesson_id, "print('hi')")
    progress, transitioned = mark_complete(session, user_id, lesson_id)

    assert transitioned is True
    assert progress.status == "completed"
    assert progress.saved_code == "print('hi')"
    assert progress.completed_at is not None
    session.expire_all()
    assert session.get(User, user_id).total_lessons_completed == 1


def test_save_after_complete_does_not_regress_status(session, curriculum):
    user_id = curriculum.users["free"]
    lesson_id = curriculum.lessons["variables-types"]

    completed, _ = mark_complete(session, user_id, lesson_id)
    completed_at = completed.completed_at
    progress = save_code(session, user_id, lesson_id, "print('again')")

    assert progress.status == "completed"
    assert progress.saved_code == "print('again')"
    assert progress.completed_at == completed_at


def test_completion_counter_is_per_lesson(session, curriculum):
    user_id = curriculum.users["lifetime"]

    mark_complete(session, user_id, curriculum.lessons["variables-types"])
    mark_complete(session, user_id, curriculum.lessons["functions"])
    mark_complete(session, user_id, curriculum.lessons["functions"])

    session.expire_all()
    assert session.get(User, user_id).total_lessons_completed == 2


def test_unknown_lesson_raises_not_found(session, curriculum):
    with pytest.raises(NotFoundError):
        save_code(session, curriculum.users["free"], 9999, "x = 1")
    with pytest.raises(NotFoundError):
        mark_complete(session, curriculum.users["free"], 9999)


def test_unknown_user_raises_not_found(session, curriculum):
    with pytest.raises(NotFoundError):
        mark_complete(session, 9999, curriculum.lessons["functions"])


def failing_commit():
    return OperationalError("COMMIT", {}, Exception("database is locked"))


def test_mark_complete_commit_failure_propagates_and_rolls_back(session, curriculum):
    user_id = curriculum.users["free"]
    lesson_id = curriculum.lessons["variables-types"]

    with patch.object(session, "commit", side_effect=failing_commit()):
        with pytest.raises(OperationalError):
            mark_complete(session, user_id, lesson_id)

    session.expire_all()
    assert session.get(User, user_id).total_lessons_completed == 0
    assert progress_rows(session, user_id, lesson_id) == []


def test_save_code_commit_failure_propagates_and_keeps_previous_code(session, curriculum):
    user_id = curriculum.users["free"]
    lesson_id = curriculum.lessons["variables-types"]
    save_code(session, user_id, lesson_id, "x = 1")

    with patch.object(session, "commit", side_effect=failing_commit()):
        with pytest.raises(OperationalError):
            save_code(session, user_id, lesson_id, "x = 2")

    [row] = progress_rows(session, user_id, lesson_id)
    assert row.saved_code == "x = 1"


@pytest.fixture
def without_upsert():
    """Route writes through the path used for databases without ON CONFLICT."""
    with patch.object(progress_service, "_insert_for", return_value=None):
        yield


def test_fallback_save_code_twice_keeps_one_row(session, curriculum, without_upsert):
    user_id = curriculum.users["hobby"]
    lesson_id = curriculum.lessons["functions"]

    first = save_code(session, user_id, lesson_id, "x = 1")
    second = save_code(session, user_id, lesson_id, "x = 2")

    assert first.status == "in_progress"
    assert second.saved_code == "x = 2"
    assert len(progress_rows(session, user_id, lesson_id)) == 1


def test_fallback_mark_complete_counts_once(session, curriculum, without_upsert):
    user_id = curriculum.users["hobby"]
    lesson_id = curriculum.lessons["functions"]

    first, first_transition = mark_complete(session, user_id, lesson_id)
    completed_at = first.completed_at
    second, second_transition = mark_complete(session, user_id, lesson_id)

    assert first_transition is True
    assert second_transition is False
    assert second.completed_at == completed_at
    session.expire_all()
    assert session.get(User, user_id).total_lessons_completed == 1
    assert len(progress_rows(session, user_id, lesson_id)) == 1


def test_fallback_complete_after_save_then_save_keeps_completed(session, curriculum, without_upsert):
    user_id = curriculum.users["hobby"]
    lesson_id = curriculum.lessons["control-flow"]

    save_code(session, user_id, lesson_id, "for i in range(3): ...")
    _, transitioned = mark_complete(session, user_id, lesson_id)
    progress = save_code(session, user_id, lesson_id, "print('again')")

    assert transitioned is True
    assert progress.status == "completed"
    assert progress.saved_code == "print('again')"
    session.expire_all()
    assert session.get(User, user_id).total_lessons_completed == 1


def test_writes_bind_timezone_aware_timestamps(engine, session, curriculum):
    bound = []

    def capture_insert_values(conn, clauseelement, multiparams, params, execution_options):
        if isinstance(clauseelement, Insert):
            bound.extend(clauseelement.compile(dialect=conn.dialect).params.items())

    event.listen(engine, "before_execute", capture_insert_values)
    try:
        save_code(session, curriculum.users["free"], curriculum.lessons["functions"], "x = 1")
        mark_complete(session, curriculum.users["free"], curriculum.lessons["functions"])
    finally:
        event.remove(engine, "before_execute", capture_insert_values)

    timestamps = {name: value for name, value in bound if name.endswith("_at") and value is not None}
    assert {"created_at", "updated_at", "completed_at"} <= set(timestamps)
    assert all(value.tzinfo is not None for value in timestamps.values())


def test_model_defaults_are_timezone_aware():
    submission = CodeSubmission(user_id=1, lesson_id=1, code="print(1)")

    assert submission.created_at.tzinfo is not None
