"""Tests for the project list and project detail views."""
import asyncio
import threading
from unittest.mock import patch

import pytest
from sqlalchemy import event

from app.core.context import RequestContext
from app.core.exceptions import NotFoundError
from app.services import project_service
from app.services.progress_service import mark_complete, save_code
from app.services.project_service import get_project_view, list_projects


def test_anonymous_list_shows_published_projects_in_order(engine, curriculum):
    projects = asyncio.run(list_projects(engine, RequestContext()))

    assert [p.slug for p in projects] == ["python-essentials", "agents"]
    essentials = projects[0]
    assert [lesson.slug for lesson in essentials.lessons] == ["variables-types", "functions", "control-flow"]
    assert all(lesson.user_progress is None for lesson in essentials.lessons)


def test_list_attaches_users_progress_markers(engine, session, curriculum):
    user_id = curriculum.users["free"]
    mark_complete(session, user_id, curriculum.lessons["variables-types"])
    save_code(session, user_id, curriculum.lessons["agent-loop"], "loop()")
    save_code(session, curriculum.users["pro"], curriculum.lessons["functions"], "other user")

    projects = asyncio.run(list_projects(engine, RequestContext(user_id=user_id)))
    by_slug = {lesson.slug: lesson for project in projects for lesson in project.lessons}

    assert by_slug["variables-types"].user_progress.status == "completed"
    assert by_slug["variables-types"].user_progress.completed_at is not None
    assert by_slug["agent-loop"].user_progress.status == "in_progress"
    assert by_slug["functions"].user_progress is None


def test_list_uses_fixed_number_of_queries(engine, curriculum):
    statements = []

    def count_selects(conn, cursor, statement, parameters, context, executemany):
        if statement.lstrip().upper().startswith("SELECT"):
            statements.append(statement)

    event.listen(engine, "before_cursor_execute", count_selects)
    try:
        asyncio.run(list_projects(engine, RequestContext(user_id=curriculum.users["free"])))
    finally:
        event.remove(engine, "before_cursor_execute", count_selects)

    # projects, their lessons, and one progress batch; never one query per lesson
    assert len(statements) == 3


def test_project_view_with_progress(engine, session, curriculum):
    user_id = curriculum.users["pro"]
    mark_complete(session, user_id, curriculum.lessons["functions"])

    project = asyncio.run(get_project_view(engine, RequestContext(user_id=user_id), "python-essentials"))

    assert project.title == "Python Essentials"
    assert [lesson.order for lesson in project.lessons] == [1, 2, 3]
    markers = {lesson.slug: lesson.user_progress for lesson in project.lessons}
    assert markers["functions"].status == "completed"
    assert markers["variables-types"] is None


def test_project_view_anonymous(engine, curriculum):
    project = asyncio.run(get_project_view(engine, RequestContext(), "agents"))

    assert [lesson.slug for lesson in project.lessons] == ["agent-loop"]
    assert project.lessons[0].user_progress is None


def test_project_view_unknown_slug(engine, curriculum):
    with pytest.raises(NotFoundError):
        asyncio.run(get_project_view(engine, RequestContext(), "missing"))


def test_curriculum_and_progress_are_fetched_concurrently(engine, curriculum):
    # Each read waits for the other; sequential fetching would break the barrier
    barrier = threading.Barrier(2, timeout=5)
    original_projects = project_service.fetch_published_projects
    original_progress = project_service.fetch_published_progress

    def projects_fetch(session):
        barrier.wait()
        return original_projects(session)

    def progress_fetch(session, user_id):
        barrier.wait()
        return original_progress(session, user_id)

    with patch.object(project_service, "fetch_published_projects", projects_fetch), \
            patch.object(project_service, "fetch_published_progress", progress_fetch):
        projects = asyncio.run(list_projects(engine, RequestContext(user_id=curriculum.users["free"])))

    assert [p.slug for p in projects] == ["python-essentials", "agents"]
