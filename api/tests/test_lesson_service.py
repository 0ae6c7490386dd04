"""Tests for the single-lesson view."""
import asyncio
import threading
from unittest.mock import patch

import pytest

from app.core.context import RequestContext
from app.core.exceptions import AuthenticationError, NotFoundError
from app.services import lesson_service
from app.services.access_service import LOCKED_SOLUTION_CODE, LOCKED_SOLUTION_CONTENT
from app.services.lesson_service import get_lesson_view
from app.services.progress_service import save_code


def view_for(engine, user_id, project_slug="python-essentials", lesson_slug="functions"):
    return asyncio.run(
        get_lesson_view(engine, RequestContext(user_id=user_id), project_slug, lesson_slug)
    )


@pytest.mark.parametrize("plan", ["free", "hobby", "none"])
def test_premium_lesson_is_locked_for_unpaid_plans(engine, curriculum, plan):
    view = view_for(engine, curriculum.users[plan])

    assert view.is_locked is True
    assert view.solution_content == LOCKED_SOLUTION_CONTENT
    assert view.solution_code == LOCKED_SOLUTION_CODE
    assert view.problem_content == "Problem for functions"
    assert view.starter_code == "# functions starter\n"
    assert view.project.slug == "python-essentials"


@pytest.mark.parametrize("plan", ["pro", "lifetime"])
def test_premium_lesson_is_unlocked_for_paid_plans(engine, curriculum, plan):
    view = view_for(engine, curriculum.users[plan])

    assert view.is_locked is False
    assert view.solution_content == "Solution walkthrough for functions"
    assert view.solution_code == "# functions solution\nprint('done')\n"


def test_free_lesson_is_unlocked_for_free_user(engine, curriculum):
    view = view_for(engine, curriculum.users["free"], lesson_slug="variables-types")

    assert view.is_locked is False
    assert view.solution_content == "Solution walkthrough for variables-types"


def test_view_includes_callers_progress(engine, session, curriculum):
    user_id = curriculum.users["free"]
    save_code(session, user_id, curriculum.lessons["functions"], "def f(): ...")

    view = view_for(engine, user_id)
    other = view_for(engine, curriculum.users["pro"])

    assert view.user_progress is not None
    assert view.user_progress.saved_code == "def f(): ..."
    assert view.user_progress.status == "in_progress"
    assert other.user_progress is None


def test_requires_authenticated_user(engine, curriculum):
    with pytest.raises(AuthenticationError):
        view_for(engine, None)


def test_unknown_lesson_raises_not_found(engine, curriculum):
    with pytest.raises(NotFoundError):
        view_for(engine, curriculum.users["pro"], lesson_slug="missing")


def test_lesson_slug_must_belong_to_project(engine, curriculum):
    with pytest.raises(NotFoundError):
        view_for(engine, curriculum.users["pro"], project_slug="agents", lesson_slug="functions")


def test_plan_and_progress_are_fetched_concurrently(engine, curriculum):
    # Each fetch waits for the other; sequential fetching would break the barrier
    barrier = threading.Barrier(2, timeout=5)
    original_plan = lesson_service.fetch_subscription_plan
    original_progress = lesson_service.fetch_lesson_progress

    def plan_fetch(session, user_id):
        barrier.wait()
        return original_plan(session, user_id)

    def progress_fetch(session, user_id, lesson_id):
        barrier.wait()
        return original_progress(session, user_id, lesson_id)

    with patch.object(lesson_service, "fetch_subscription_plan", plan_fetch), \
            patch.object(lesson_service, "fetch_lesson_progress", progress_fetch):
        view = view_for(engine, curriculum.users["pro"])

    assert view.is_locked is False
