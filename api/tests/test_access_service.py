"""Tests for the premium content access policy."""
from types import SimpleNamespace

import pytest

from app.models.enums import LessonAccess
from app.schemas.lesson import LessonContent
from app.services.access_service import (
    LOCKED_SOLUTION_CODE,
    LOCKED_SOLUTION_CONTENT,
    redact_lesson,
    resolve_access,
)

PLANS = [None, "free", "hobby", "pro", "lifetime", "enterprise", ""]


@pytest.mark.parametrize("plan", PLANS)
@pytest.mark.parametrize("is_premium", [True, False])
def test_redacted_iff_premium_and_not_paid(is_premium, plan):
    lesson = SimpleNamespace(is_premium=is_premium)
    expected_redacted = is_premium and plan not in ("pro", "lifetime")
    access = resolve_access(lesson, plan)
    assert (access == LessonAccess.REDACTED) == expected_redacted


def test_plan_comparison_ignores_case_and_whitespace():
    lesson = SimpleNamespace(is_premium=True)
    assert resolve_access(lesson, " PRO ") == LessonAccess.FULL
    assert resolve_access(lesson, "Lifetime") == LessonAccess.FULL


def test_redact_lesson_replaces_only_solution_fields():
    lesson = LessonContent(
        id=1,
        project_id=1,
        slug="functions",
        title="Functions",
        order=2,
        estimated_minutes=20,
        is_premium=True,
        problem_content="Write a function",
        solution_content="Here is how",
        explanation_content="Why it works",
        starter_code="def f():\n    pass\n",
        solution_code="def f():\n    return 1\n",
        hints="Use return",
    )

    redacted = redact_lesson(lesson)

    assert redacted.solution_content == LOCKED_SOLUTION_CONTENT
    assert redacted.solution_code == LOCKED_SOLUTION_CODE
    assert redacted.problem_content == lesson.problem_content
    assert redacted.starter_code == lesson.starter_code
    assert redacted.title == lesson.title
    # The original is left untouched
    assert lesson.solution_code == "def f():\n    return 1\n"
