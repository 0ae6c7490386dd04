"""
Access policy for premium lesson content.

Pure functions: callers fetch the lesson and the user's plan first and pass
them in. Nothing here touches the network or the database.
"""
from typing import Optional

from app.models.enums import LessonAccess, SubscriptionPlan
from app.schemas.lesson import LessonContent

# Plans that unlock premium solutions
UNLOCKING_PLANS = frozenset({SubscriptionPlan.PRO.value, SubscriptionPlan.LIFETIME.value})

LOCKED_SOLUTION_CONTENT = "Upgrade to Pro to access the solution."
LOCKED_SOLUTION_CODE = "# Upgrade to Pro to see the solution"


def resolve_access(lesson, user_plan: Optional[str]) -> LessonAccess:
    """
    Decide how much of a lesson the user may see.

    Redacted iff the lesson is premium and the plan is not pro or lifetime.
    A missing or unrecognised plan counts as free.

    Args:
        lesson: Any object with an `is_premium` flag (model or schema)
        user_plan: The user's subscription plan, if any

    Returns:
        LessonAccess.FULL or LessonAccess.REDACTED
    """
    if not lesson.is_premium:
        return LessonAccess.FULL
    plan = (user_plan or SubscriptionPlan.FREE.value).strip().lower()
    if plan in UNLOCKING_PLANS:
        return LessonAccess.FULL
    return LessonAccess.REDACTED


def redact_lesson(lesson: LessonContent) -> LessonContent:
    """Return a copy with solution fields replaced by placeholders."""
    return lesson.model_copy(
        update={
            "solution_content": LOCKED_SOLUTION_CONTENT,
            "solution_code": LOCKED_SOLUTION_CODE,
        }
    )
