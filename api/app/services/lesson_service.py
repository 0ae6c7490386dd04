"""
Single-lesson view: curriculum lookup, access policy and the caller's progress.
"""
# pyright: reportAttributeAccessIssue=false
# pyright: reportCallIssue=false
# pyright: reportArgumentType=false
from sqlmodel import Session, select
from sqlalchemy.engine import Engine
from typing import Optional, Tuple
import logging

from app.core.context import RequestContext
from app.core.exceptions import NotFoundError
from app.models.enums import LessonAccess
from app.models.lesson import Lesson
from app.models.project import Project
from app.models.user import User
from app.models.user_progress import UserProgress
from app.schemas.lesson import LessonContent, LessonView
from app.schemas.progress import ProgressResponse
from app.schemas.project import ProjectSummary
from app.services.access_service import resolve_access, redact_lesson
from app.utils.concurrency import gather_fetches

logger = logging.getLogger(__name__)


def find_lesson(
    session: Session,
    project_slug: str,
    lesson_slug: str,
) -> Optional[Tuple[LessonContent, ProjectSummary]]:
    """Resolve a lesson and its project in one joined query."""
    row = session.exec(
        select(Lesson, Project)
        .join(Project, Lesson.project_id == Project.id)
        .where(
            Lesson.slug == lesson_slug,
            Project.slug == project_slug,
        )
    ).first()
    if row is None:
        return None
    lesson, project = row
    return LessonContent.model_validate(lesson), ProjectSummary.model_validate(project)


def fetch_subscription_plan(session: Session, user_id: int) -> Optional[str]:
    return session.exec(
        select(User.subscription_plan).where(User.id == user_id)
    ).first()


def fetch_lesson_progress(session: Session, user_id: int, lesson_id: int) -> Optional[ProgressResponse]:
    progress = session.exec(
        select(UserProgress).where(
            UserProgress.user_id == user_id,
            UserProgress.lesson_id == lesson_id,
        )
    ).first()
    return ProgressResponse.model_validate(progress) if progress else None


async def get_lesson_view(
    engine: Engine,
    context: RequestContext,
    project_slug: str,
    lesson_slug: str,
) -> LessonView:
    """
    Build the lesson page for the current user.

    The lesson lookup comes first since plan and progress need its id; those
    two reads are then issued together.

    Raises:
        AuthenticationError: If there is no user in the context
        NotFoundError: If (project_slug, lesson_slug) does not resolve
    """
    user_id = context.require_user()

    [found] = await gather_fetches(
        engine, lambda session: find_lesson(session, project_slug, lesson_slug)
    )
    if found is None:
        raise NotFoundError(f"Lesson '{lesson_slug}' not found in project '{project_slug}'")
    lesson, project = found

    plan, progress = await gather_fetches(
        engine,
        lambda session: fetch_subscription_plan(session, user_id),
        lambda session: fetch_lesson_progress(session, user_id, lesson.id),
    )

    access = resolve_access(lesson, plan)
    is_locked = access == LessonAccess.REDACTED
    if is_locked:
        lesson = redact_lesson(lesson)
        logger.info(f"Lesson {lesson.id} locked for user {user_id} (plan={plan})")

    return LessonView(
        **lesson.model_dump(),
        project=project,
        user_progress=progress,
        is_locked=is_locked,
    )
