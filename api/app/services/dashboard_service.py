"""
Dashboard, progress history and data export for the current user.
"""
# pyright: reportAttributeAccessIssue=false
# pyright: reportCallIssue=false
# pyright: reportArgumentType=false
from sqlmodel import Session, select
from sqlalchemy import func
from sqlalchemy.engine import Engine
from typing import List, Optional
import logging

from app.core.config import settings
from app.core.context import RequestContext
from app.core.exceptions import NotFoundError
from app.models.code_submission import CodeSubmission
from app.models.enums import ProgressStatus
from app.models.lesson import Lesson
from app.models.project import Project
from app.models.user import User
from app.models.user_progress import UserProgress
from app.schemas.dashboard import DashboardResponse, UserDataExport, UserResponse
from app.schemas.execution import SubmissionResponse
from app.schemas.progress import ProgressLesson, ProgressResponse, ProgressWithLesson
from app.schemas.project import ProjectSummary
from app.utils.concurrency import gather_fetches
from app.utils.timestamps import utcnow

logger = logging.getLogger(__name__)


def fetch_user(session: Session, user_id: int) -> Optional[UserResponse]:
    user = session.get(User, user_id)
    return UserResponse.model_validate(user) if user else None


def fetch_progress_with_lessons(
    session: Session,
    user_id: int,
    limit: Optional[int] = None,
) -> List[ProgressWithLesson]:
    """Progress rows joined to lesson and project, most recently updated first."""
    statement = (
        select(UserProgress, Lesson, Project)
        .join(Lesson, UserProgress.lesson_id == Lesson.id)
        .join(Project, Lesson.project_id == Project.id)
        .where(UserProgress.user_id == user_id)
        .order_by(UserProgress.updated_at.desc(), UserProgress.id.desc())
    )
    if limit is not None:
        statement = statement.limit(limit)

    results = []
    for progress, lesson, project in session.exec(statement).all():
        results.append(
            ProgressWithLesson(
                **ProgressResponse.model_validate(progress).model_dump(),
                lesson=ProgressLesson(
                    id=lesson.id,
                    slug=lesson.slug,
                    title=lesson.title,
                    order=lesson.order,
                    is_premium=lesson.is_premium,
                    project=ProjectSummary.model_validate(project),
                ),
            )
        )
    return results


def count_lessons(session: Session) -> int:
    return session.exec(select(func.count(Lesson.id))).one()


def fetch_all_progress(session: Session, user_id: int) -> List[ProgressResponse]:
    rows = session.exec(
        select(UserProgress)
        .where(UserProgress.user_id == user_id)
        .order_by(UserProgress.updated_at.desc())
    ).all()
    return [ProgressResponse.model_validate(row) for row in rows]


def fetch_all_submissions(session: Session, user_id: int) -> List[SubmissionResponse]:
    rows = session.exec(
        select(CodeSubmission)
        .where(CodeSubmission.user_id == user_id)
        .order_by(CodeSubmission.created_at.desc(), CodeSubmission.id.desc())
    ).all()
    return [SubmissionResponse.model_validate(row) for row in rows]


def summarize_recent_progress(recent: List[ProgressWithLesson]) -> tuple[int, Optional[ProjectSummary]]:
    """
    Derive dashboard stats from the recent progress window.

    Returns:
        (number of completed rows, project of the most recent in-progress row or None)
    """
    completed = sum(1 for p in recent if p.status == ProgressStatus.COMPLETED.value)
    in_progress = next((p for p in recent if p.status == ProgressStatus.IN_PROGRESS.value), None)
    return completed, in_progress.lesson.project if in_progress else None


async def get_dashboard(engine: Engine, context: RequestContext) -> DashboardResponse:
    """
    Build the dashboard: user, recent progress and curriculum size, fetched together.

    Raises:
        AuthenticationError: If there is no user in the context
        NotFoundError: If the user record does not exist
    """
    user_id = context.require_user()
    limit = settings.dashboard_recent_limit

    user, recent, total_lessons = await gather_fetches(
        engine,
        lambda session: fetch_user(session, user_id),
        lambda session: fetch_progress_with_lessons(session, user_id, limit=limit),
        count_lessons,
    )
    if user is None:
        raise NotFoundError(f"User with id {user_id} not found")

    completed_lessons, current_project = summarize_recent_progress(recent)

    return DashboardResponse(
        user=user,
        recent_progress=recent,
        total_lessons=total_lessons,
        completed_lessons=completed_lessons,
        current_project=current_project,
    )


async def list_user_progress(engine: Engine, context: RequestContext) -> List[ProgressWithLesson]:
    """All of the current user's progress, most recent first."""
    user_id = context.require_user()
    [progress] = await gather_fetches(
        engine, lambda session: fetch_progress_with_lessons(session, user_id)
    )
    return progress


async def export_user_data(engine: Engine, context: RequestContext) -> UserDataExport:
    """
    Export the profile, progress and submission history of the current user.

    Raises:
        AuthenticationError: If there is no user in the context
        NotFoundError: If the user record does not exist
    """
    user_id = context.require_user()

    user, progress, submissions = await gather_fetches(
        engine,
        lambda session: fetch_user(session, user_id),
        lambda session: fetch_all_progress(session, user_id),
        lambda session: fetch_all_submissions(session, user_id),
    )
    if user is None:
        raise NotFoundError(f"User with id {user_id} not found")

    logger.info(
        f"Exported data for user {user_id}: {len(progress)} progress rows, {len(submissions)} submissions"
    )
    return UserDataExport(
        user=user,
        progress=progress,
        code_submissions=submissions,
        exported_at=utcnow(),
    )
