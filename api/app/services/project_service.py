"""
Project views: the published curriculum, optionally annotated with a user's progress.
"""
# pyright: reportAttributeAccessIssue=false
# pyright: reportCallIssue=false
# pyright: reportArgumentType=false
from sqlmodel import Session, select
from sqlalchemy.engine import Engine
from typing import Dict, List, Optional
import logging

from app.core.context import RequestContext
from app.core.exceptions import NotFoundError
from app.models.lesson import Lesson
from app.models.project import Project
from app.models.user_progress import UserProgress
from app.schemas.project import LessonProgressMarker, LessonSummary, ProjectWithLessons
from app.utils.concurrency import gather_fetches

logger = logging.getLogger(__name__)


def _lessons_by_project(session: Session, project_ids: List[int]) -> Dict[int, List[Lesson]]:
    lessons_map: Dict[int, List[Lesson]] = {project_id: [] for project_id in project_ids}
    if not project_ids:
        return lessons_map
    lessons = session.exec(
        select(Lesson)
        .where(Lesson.project_id.in_(project_ids))  # type: ignore[attr-defined]
        .order_by(Lesson.project_id, Lesson.order)
    ).all()
    for lesson in lessons:
        lessons_map[lesson.project_id].append(lesson)
    return lessons_map


def _build_project(project: Project, lessons: List[Lesson]) -> ProjectWithLessons:
    return ProjectWithLessons(
        id=project.id,
        slug=project.slug,
        title=project.title,
        description=project.description,
        difficulty=project.difficulty,
        category=project.category,
        estimated_hours=project.estimated_hours,
        order=project.order,
        is_premium=project.is_premium,
        lessons=[LessonSummary.model_validate(lesson) for lesson in lessons],
    )


def fetch_published_projects(session: Session) -> List[ProjectWithLessons]:
    """Published projects in curriculum order, each with ordered lesson metadata."""
    projects = session.exec(
        select(Project)
        .where(Project.is_published == True)  # noqa: E712
        .order_by(Project.order)
    ).all()
    lessons_map = _lessons_by_project(session, [p.id for p in projects])
    return [_build_project(project, lessons_map[project.id]) for project in projects]


def fetch_published_progress(session: Session, user_id: int) -> Dict[int, LessonProgressMarker]:
    """All of a user's progress on published lessons, in one query, keyed by lesson id."""
    rows = session.exec(
        select(UserProgress)
        .join(Lesson, UserProgress.lesson_id == Lesson.id)
        .join(Project, Lesson.project_id == Project.id)
        .where(
            UserProgress.user_id == user_id,
            Project.is_published == True,  # noqa: E712
        )
    ).all()
    return {row.lesson_id: LessonProgressMarker.model_validate(row) for row in rows}


def fetch_progress_for_lessons(
    session: Session,
    user_id: int,
    lesson_ids: List[int],
) -> Dict[int, LessonProgressMarker]:
    if not lesson_ids:
        return {}
    rows = session.exec(
        select(UserProgress).where(
            UserProgress.user_id == user_id,
            UserProgress.lesson_id.in_(lesson_ids),  # type: ignore[attr-defined]
        )
    ).all()
    return {row.lesson_id: LessonProgressMarker.model_validate(row) for row in rows}


def fetch_project(session: Session, slug: str) -> Optional[ProjectWithLessons]:
    project = session.exec(select(Project).where(Project.slug == slug)).first()
    if project is None:
        return None
    lessons_map = _lessons_by_project(session, [project.id])
    return _build_project(project, lessons_map[project.id])


def attach_progress(
    projects: List[ProjectWithLessons],
    progress_map: Dict[int, LessonProgressMarker],
) -> List[ProjectWithLessons]:
    for project in projects:
        for lesson in project.lessons:
            lesson.user_progress = progress_map.get(lesson.id)
    return projects


async def list_projects(engine: Engine, context: RequestContext) -> List[ProjectWithLessons]:
    """
    Build the project list.

    Anonymous callers get the curriculum only. For a logged-in user the
    progress batch does not depend on the curriculum read, so both are issued
    together.
    """
    if not context.is_authenticated:
        [projects] = await gather_fetches(engine, fetch_published_projects)
        return projects

    user_id = context.user_id
    projects, progress_map = await gather_fetches(
        engine,
        fetch_published_projects,
        lambda session: fetch_published_progress(session, user_id),
    )
    logger.info(f"Listed {len(projects)} projects for user {user_id} ({len(progress_map)} progress markers)")
    return attach_progress(projects, progress_map)


async def get_project_view(engine: Engine, context: RequestContext, slug: str) -> ProjectWithLessons:
    """
    Build a single project page with its lessons.

    Raises:
        NotFoundError: If no project has this slug
    """
    [project] = await gather_fetches(engine, lambda session: fetch_project(session, slug))
    if project is None:
        raise NotFoundError(f"Project '{slug}' not found")

    if context.is_authenticated:
        lesson_ids = [lesson.id for lesson in project.lessons]
        [progress_map] = await gather_fetches(
            engine,
            lambda session: fetch_progress_for_lessons(session, context.user_id, lesson_ids),
        )
        attach_progress([project], progress_map)

    return project
