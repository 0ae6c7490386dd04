"""
Lesson endpoints: lesson view, saving code and completion.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.engine import Engine
from sqlmodel import Session
import logging

from app.core.context import RequestContext, get_request_context
from app.core.database import get_engine, get_session
from app.schemas.lesson import LessonView
from app.schemas.progress import CompleteLessonResponse, ProgressResponse, SaveCodeRequest
from app.services.lesson_service import get_lesson_view
from app.services.progress_service import mark_complete, save_code

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/lessons", tags=["lessons"])


@router.get("/{project_slug}/{lesson_slug}", response_model=LessonView)
async def get_lesson(
    project_slug: str,
    lesson_slug: str,
    context: RequestContext = Depends(get_request_context),
    engine: Engine = Depends(get_engine),
):
    """
    Get a lesson with its project and the caller's progress.

    Premium lessons come back with placeholder solution fields and
    `is_locked=true` unless the caller is on the pro or lifetime plan.
    """
    return await get_lesson_view(engine, context, project_slug, lesson_slug)


@router.post("/{lesson_id}/save", response_model=ProgressResponse)
def save_lesson_code(
    lesson_id: int,
    request: SaveCodeRequest,
    context: RequestContext = Depends(get_request_context),
    session: Session = Depends(get_session),
):
    """Save the caller's editor contents for a lesson."""
    user_id = context.require_user()
    progress = save_code(session, user_id, lesson_id, request.code)
    return ProgressResponse.model_validate(progress)


@router.post("/{lesson_id}/complete", response_model=CompleteLessonResponse, status_code=status.HTTP_200_OK)
def complete_lesson(
    lesson_id: int,
    context: RequestContext = Depends(get_request_context),
    session: Session = Depends(get_session),
):
    """
    Mark a lesson completed for the caller.

    Idempotent: repeating the call keeps the original completion time and
    does not count the lesson twice.
    """
    user_id = context.require_user()
    progress, first_completion = mark_complete(session, user_id, lesson_id)
    return CompleteLessonResponse(
        message="Lesson completed successfully" if first_completion else "Lesson already completed",
        first_completion=first_completion,
        progress=ProgressResponse.model_validate(progress),
    )
