"""
Submission history endpoint.
"""
from fastapi import APIRouter, Depends, Query
from sqlmodel import Session
from typing import List
import logging

from app.core.context import RequestContext, get_request_context
from app.core.database import get_session
from app.schemas.execution import SubmissionResponse
from app.services.submission_service import list_submissions

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/submissions", tags=["submissions"])


@router.get("", response_model=List[SubmissionResponse])
def get_submissions(
    lesson_id: int = Query(..., description="Lesson whose attempts to list"),
    limit: int = Query(20, ge=1, le=100, description="Maximum number of attempts to return"),
    context: RequestContext = Depends(get_request_context),
    session: Session = Depends(get_session),
):
    """The caller's execution attempts for a lesson, newest first."""
    user_id = context.require_user()
    submissions = list_submissions(session, user_id, lesson_id, limit=limit)
    return [SubmissionResponse.model_validate(s) for s in submissions]
