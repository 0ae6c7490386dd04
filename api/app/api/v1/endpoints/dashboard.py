"""
Dashboard and progress history endpoints.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.engine import Engine
from typing import List

from app.core.context import RequestContext, get_request_context
from app.core.database import get_engine
from app.schemas.dashboard import DashboardResponse
from app.schemas.progress import ProgressWithLesson
from app.services.dashboard_service import get_dashboard, list_user_progress

router = APIRouter(tags=["dashboard"])


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(
    context: RequestContext = Depends(get_request_context),
    engine: Engine = Depends(get_engine),
):
    """User stats, recent progress and current project."""
    return await get_dashboard(engine, context)


@router.get("/progress", response_model=List[ProgressWithLesson])
async def progress(
    context: RequestContext = Depends(get_request_context),
    engine: Engine = Depends(get_engine),
):
    return await list_user_progress(engine, context)
