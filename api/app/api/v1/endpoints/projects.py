"""
Project endpoints.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.engine import Engine
from typing import List

from app.core.context import RequestContext, get_request_context
from app.core.database import get_engine
from app.schemas.project import ProjectWithLessons
from app.services.project_service import get_project_view, list_projects

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("", response_model=List[ProjectWithLessons])
async def get_projects(
    context: RequestContext = Depends(get_request_context),
    engine: Engine = Depends(get_engine),
):
    """Published projects with ordered lessons, plus the caller's progress markers if logged in."""
    return await list_projects(engine, context)


@router.get("/{project_slug}", response_model=ProjectWithLessons)
async def get_project(
    project_slug: str,
    context: RequestContext = Depends(get_request_context),
    engine: Engine = Depends(get_engine),
):
    """A single project with its lessons."""
    return await get_project_view(engine, context, project_slug)
