"""
User account endpoints.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.engine import Engine

from app.core.context import RequestContext, get_request_context
from app.core.database import get_engine
from app.schemas.dashboard import UserDataExport
from app.services.dashboard_service import export_user_data

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me/export", response_model=UserDataExport)
async def export_my_data(
    context: RequestContext = Depends(get_request_context),
    engine: Engine = Depends(get_engine),
):
    """Export the caller's profile, progress and code submissions."""
    return await export_user_data(engine, context)
