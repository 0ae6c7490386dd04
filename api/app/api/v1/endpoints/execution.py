"""
Code execution endpoint.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.engine import Engine
from starlette.concurrency import run_in_threadpool
import logging

from app.core.context import RequestContext, get_request_context
from app.core.database import get_engine
from app.schemas.execution import ExecuteCodeRequest, ExecutionResult
from app.services.execution_service import run_code

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/execute", tags=["execution"])


@router.post("", response_model=ExecutionResult)
async def execute_code(
    request: ExecuteCodeRequest,
    context: RequestContext = Depends(get_request_context),
    engine: Engine = Depends(get_engine),
):
    """
    Run Python code in the sandbox for a lesson.

    Sandbox failures are reported in `error` with a 200 response so the
    editor can show them. Every call is recorded as a code submission.
    """
    user_id = context.require_user()
    return await run_in_threadpool(run_code, engine, user_id, request.lesson_id, request.code)
