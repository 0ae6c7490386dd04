"""
API v1 router aggregation.
"""
from fastapi import APIRouter
from app.api.v1.endpoints import projects, lessons, execution, submissions, dashboard, users

api_router = APIRouter()

# Include all endpoint routers
# Note: Each router already defines its own prefix, so we don't add another one here
api_router.include_router(projects.router)
api_router.include_router(lessons.router)
api_router.include_router(execution.router)
api_router.include_router(submissions.router)
api_router.include_router(dashboard.router)
api_router.include_router(users.router)
