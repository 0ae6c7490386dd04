"""
Dashboard and account schemas.
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from app.schemas.project import ProjectSummary
from app.schemas.progress import ProgressResponse, ProgressWithLesson
from app.schemas.execution import SubmissionResponse


class UserResponse(BaseModel):
    """User profile and learning stats."""
    id: int
    username: str
    email: Optional[str] = None
    created_at: datetime
    subscription_plan: Optional[str] = None
    subscription_status: Optional[str] = None
    total_lessons_completed: int = 0
    last_active_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class DashboardResponse(BaseModel):
    """Dashboard view for the current user."""
    user: UserResponse
    recent_progress: List[ProgressWithLesson] = Field(..., description="Most recently updated progress rows")
    total_lessons: int = Field(..., description="Number of lessons in the whole curriculum")
    completed_lessons: int = Field(..., description="Completed lessons among the recent progress rows")
    current_project: Optional[ProjectSummary] = Field(
        None, description="Project of the most recent in-progress lesson"
    )


class UserDataExport(BaseModel):
    """Everything this service stores about a user."""
    user: UserResponse
    progress: List[ProgressResponse]
    code_submissions: List[SubmissionResponse]
    exported_at: datetime
