"""
User progress schemas.
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from app.schemas.project import ProjectSummary


class SaveCodeRequest(BaseModel):
    """Request to save the editor contents for a lesson."""
    code: str = Field(..., description="Current editor contents")

    class Config:
        json_schema_extra = {
            "example": {
                "code": "def greet(name):\n    return f'Hello, {name}!'\n"
            }
        }


class ProgressResponse(BaseModel):
    """A single UserProgress row."""
    id: int
    user_id: int
    lesson_id: int
    status: str
    saved_code: Optional[str] = None
    completed_at: Optional[datetime] = None
    time_spent_minutes: int = 0
    hints_used: int = 0
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ProgressLesson(BaseModel):
    """Lesson metadata attached to a progress row, with its project."""
    id: int
    slug: str
    title: str
    order: int
    is_premium: bool
    project: ProjectSummary

    class Config:
        from_attributes = True


class ProgressWithLesson(ProgressResponse):
    """Progress row joined to its lesson and project."""
    lesson: ProgressLesson


class CompleteLessonResponse(BaseModel):
    """Response from lesson completion."""
    message: str = Field(..., description="Success message")
    first_completion: bool = Field(..., description="True if this call moved the lesson into 'completed'")
    progress: ProgressResponse
