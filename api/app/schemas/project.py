"""
Project and curriculum listing schemas.
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class ProjectSummary(BaseModel):
    """Project metadata without lessons."""
    id: int
    slug: str
    title: str
    description: str
    difficulty: str
    category: str
    estimated_hours: int
    order: int
    is_premium: bool

    class Config:
        from_attributes = True


class LessonProgressMarker(BaseModel):
    """The requesting user's progress on one lesson."""
    status: str = Field(..., description="'in_progress' or 'completed'")
    completed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class LessonSummary(BaseModel):
    """Lesson metadata shown in project listings (no content)."""
    id: int
    title: str
    slug: str
    order: int
    is_premium: bool
    estimated_minutes: int
    user_progress: Optional[LessonProgressMarker] = Field(
        None, description="Present only when a user is logged in and has progress on this lesson"
    )

    class Config:
        from_attributes = True


class ProjectWithLessons(ProjectSummary):
    """Project with its ordered lessons."""
    lessons: List[LessonSummary] = Field(default_factory=list)
