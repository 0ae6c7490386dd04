"""
Lesson view schemas.
"""
from pydantic import BaseModel, Field
from typing import Optional

from app.schemas.project import ProjectSummary
from app.schemas.progress import ProgressResponse


class LessonContent(BaseModel):
    """Stored lesson fields as returned to learners."""
    id: int
    project_id: int
    slug: str
    title: str
    order: int
    estimated_minutes: int
    is_premium: bool
    problem_content: str
    solution_content: str
    explanation_content: str
    starter_code: str
    solution_code: str
    test_code: Optional[str] = None
    hints: Optional[str] = None

    class Config:
        from_attributes = True


class LessonView(LessonContent):
    """Lesson with its project, the caller's progress and lock state."""
    project: ProjectSummary
    user_progress: Optional[ProgressResponse] = None
    is_locked: bool = Field(..., description="True when solution fields were replaced with placeholders")
