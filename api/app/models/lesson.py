"""
Lesson model.
"""
from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import UniqueConstraint
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime

from app.utils.timestamps import utc_datetime, utcnow

if TYPE_CHECKING:
    from app.models.project import Project
    from app.models.user_progress import UserProgress


class Lesson(SQLModel, table=True):
    """Lesson table - curriculum content, one project per lesson (read-only for this service)."""
    __tablename__ = "lesson"
    __table_args__ = (
        UniqueConstraint("project_id", "slug", name="uq_lesson_project_slug"),
        UniqueConstraint("project_id", "order", name="uq_lesson_project_order"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="project.id", index=True)
    slug: str  # Unique within its project
    title: str
    order: int  # Sort key within project
    estimated_minutes: int = Field(default=20)
    is_premium: bool = Field(default=True)

    # Content
    problem_content: str
    solution_content: str
    explanation_content: str = Field(default="")
    starter_code: str
    solution_code: str
    test_code: Optional[str] = Field(default=None)
    hints: Optional[str] = Field(default=None)

    created_at: datetime = Field(default_factory=utcnow, sa_type=utc_datetime())
    updated_at: datetime = Field(default_factory=utcnow, sa_type=utc_datetime())

    # Relationships
    project: "Project" = Relationship(back_populates="lessons")
    progress: List["UserProgress"] = Relationship(back_populates="lesson")
