"""
Project model.
"""
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime

from app.utils.timestamps import utc_datetime, utcnow

if TYPE_CHECKING:
    from app.models.lesson import Lesson


class Project(SQLModel, table=True):
    """Project table - ordered container of lessons (read-only for this service)."""
    __tablename__ = "project"

    id: Optional[int] = Field(default=None, primary_key=True)
    slug: str = Field(unique=True, index=True)
    title: str
    description: str
    difficulty: str  # 'beginner', 'intermediate' or 'advanced'
    category: str
    estimated_hours: int
    order: int = Field(unique=True)
    is_published: bool = Field(default=False)
    is_premium: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utcnow, sa_type=utc_datetime())
    updated_at: datetime = Field(default_factory=utcnow, sa_type=utc_datetime())

    # Relationships
    lessons: List["Lesson"] = Relationship(back_populates="project")
