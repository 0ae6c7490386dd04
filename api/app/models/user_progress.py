"""
UserProgress model.
"""
from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import UniqueConstraint
from typing import Optional, TYPE_CHECKING
from datetime import datetime

from app.utils.timestamps import utc_datetime, utcnow

if TYPE_CHECKING:
    from app.models.user import User
    from app.models.lesson import Lesson


class UserProgress(SQLModel, table=True):
    """UserProgress table - at most one row per (user, lesson), written only by upsert."""
    __tablename__ = "user_progress"
    __table_args__ = (
        UniqueConstraint("user_id", "lesson_id", name="uq_user_progress_user_lesson"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    lesson_id: int = Field(foreign_key="lesson.id", index=True)
    status: str = Field(index=True)  # 'in_progress' or 'completed'
    saved_code: Optional[str] = Field(default=None)
    completed_at: Optional[datetime] = Field(default=None, sa_type=utc_datetime())  # Set once, on first completion
    time_spent_minutes: int = Field(default=0)
    hints_used: int = Field(default=0)
    created_at: datetime = Field(default_factory=utcnow, sa_type=utc_datetime())
    updated_at: datetime = Field(default_factory=utcnow, sa_type=utc_datetime())

    # Relationships
    user: "User" = Relationship(back_populates="progress")
    lesson: "Lesson" = Relationship(back_populates="progress")
