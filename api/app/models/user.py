"""
User model.
"""
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime

from app.utils.timestamps import utc_datetime, utcnow

if TYPE_CHECKING:
    from app.models.user_progress import UserProgress
    from app.models.code_submission import CodeSubmission


class User(SQLModel, table=True):
    """User table - stores identity, subscription and completion stats."""
    __tablename__ = "user"

    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(unique=True, index=True)  # Unique username
    email: Optional[str] = Field(default=None, unique=True, index=True)  # Email address
    created_at: datetime = Field(default_factory=utcnow, sa_type=utc_datetime())

    # Written by the billing integration
    subscription_plan: Optional[str] = Field(default=None)  # 'free', 'hobby', 'pro', 'lifetime'
    subscription_status: Optional[str] = Field(default=None)

    # Written by the progress store on first completion
    total_lessons_completed: int = Field(default=0)
    last_active_at: Optional[datetime] = Field(default=None, sa_type=utc_datetime())

    # Relationships
    progress: List["UserProgress"] = Relationship(back_populates="user")
    code_submissions: List["CodeSubmission"] = Relationship(back_populates="user")
