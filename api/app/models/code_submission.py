"""
CodeSubmission model.
"""
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, TYPE_CHECKING
from datetime import datetime

from app.utils.timestamps import utc_datetime, utcnow

if TYPE_CHECKING:
    from app.models.user import User


class CodeSubmission(SQLModel, table=True):
    """CodeSubmission table - append-only log of execution attempts."""
    __tablename__ = "code_submission"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    lesson_id: int = Field(foreign_key="lesson.id", index=True)
    code: str  # Verbatim snapshot of the submitted code
    output: Optional[str] = Field(default=None)
    error: Optional[str] = Field(default=None)
    passed: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utcnow, sa_type=utc_datetime())

    # Relationships
    user: "User" = Relationship(back_populates="code_submissions")
