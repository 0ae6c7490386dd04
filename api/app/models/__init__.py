"""
Models package - imports all models so SQLModel registers their tables.
"""
from app.models.enums import SubscriptionPlan, ProgressStatus, LessonAccess
from app.models.user import User
from app.models.project import Project
from app.models.lesson import Lesson
from app.models.user_progress import UserProgress
from app.models.code_submission import CodeSubmission

__all__ = [
    'SubscriptionPlan',
    'ProgressStatus',
    'LessonAccess',
    'User',
    'Project',
    'Lesson',
    'UserProgress',
    'CodeSubmission',
]
